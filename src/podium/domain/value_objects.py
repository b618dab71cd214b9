"""Module including value objects used across the domain layer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from podium.domain.errors import InvalidValueError


class SpeakerCategory(Enum):
    """Enumeration of speaker categories.

    The category decides the withholding rate applied to completed payments.
    """

    NATIONAL = "national"
    INTERNATIONAL = "international"
    EXPERT = "expert"
    SPECIAL_GUEST = "special_guest"


class BookingRole(Enum):
    """Role a speaker plays at an event."""

    KEYNOTE_SPEAKER = "keynote_speaker"
    PANELIST = "panelist"
    FACILITATOR = "facilitator"
    MODERATOR = "moderator"
    GUEST = "guest"


class Modality(Enum):
    """How the speaker takes part."""

    PRESENTIAL = "presential"
    VIRTUAL = "virtual"
    HYBRID = "hybrid"


class BookingStatus(Enum):
    """Booking lifecycle states."""

    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ContractStatus(Enum):
    """Contract lifecycle states."""

    DRAFT = "draft"
    SENT = "sent"
    SIGNED = "signed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class PaymentTerms(Enum):
    """How the agreed amount is going to be paid."""

    FULL_PAYMENT = "full_payment"
    ADVANCE_PAYMENT = "advance_payment"
    INSTALLMENTS = "installments"


class PaymentStatus(Enum):
    """Payment lifecycle states."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class PaymentType(Enum):
    """What a payment settles."""

    ADVANCE = "advance"
    FINAL = "final"
    INSTALLMENT = "installment"


class PaymentMethod(Enum):
    """How a payment is made."""

    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"
    PAYPAL = "paypal"
    OTHER = "other"


_DOCUMENT_NUMBER_RE = re.compile(r"^(?P<prefix>[A-Z]+)-(?P<year>\d{4})-(?P<seq>\d{4,})$")


@dataclass(frozen=True, slots=True)
class DocumentNumber:
    """Human-readable yearly document number, e.g. ``CTR-2025-0007``.

    The sequence is 1-based and zero-padded to four digits; it keeps growing
    past 9999 rather than wrapping.
    """

    CONTRACT_PREFIX = "CTR"
    PAYMENT_PREFIX = "PAY"

    prefix: str
    year: int
    sequence: int

    def __post_init__(self) -> None:
        if self.sequence < 1:
            raise InvalidValueError("sequence", self.sequence, "must be >= 1")
        if not 1 <= self.year <= 9999:
            raise InvalidValueError("year", self.year, "must have four digits")

    def __str__(self) -> str:
        return f"{self.prefix}-{self.year:04d}-{self.sequence:04d}"

    @classmethod
    def parse(cls, text: str) -> DocumentNumber:
        """Parse a formatted document number.

        Raises:
            InvalidValueError: If `text` is not of the form ``PREFIX-YYYY-NNNN``.
        """
        if not (match := _DOCUMENT_NUMBER_RE.match(text)):
            raise InvalidValueError("document number", text, "expected PREFIX-YYYY-NNNN")
        return cls(match["prefix"], int(match["year"]), int(match["seq"]))
