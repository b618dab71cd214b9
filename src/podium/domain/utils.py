"""Domain layer utilities."""

from datetime import datetime, timedelta, timezone


def is_aware(value: datetime) -> bool:
    """Return True if `value` carries a usable UTC offset."""
    return value.tzinfo is not None and value.utcoffset() is not None


def to_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to UTC.

    Raises:
        ValueError: If `value` is naive.
    """
    if not is_aware(value):
        raise ValueError(f"datetime {value!r} must be timezone-aware")
    return value.astimezone(timezone.utc)


def format_instant(value: datetime) -> str:
    """Serialize an aware datetime as a UTC ISO-8601 string (event payloads)."""
    return to_utc(value).isoformat()


def parse_instant(text: str) -> datetime:
    """Inverse of `format_instant`."""
    parsed = datetime.fromisoformat(text)
    if parsed.utcoffset() is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_optional_instant(text: str | None) -> datetime | None:
    """`parse_instant` that passes ``None`` through."""
    return None if text is None else parse_instant(text)


ONE_DAY = timedelta(days=1)
