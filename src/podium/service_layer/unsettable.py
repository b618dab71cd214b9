"""Partial updates: telling "leave it" apart from "clear it".

A revision command field typed ``Unsettable[T]`` holds one of:

``UNSET``
    not part of this revision; the current value stays.
``None``
    clear the value. Only some fields may be cleared.
a ``T``
    the new value.

`ReviseContractTerms` is the main user.
"""

import enum
from typing import Literal, TypeVar, overload

from podium.domain.errors import InvalidValueError


class _Unset(enum.Enum):
    # a one-member enum is a singleton that survives pickling and copying
    UNSET = "UNSET"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return self.value


UNSET = _Unset.UNSET

T = TypeVar("T")
type Unsettable[T] = T | _Unset | None


@overload
def resolve(
    value: T | _Unset | None, current: T, *, clearable: Literal[False], field: str
) -> T: ...
@overload
def resolve(
    value: T | _Unset | None, current: T, *, clearable: Literal[True], field: str
) -> T | None: ...
def resolve(
    value: T | _Unset | None, current: T, *, clearable: bool, field: str
) -> T | None:
    """Value of `field` after the revision.

    Raises:
        InvalidValueError: `value` is None but `field` may not be cleared.
    """
    if value is UNSET:
        return current
    if value is None and not clearable:
        raise InvalidValueError(field, None, "cannot be cleared")
    return value  # type: ignore[return-value]
