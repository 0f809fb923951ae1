"""Frame values and comparison helpers for :mod:`flowctx` property stacks."""

from enum import Enum


class _Marker(Enum):
    EXPLICIT_NULL = "explicit-null"

    def __repr__(self) -> str:
        return "EXPLICIT_NULL"


EXPLICIT_NULL = _Marker.EXPLICIT_NULL
"""Stack frame for a property that was explicitly set to ``None``."""

Frame = str | _Marker


def is_not_blank(name: str | None) -> bool:
    """Return ``True`` for a usable property name."""
    return name is not None and name.strip() != ""


def is_null(frame: Frame | None) -> bool:
    return frame is None or frame is EXPLICIT_NULL


def values_equal(current: Frame | None, value: str | None) -> bool:
    """
    Compare the current top frame of a property with an incoming value.

    An empty stack and an explicit-null frame are both equal to ``None``;
    strings compare by equality.
    """
    if is_null(current):
        return value is None
    return current == value


def to_frame(value: str | None) -> Frame:
    return EXPLICIT_NULL if value is None else value


def from_frame(frame: Frame | None) -> str | None:
    return None if is_null(frame) else frame  # type: ignore[return-value]
