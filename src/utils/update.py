"""
Partial update helpers.

Request bodies for PATCH-style operations distinguish three states per field:
absent (leave alone), explicit null (clear), and a value (set). `UNSET` marks
the first state so that `None` can keep meaning "clear".
"""

from typing import Any, TypeVar

T = TypeVar("T")


class _Unset:
    """Marker type for a field that was not supplied."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def get_updated_value(value: Any, original: T) -> T:
    """Return `original` when `value` is UNSET, otherwise `value`."""
    if value is UNSET:
        return original
    return value
