"""Runtime values for KdnLang.

Values are plain Python objects: `int` for Number, `bool` for Boolean,
`str` for String and the `NULL` singleton for Null. Numbers are 64-bit
signed integers; arithmetic that leaves that range is an error. Because
`bool` is a subclass of `int`, every helper here checks for booleans
before numbers.
"""

from __future__ import annotations

from typing import Any

I64_MIN = -2 ** 63
I64_MAX = 2 ** 63 - 1


class NullVal:
    """Marker object for the KdnLang `null` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'null'


NULL = NullVal()


def is_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def in_i64_range(n: int) -> bool:
    return I64_MIN <= n <= I64_MAX


def type_name(value: Any) -> str:
    """Return the KdnLang kind name of a runtime value."""
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, int):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NullVal):
        return 'Null'
    return type(value).__name__


def to_display(value: Any) -> str:
    """Convert a value to the text `print` writes and `+` concatenates."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NullVal):
        return 'null'
    return str(value)


def is_truthy(value: Any) -> bool:
    # Truthiness rules: Boolean is itself, Number is nonzero,
    # String is nonempty, Null is always false.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, NullVal):
        return False
    raise TypeError(f"not a KdnLang value: {value!r}")


def truncating_divide(a: int, b: int) -> int:
    """Integer division rounding toward zero; `b` must be nonzero."""
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient
