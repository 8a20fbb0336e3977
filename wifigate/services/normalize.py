"""
Lenient input coercion shared by the configuration and view write paths.

Numeric fields never reject input: anything that does not parse falls back
to the field default. Optional text fields treat empty values as missing.
"""

import math
import re

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')

# Largest value an integer column holds on every supported store
MAX_INT = 2**31 - 1


class MissingFieldError(ValueError):
    """Raised when a required field is absent or empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


def coerce_int(value, default: int, minimum: int | None = None, maximum: int | None = None) -> int:
    """Parse the leading integer of value, falling back to default.

    Zero and values outside minimum..maximum also yield the default.
    """
    result = None
    if isinstance(value, bool) or value is None:
        result = None
    elif isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if math.isfinite(value):
            result = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            try:
                result = int(match.group(1))
            except ValueError:
                # Digit strings past the interpreter conversion limit
                result = None

    if not result:
        return default
    if minimum is not None and result < minimum:
        return default
    if maximum is not None and result > maximum:
        return default
    return result


def coerce_bool(value) -> bool:
    return bool(value)


def optional_text(value) -> str | None:
    """Return value as a stripped string, or None when it is empty."""
    if value is None or value is False:
        return None
    text = str(value).strip()
    return text or None


def require_text(value, field: str) -> str:
    text = optional_text(value)
    if text is None:
        raise MissingFieldError(field)
    return text
