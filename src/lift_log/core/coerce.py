"""
Parse-with-default helpers for raw user input.

Used once at the input boundary so the rest of the core works with
real numbers only.  Failures fall back to a safe sentinel instead of
leaking NaN into aggregates.
"""

import math
from typing import Any


def to_int(value: Any, default: int = 0) -> int:
    """
    Coerce a raw value to int, returning ``default`` on failure.

    Accepts ints, integral floats and numeric strings ("8", " 8 ", "8.0").
    Blank strings, None, booleans, NaN and infinities yield ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    text = str(value).strip()
    if not text:
        return default
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return default
    return int(number) if math.isfinite(number) else default


def to_float(value: Any, default: float = 0.0) -> float:
    """
    Coerce a raw value to float, returning ``default`` on failure.

    A trailing "kg" unit is tolerated ("42.5kg").
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else default
    text = str(value).strip().lower()
    if text.endswith("kg"):
        text = text[:-2].strip()
    if not text:
        return default
    try:
        number = float(text)
    except ValueError:
        return default
    return number if math.isfinite(number) else default
