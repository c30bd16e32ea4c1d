"""CSS value helpers shared by the style compiler and the schema."""

from __future__ import annotations

import math
import numbers
from decimal import Decimal

UNIT_TOKENS = ("px", "em", "rem", "%", "vw", "vh")
KEYWORD_VALUES = {"auto", "none"}


def _is_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (numbers.Real, Decimal)):
        try:
            return math.isfinite(value)
        except OverflowError:
            # ints beyond float range are still finite
            return True
        except ValueError:
            return False
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return False
        try:
            return math.isfinite(float(text))
        except ValueError:
            return False
    return False


def _format_number(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value.strip()
    return str(value)


def normalize_unit(value: object, default_unit: str = "px") -> str:
    """Turn a raw attribute value into a CSS value string.

    Empty values yield ``""`` so the caller can omit the declaration. Strings
    that already carry a unit (or are ``auto``/``none``) pass through, bare
    numbers get ``default_unit`` appended, everything else is stringified.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        if not value.strip():
            return ""
        if value in KEYWORD_VALUES or any(token in value for token in UNIT_TOKENS):
            return value
    if _is_number(value):
        return f"{_format_number(value)}{default_unit}"
    return str(value)


def is_set(value: object) -> bool:
    """Attribute presence as seen by the compiler: ``0`` counts, ``False`` does not."""
    if value is None or value is False:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def is_truthy_flag(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
