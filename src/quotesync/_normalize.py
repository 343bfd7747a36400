"""Normalization helpers.

Centralizes lenient parsing of values coming off the wire or out of
user-supplied files.
"""

from __future__ import annotations

import math
from typing import Any


def safe_int(value: Any) -> int | None:
    """Parse an integral identity, returning ``None`` when not possible.

    Booleans and non-integral numbers are rejected rather than truncated.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None
    return None


def safe_str(value: Any) -> str | None:
    """Return stripped text, or ``None`` for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None
