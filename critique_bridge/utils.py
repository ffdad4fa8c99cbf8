from __future__ import annotations

import math
from typing import Any

from .constants import LOG_PREVIEW_CHARS


def summarize_text(text: str, limit: int = LOG_PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "...(truncated)"


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: Any) -> str:
    # Integral floats print without a fractional part, the way JSON numbers display in the browser.
    if isinstance(value, bool) or value is None:
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
