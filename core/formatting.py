from __future__ import annotations

import math
from typing import List

BYTE_UNITS: List[str] = ["Bytes", "KB", "MB", "GB", "TB"]
BYTE_BASE = 1024


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round like Math.round: halves go up, never to the nearest even number.
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _trim_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def format_bytes(num_bytes: float) -> str:
    """
    1536 -> "1.5 KB". The unit is picked from floor(log1024(bytes)),
    the scaled value is rounded to two decimals.
    """
    if num_bytes < 0:
        raise ValueError(f"byte count must be non-negative, got {num_bytes}")
    if num_bytes == 0:
        return "0 Bytes"

    exponent = math.floor(math.log(num_bytes) / math.log(BYTE_BASE))
    exponent = max(0, min(exponent, len(BYTE_UNITS) - 1))

    value = round_half_up(num_bytes / BYTE_BASE ** exponent, 2)
    return f"{_trim_number(value)} {BYTE_UNITS[exponent]}"


def percentage(part: float, whole: float) -> int:
    if whole <= 0:
        return 0
    return int(round_half_up(part / whole * 100))
