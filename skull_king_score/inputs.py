# skull_king_score/inputs.py
from __future__ import annotations

import math
import re
import sys
from typing import Any

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_leading_int(raw: Any) -> int | None:
    """
    Parse the leading integer of `raw`, the way a lenient text field would.

    "3", " 3 plis" and "3.7" all give 3; "abc" and "" give None.
    """
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return None
    digits = match.group(1)
    try:
        return int(digits)
    except ValueError:
        # Longer than the interpreter's int-string limit: saturate.
        return -sys.maxsize if digits.startswith("-") else sys.maxsize


def clamp_number(raw: Any, minimum: int = 0, maximum: int = 99) -> int:
    """Clamp the leading integer of `raw` to [minimum, maximum]; junk -> minimum."""
    parsed = parse_leading_int(raw)
    if parsed is None:
        return minimum
    return min(max(parsed, minimum), maximum)


def to_int(raw: Any) -> int:
    """
    Coerce a bonus-like value to an int with no range limits.

    Any finite number is accepted (fractions are truncated); anything
    non-numeric, empty or non-finite becomes 0.
    """
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0
    if raw is None:
        return 0
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return 0
    if not math.isfinite(value):
        return 0
    return int(value)
