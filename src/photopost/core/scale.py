from __future__ import annotations

import math
import re
from typing import Any

SCALE_STEP = 25
SCALE_MIN = 25
SCALE_MAX = 100
SCALE_DEFAULT = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_percent(raw: Any) -> int:
    """
    Parse "75%", 75, 75.0 -> 75. Anything non-numeric becomes SCALE_DEFAULT.

    Strings are read like a form field: leading integer digits, the rest ignored.
    """
    if isinstance(raw, bool):
        return SCALE_DEFAULT
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and (math.isnan(raw) or math.isinf(raw)):
            return SCALE_DEFAULT
        return int(raw)
    if isinstance(raw, str):
        m = _LEADING_INT.match(raw)
        if m:
            return int(m.group(1))
    return SCALE_DEFAULT


class ScaleController:
    """Zoom percentage for the preview: 25..100 in steps of 25. Out-of-range input clamps."""

    def __init__(self, value: Any = SCALE_DEFAULT):
        self._value = SCALE_DEFAULT
        self.set_value(value)

    @property
    def value(self) -> int:
        return self._value

    @property
    def label(self) -> str:
        return f"{self._value}%"

    def set_value(self, raw: Any) -> int:
        p = parse_percent(raw)
        p = min(max(p, SCALE_MIN), SCALE_MAX)
        # snap to the step grid anchored at SCALE_MIN
        steps = int(math.floor((p - SCALE_MIN) / SCALE_STEP + 0.5))
        self._value = SCALE_MIN + steps * SCALE_STEP
        return self._value

    def increase(self) -> int:
        return self.set_value(self._value + SCALE_STEP)

    def decrease(self) -> int:
        return self.set_value(self._value - SCALE_STEP)

    def reset(self) -> int:
        self._value = SCALE_DEFAULT
        return self._value

    def current_transform(self) -> float:
        return self._value / 100

    def __repr__(self) -> str:
        return f"ScaleController({self._value})"
