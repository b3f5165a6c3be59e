"""
Helpers shared by the EDID decoder modules.

:author: Doug Skrypa
"""

from __future__ import annotations

import math
from dataclasses import fields
from typing import Any, Optional

__all__ = ['Record', 'round_half_up', 'diagonal_mm', 'diagonal_inches', 'MM_PER_INCH']

MM_PER_INCH = 25.4


class Record:
    """Mixin for decoded dataclass records that allows them to be serialized to JSON / YAML."""

    def __serializable__(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.repr}  # noqa


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _is_finite(value: Optional[float]) -> bool:
    try:
        return value is not None and math.isfinite(value)
    except TypeError:
        return False


def diagonal_mm(width_mm: Optional[float], height_mm: Optional[float]) -> Optional[float]:
    """
    :param width_mm: Width in millimeters
    :param height_mm: Height in millimeters
    :return: The diagonal length in millimeters, rounded to 1 decimal place, or None if either value is missing or is
      not a finite number
    """
    if not (_is_finite(width_mm) and _is_finite(height_mm)):
        return None
    return round_half_up(math.hypot(width_mm, height_mm) * 10) / 10


def diagonal_inches(width_mm: Optional[float], height_mm: Optional[float]) -> Optional[float]:
    if not (_is_finite(width_mm) and _is_finite(height_mm)):
        return None
    return round_half_up(math.hypot(width_mm, height_mm) / MM_PER_INCH * 10) / 10
