"""
core/dosha.py
────────────────────────────────────────────────────────────────────────
Closed vocabularies shared by every stage of the engine.

All lookup tables are keyed by these enums rather than by free strings,
so a typo fails at import time instead of silently returning nothing.
Each enum subclasses `str`, which keeps `pct["vata"]` and
`pct[DoshaAxis.VATA]` interchangeable for callers holding plain strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict

from core.errors import UnknownAxis


class DoshaAxis(str, Enum):
    VATA = "vata"
    PITTA = "pitta"
    KAPHA = "kapha"

    def __str__(self) -> str:
        return self.value


class Rasa(str, Enum):
    SWEET = "sweet"
    SOUR = "sour"
    SALTY = "salty"
    PUNGENT = "pungent"
    BITTER = "bitter"
    ASTRINGENT = "astringent"


class MealSlot(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"


class ActivityLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    MONSOON = "monsoon"
    WINTER = "winter"


# axis -> integer point total
ScoreVector = Dict[DoshaAxis, int]
# axis -> share of the total, 0..100
PercentageVector = Dict[DoshaAxis, float]

AXES: tuple[DoshaAxis, ...] = tuple(DoshaAxis)


def coerce_axis(value: object) -> DoshaAxis:
    """Map a raw string/enum onto the closed axis set or raise `UnknownAxis`."""
    if isinstance(value, DoshaAxis):
        return value
    if isinstance(value, str):
        try:
            return DoshaAxis(value.strip().lower())
        except ValueError:
            pass
    raise UnknownAxis(value)
