"""
core/classifier.py
────────────────────────────────────────────────────────────────────────
Percentage vector → constitution label.

Rules are evaluated in this order, first match wins:

    1. first ≥ 60                                  → "<first>-dominant"
    2. first ≥ 40 and second ≥ 30                  → "<first>-<second>"
    3. |first−second| ≤ 10 and |second−third| ≤ 10 → "tri-doshic (balanced)"
    4. otherwise                                   → "<first>-<second>"

Percentages are compared exactly as computed; no rounding happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Tuple

from core.dosha import AXES, DoshaAxis, PercentageVector, coerce_axis

SINGLE_DOMINANT_AT = 60.0
DUAL_FIRST_AT = 40.0
DUAL_SECOND_AT = 30.0
BALANCED_SPREAD = 10.0

BALANCED_TEXT = "tri-doshic (balanced)"


class LabelKind(str, Enum):
    SINGLE = "single"
    DUAL = "dual"
    BALANCED = "balanced"


@dataclass(frozen=True)
class ConstitutionLabel:
    kind: LabelKind
    axes: Tuple[DoshaAxis, ...]     # ranked; empty for BALANCED

    def __str__(self) -> str:
        if self.kind is LabelKind.SINGLE:
            return f"{self.axes[0].value}-dominant"
        if self.kind is LabelKind.DUAL:
            return f"{self.axes[0].value}-{self.axes[1].value}"
        return BALANCED_TEXT

    @property
    def text(self) -> str:
        return str(self)


def _normalise(percentages: Mapping[str, float]) -> PercentageVector:
    out: PercentageVector = {axis: 0.0 for axis in AXES}
    for key, value in percentages.items():
        out[coerce_axis(key)] = float(value)
    return out


def rank(percentages: Mapping[str, float]) -> List[Tuple[DoshaAxis, float]]:
    """Axes by descending share; equal shares keep vata → pitta → kapha order."""
    pct = _normalise(percentages)
    return sorted(((axis, pct[axis]) for axis in AXES), key=lambda kv: kv[1], reverse=True)


def dominant_axis(percentages: Mapping[str, float]) -> DoshaAxis:
    return rank(percentages)[0][0]


def classify(percentages: Mapping[str, float]) -> ConstitutionLabel:
    (first, p1), (second, p2), (_, p3) = rank(percentages)

    if p1 >= SINGLE_DOMINANT_AT:
        return ConstitutionLabel(LabelKind.SINGLE, (first,))
    if p1 >= DUAL_FIRST_AT and p2 >= DUAL_SECOND_AT:
        return ConstitutionLabel(LabelKind.DUAL, (first, second))
    if abs(p1 - p2) <= BALANCED_SPREAD and abs(p2 - p3) <= BALANCED_SPREAD:
        return ConstitutionLabel(LabelKind.BALANCED, ())
    return ConstitutionLabel(LabelKind.DUAL, (first, second))
