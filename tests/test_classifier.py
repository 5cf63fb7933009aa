# tests/test_classifier.py
from __future__ import annotations

import pytest

from core.classifier import LabelKind, classify, dominant_axis, rank
from core.dosha import DoshaAxis
from core.errors import UnknownAxis


@pytest.mark.parametrize(
    "pct, expected",
    [
        ({"vata": 60, "pitta": 25, "kapha": 15}, "vata-dominant"),
        ({"vata": 59.9, "pitta": 25, "kapha": 15.1}, "vata-pitta"),
        ({"vata": 45, "pitta": 35, "kapha": 20}, "vata-pitta"),
        ({"vata": 36, "pitta": 34, "kapha": 30}, "tri-doshic (balanced)"),
        ({"vata": 20, "pitta": 30, "kapha": 50}, "kapha-pitta"),
        ({"vata": 62.5, "pitta": 37.5, "kapha": 0}, "vata-dominant"),
        ({"vata": 0, "pitta": 100, "kapha": 0}, "pitta-dominant"),
    ],
)
def test_classification_rules(pct, expected):
    assert str(classify(pct)) == expected


def test_dual_rule_boundaries_inclusive():
    label = classify({"vata": 40, "pitta": 30, "kapha": 30})
    assert label.kind is LabelKind.DUAL
    assert label.axes == (DoshaAxis.VATA, DoshaAxis.PITTA)


def test_strong_single_beats_tied_remainder():
    assert str(classify({"kapha": 60, "vata": 20, "pitta": 20})) == "kapha-dominant"


def test_near_tie_below_dual_threshold_is_balanced():
    assert classify({"vata": 38, "pitta": 33, "kapha": 29}).kind is LabelKind.BALANCED
    assert classify({"vata": 39, "pitta": 33, "kapha": 28}).kind is LabelKind.BALANCED


def test_wide_spread_falls_back_to_dual():
    # second < 30 and top gap > 10
    assert str(classify({"vata": 55, "pitta": 25, "kapha": 20})) == "vata-pitta"


def test_classification_is_idempotent():
    pct = {"vata": 41.2, "pitta": 29.9, "kapha": 28.9}
    assert classify(pct) == classify(pct)


def test_ties_keep_axis_order():
    assert dominant_axis({"vata": 40, "pitta": 40, "kapha": 20}) is DoshaAxis.VATA
    assert [a for a, _ in rank({"kapha": 50, "pitta": 50})] == [
        DoshaAxis.PITTA,
        DoshaAxis.KAPHA,
        DoshaAxis.VATA,
    ]


def test_unknown_axis_key():
    with pytest.raises(UnknownAxis):
        classify({"vata": 50, "ether": 50})
