# tests/test_progress.py
from __future__ import annotations

import math

from core.progress import ProgressTracker, adherence_level, adherence_score

ALL = {"breakfast": True, "lunch": True, "dinner": True, "snacks": True}
HALF = {"breakfast": True, "lunch": True, "dinner": False, "snacks": False}
NO_DINNER = {"breakfast": True, "lunch": True, "dinner": False}

ADHERENCE = [
    {"date": "2024-03-01", "meals": HALF},
    {"date": "2024-03-02", "meals": NO_DINNER},
    {"date": "2024-03-03", "meals": ALL},
    {"date": "2024-03-04", "meals": ALL},
    {"date": "2024-03-05", "meals": ALL},
]

WEIGHTS = [
    {"date": "2024-03-01", "weight": 80.0},
    {"date": "2024-03-08", "weight": 79.0},
    {"date": "2024-03-15", "weight": 78.0},
]


# ── adherence_score ──────────────────────────────────────────────────
def test_adherence_score_rounds():
    assert adherence_score(ALL) == 100
    assert adherence_score(HALF) == 50
    assert adherence_score(NO_DINNER) == 67
    assert adherence_score({}) == 0


def test_adherence_levels():
    assert adherence_level(75) == "High"
    assert adherence_level(74.9) == "Medium"
    assert adherence_level(50) == "Medium"
    assert adherence_level(49) == "Low"


# ── tracker ──────────────────────────────────────────────────────────
tracker = ProgressTracker(ADHERENCE, WEIGHTS)


def test_average_and_streak():
    expected = (50 + 67 + 100 + 100 + 100) / 5
    assert math.isclose(tracker.average_adherence(7), round(expected, 1))
    assert tracker.average_adherence(3) == 100.0
    assert tracker.perfect_streak() == 3


def test_average_counts_calendar_days_not_entries():
    # a nine-day gap: only the 03-10 log falls in the last week
    t = ProgressTracker([{"date": "2024-03-01", "meals": HALF}, {"date": "2024-03-10", "meals": ALL}])
    assert t.average_adherence(7) == 100.0
    assert t.average_adherence(10) == 75.0


def test_same_day_last_log_wins():
    t = ProgressTracker([{"date": "2024-03-01", "meals": HALF}, {"date": "2024-03-01", "meals": ALL}])
    assert t.average_adherence() == 100.0


def test_weekly_adherence_buckets():
    weekly = tracker.weekly_adherence()
    # 2024-03-03 is a Sunday, so the first three days close the first week
    assert list(weekly) == ["2024-03-03", "2024-03-10"]
    assert weekly["2024-03-10"] == 100.0


def test_weight_change_and_trend():
    assert tracker.weight_change() == -1.0
    assert math.isclose(tracker.weight_trend_per_week(), -1.0, abs_tol=1e-6)


def test_weight_needs_two_points():
    t = ProgressTracker(ADHERENCE, WEIGHTS[:1])
    assert t.weight_change() is None
    assert t.weight_trend_per_week() is None


def test_insights_short_duration():
    ins = tracker.insights(5)
    assert ins.adherence_level == "High"
    assert "3-day perfect adherence streak" in ins.improvements
    assert any("Weight trending down" in s for s in ins.improvements)
    assert ins.next_steps == ["Continue the current plan for one more week"]
    # dinner followed on 3 of 5 days
    assert not any("Dinner" in c for c in ins.challenges)


def test_insights_advance_after_two_weeks():
    ins = tracker.insights(14)
    assert ins.next_steps == ["Ready to advance to the next phase of the plan"]


def test_insights_low_adherence():
    poor = [{"date": f"2024-04-0{d}", "meals": {"breakfast": False, "lunch": True, "dinner": False}} for d in range(1, 8)]
    ins = ProgressTracker(poor).insights(7)
    assert ins.adherence_level == "Low"
    assert "Meal plan adherence is below 50%" in ins.challenges
    assert "Breakfast is often skipped or off-plan" in ins.challenges
    assert ins.next_steps == ["Review the plan with your doctor"]


def test_empty_tracker():
    ins = ProgressTracker().insights(7)
    assert ins.adherence_score == 0.0
    assert ins.perfect_streak == 0
    assert ins.weight_change is None
    assert ins.challenges == []
