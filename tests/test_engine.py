# tests/test_engine.py
from __future__ import annotations

import random

import pytest

from core.assessment import ENHANCED_QUESTIONS, answers_from_choices
from core.dosha import DoshaAxis, MealSlot
from core.engine import LOW_ENERGY_REC, POOR_DIGESTION_REC, PlanEngine
from core.engine_config import EngineConfig
from core.errors import EmptyAssessment
from core.food_tables import EXPECTED_BENEFITS
from core.models.patient import DemographicProfile
from core.models.plan import PlanFeedback

engine = PlanEngine(EngineConfig(assessment_mode="enhanced"), random.Random(3))

# every enhanced answer kapha except the two mental-state questions
CHOICES = {q.id: "kapha" for q in ENHANCED_QUESTIONS}
CHOICES.update({7: "vata", 8: "vata"})
ITEMS = answers_from_choices(ENHANCED_QUESTIONS, CHOICES)
DEMO = DemographicProfile(age=22, goals=["Better Sleep"], health=["digestive issues"])

REPORT = engine.generate_complete_plan(ITEMS, DEMO)


# ── full run ─────────────────────────────────────────────────────────
def test_report_assessment_block():
    a = REPORT.assessment
    assert a.dominant is DoshaAxis.KAPHA
    assert a.scores == {DoshaAxis.VATA: 4, DoshaAxis.PITTA: 0, DoshaAxis.KAPHA: 22}
    assert a.constitution == "kapha-dominant"
    assert a.personality_traits[0] == "stability"


def test_report_summary():
    s = REPORT.summary
    assert s.key_recommendations[0] == "Your primary dosha is Kapha"
    assert s.key_recommendations[1] == "Constitution type: kapha-dominant"
    assert s.key_recommendations[2:5] == REPORT.plan.recommendations[:3]
    assert s.key_recommendations[-1] == "Follow the personalized diet plan for best results"
    assert "Digestive Health" in s.focus_areas
    assert "Sleep Quality" in s.focus_areas
    assert s.expected_benefits[:4] == list(EXPECTED_BENEFITS[DoshaAxis.KAPHA])
    assert "Deeper, more restful sleep" in s.expected_benefits


def test_report_plan_carries_modifiers():
    plan = REPORT.plan
    assert plan.health_adjustments == ["Focus on easily digestible foods, proper food combining"]
    assert "Establish healthy habits early in life" in plan.recommendations
    assert "Eat mindfully and chew food thoroughly" in plan.recommendations


def test_mode_defaults_to_config():
    assert len(engine.questions()) == 12
    assert len(engine.questions("basic")) == 8


def test_empty_answers_fail():
    with pytest.raises(EmptyAssessment):
        engine.generate_complete_plan([])


# ── feedback ─────────────────────────────────────────────────────────
def test_feedback_appends_without_mutating():
    before = list(REPORT.plan.recommendations)
    updated = engine.update_plan_with_feedback(
        REPORT.plan, PlanFeedback(energy_level="Low", digestion="poor")
    )
    assert REPORT.plan.recommendations == before
    assert updated.recommendations[-2:] == [LOW_ENERGY_REC, POOR_DIGESTION_REC]


def test_feedback_is_not_duplicated():
    once = engine.update_plan_with_feedback(REPORT.plan, PlanFeedback(energy_level="low"))
    twice = engine.update_plan_with_feedback(once, PlanFeedback(energy_level="low"))
    assert twice.recommendations.count(LOW_ENERGY_REC) == 1


def test_neutral_feedback_changes_nothing():
    same = engine.update_plan_with_feedback(REPORT.plan, PlanFeedback(energy_level="high", digestion="good"))
    assert same.recommendations == REPORT.plan.recommendations


# ── exports ──────────────────────────────────────────────────────────
def test_export_for_doctor_review():
    out = engine.export_for_doctor_review(REPORT, patient_id=17)
    assert out["patient_id"] == 17
    assert out["dosha"] == "kapha"
    assert out["scores"] == {"vata": 4, "pitta": 0, "kapha": 22}
    assert set(out["meals"]) == {"breakfast", "lunch", "dinner", "snacks"}
    assert out["requires_review"] is True


def test_shopping_list_groups_items():
    shop = engine.generate_shopping_list(REPORT.plan)
    assert shop["spices"] == sorted(set(REPORT.plan.spices))
    assert set(shop["grains"]) == set(
        REPORT.plan.meals[MealSlot.LUNCH].by_category["grains"]
        + REPORT.plan.meals[MealSlot.BREAKFAST].by_category["grains"]
        + REPORT.plan.meals[MealSlot.DINNER].by_category["grains"]
    )
    for names in shop.values():
        assert names == sorted(set(names))


def test_shopping_list_keeps_doctor_added_items():
    plan = REPORT.plan.model_copy(deep=True)
    plan.meals[MealSlot.DINNER].items.append("Khichdi")
    assert engine.generate_shopping_list(plan)["other"] == ["Khichdi"]
