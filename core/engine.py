"""
core/engine.py
────────────────────────────────────────────────────────────────────────
One configurable engine in front of the three stages.

    answered items ──► AssessmentCalculator ──► classify ──► PlanComposer
                                                               │
                                       PlanReport ◄────────────┘

Also hosts the small post-processing helpers that work on a finished
plan: feedback rules, doctor-review export and the shopping list.
None of them mutate their inputs.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Sequence

from core.assessment import AnsweredItem, AssessmentCalculator, Question, questionnaire
from core.dosha import AXES, DoshaAxis
from core.engine_config import EngineConfig
from core.food_tables import CATEGORIES, EXPECTED_BENEFITS, FOODS
from core.models.patient import DemographicProfile
from core.models.plan import (
    AssessmentSummary,
    PlanDocument,
    PlanFeedback,
    PlanReport,
    PlanSummary,
)
from core.plan_composer import PlanComposer

_LOG = logging.getLogger(__name__)

LOW_ENERGY_REC = "Consider adding more warming spices and proteins"
POOR_DIGESTION_REC = "Focus on lighter, more easily digestible foods"

_IMBALANCE_FOCUS = (
    ("digest", "Digestive Health"),
    ("anxiety", "Stress Management"),
    ("irritab", "Emotional Balance"),
    ("lethargy", "Energy & Vitality"),
    ("low activity", "Energy & Vitality"),
)

_GOAL_FOCUS = {
    "weight management": "Healthy Weight Management",
    "better sleep": "Sleep Quality",
    "increased energy": "Energy & Vitality",
}

_GOAL_BENEFITS = {
    "weight management": "Gradual, sustainable weight balance",
    "better sleep": "Deeper, more restful sleep",
    "increased energy": "Steadier energy throughout the day",
}


def _dedupe(seq: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for s in seq:
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


class PlanEngine:
    def __init__(self, config: EngineConfig | None = None, rng: random.Random | None = None) -> None:
        self.config = config or EngineConfig()
        self.composer = PlanComposer(self.config, rng)

    def questions(self, mode: str | None = None) -> tuple[Question, ...]:
        return questionnaire(mode or self.config.assessment_mode)

    # ───────────────────────────── full run ───────────────────────── #
    def generate_complete_plan(
        self,
        items: Sequence[AnsweredItem],
        demographics: DemographicProfile | None = None,
        questions: Sequence[Question] | None = None,
    ) -> PlanReport:
        result = AssessmentCalculator(questions or self.questions()).evaluate(items, demographics)
        _LOG.debug("assessment %s → %s", dict(result.scores), result.constitution)

        plan = self.composer.compose(
            result.constitution, result.dominant, result.percentages, demographics
        )
        assessment = AssessmentSummary(
            scores=result.scores,
            percentages=result.percentages,
            dominant=result.dominant,
            constitution=result.constitution.text,
            category_breakdown=result.category_breakdown,
            strengths=result.strengths,
            imbalances=result.imbalances,
            personality_traits=result.personality_traits,
        )
        goals = demographics.goals if demographics is not None else []
        summary = PlanSummary(
            primary_dosha=result.dominant,
            constitution=result.constitution.text,
            key_recommendations=[
                f"Your primary dosha is {result.dominant.value.capitalize()}",
                f"Constitution type: {result.constitution.text}",
                *plan.recommendations[:3],
                "Follow the personalized diet plan for best results",
            ],
            focus_areas=self.focus_areas(result.imbalances, goals),
            expected_benefits=self.expected_benefits(result.dominant, goals),
        )
        return PlanReport(assessment=assessment, plan=plan, summary=summary)

    @staticmethod
    def focus_areas(imbalances: Sequence[str], goals: Sequence[str]) -> List[str]:
        areas: List[str] = []
        for text in imbalances:
            low = text.lower()
            areas.extend(area for needle, area in _IMBALANCE_FOCUS if needle in low)
        for g in goals:
            area = _GOAL_FOCUS.get(g.strip().lower())
            if area:
                areas.append(area)
        return _dedupe(areas) or ["Overall Dosha Balance"]

    @staticmethod
    def expected_benefits(axis: DoshaAxis, goals: Sequence[str]) -> List[str]:
        benefits = list(EXPECTED_BENEFITS[axis])
        for g in goals:
            b = _GOAL_BENEFITS.get(g.strip().lower())
            if b:
                benefits.append(b)
        return _dedupe(benefits)

    # ───────────────────────────── feedback ───────────────────────── #
    def update_plan_with_feedback(self, plan: PlanDocument, feedback: PlanFeedback) -> PlanDocument:
        """Return a copy of `plan` with the feedback-driven recommendations appended."""
        recs = list(plan.recommendations)
        if (feedback.energy_level or "").lower() == "low" and LOW_ENERGY_REC not in recs:
            recs.append(LOW_ENERGY_REC)
        if (feedback.digestion or "").lower() == "poor" and POOR_DIGESTION_REC not in recs:
            recs.append(POOR_DIGESTION_REC)
        return plan.model_copy(deep=True, update={"recommendations": recs})

    # ───────────────────────────── exports ────────────────────────── #
    @staticmethod
    def export_for_doctor_review(report: PlanReport, patient_id: Any) -> Dict[str, Any]:
        plan = report.plan
        return {
            "patient_id": patient_id,
            "dosha": plan.dosha.value,
            "constitution": report.assessment.constitution,
            "scores": {a.value: report.assessment.scores.get(a, 0) for a in AXES},
            "percentages": {a.value: round(report.assessment.percentages.get(a, 0.0), 1) for a in AXES},
            "strengths": list(report.assessment.strengths),
            "imbalances": list(report.assessment.imbalances),
            "meals": {slot.value: list(m.items) for slot, m in plan.meals.items()},
            "spices": list(plan.spices),
            "recommendations": list(plan.recommendations),
            "special_notes": list(plan.special_notes),
            "seasonal_adjustment": plan.seasonal_adjustment,
            "health_adjustments": list(plan.health_adjustments),
            "focus_areas": list(report.summary.focus_areas),
            "generated_at": report.created_at.isoformat(),
            "version": report.version,
            "requires_review": True,
        }

    @staticmethod
    def generate_shopping_list(plan: PlanDocument) -> Dict[str, List[str]]:
        """Group every item named in the plan by food-table category."""
        axes = [plan.dosha] + [a for a in AXES if a is not plan.dosha]
        category_of: Dict[str, str] = {}
        for axis in axes:
            for cat in CATEGORIES:
                for food in FOODS[axis][cat]:
                    category_of.setdefault(food.name, cat)

        buckets: Dict[str, set[str]] = {}
        for meal in plan.meals.values():
            for name in meal.items:
                buckets.setdefault(category_of.get(name, "other"), set()).add(name)
        buckets.setdefault("spices", set()).update(plan.spices)

        return {cat: sorted(names) for cat, names in sorted(buckets.items()) if names}
