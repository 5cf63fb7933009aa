from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, Field

from core.dosha import DoshaAxis, MealSlot

PLAN_VERSION = "2.0.0"


class MealPlanSlot(BaseModel):
    items: List[str] = []                       # ordered, what the patient sees
    by_category: Dict[str, List[str]] = {}      # same items grouped by table
    portions: str = ""
    timing: str = ""
    note: str = ""


class DoshaProfileSummary(BaseModel):
    dominant: DoshaAxis
    percentages: Dict[DoshaAxis, float]
    constitution: str


class DoshaGuidance(BaseModel):
    goal: str
    qualities: str
    rasas: str
    avoid: str


class PlanDocument(BaseModel):
    """A composed day plan. Produced whole; never patched in place by the engine."""

    dosha: DoshaAxis
    dosha_profile: DoshaProfileSummary
    dosha_info: DoshaGuidance

    meals: Dict[MealSlot, MealPlanSlot]
    spices: List[str]
    spices_note: str = ""
    beverages: List[str]

    meal_timing: Dict[MealSlot, str]
    portion_guidance: Dict[str, str]
    food_preferences: Dict[str, str]
    foods_to_avoid: List[str]

    key_principles: List[str] = []
    mindful_eating: Dict[str, List[str]] = {}
    daily_routine: List[str] = []
    recommendations: List[str] = []

    special_notes: List[str] = []
    seasonal_adjustment: str | None = None
    health_adjustments: List[str] = []
    secondary_blend: List[str] = []

    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = PLAN_VERSION

    def meal_items(self, slot: MealSlot | str) -> List[str]:
        return self.meals[MealSlot(slot)].items


class PlanFeedback(BaseModel):
    energy_level: str | None = None     # "low" | "normal" | "high"
    digestion: str | None = None        # "poor" | "good"
    notes: str | None = None


# ──────────────────────────────────────────────────────────────────────
#  Full engine report
# ──────────────────────────────────────────────────────────────────────
class AssessmentSummary(BaseModel):
    scores: Dict[DoshaAxis, int]
    percentages: Dict[DoshaAxis, float]
    dominant: DoshaAxis
    constitution: str
    category_breakdown: Dict[str, Dict[DoshaAxis, int]] = {}
    strengths: List[str] = []
    imbalances: List[str] = []
    personality_traits: List[str] = []


class PlanSummary(BaseModel):
    primary_dosha: DoshaAxis
    constitution: str
    key_recommendations: List[str]
    focus_areas: List[str]
    expected_benefits: List[str]


class PlanReport(BaseModel):
    assessment: AssessmentSummary
    plan: PlanDocument
    summary: PlanSummary
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = PLAN_VERSION
