from __future__ import annotations
from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict

from core.dosha import MealSlot
from core.models.plan import PlanDocument


class DietPlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: int | None = None
    document: PlanDocument
    edited_by: int | None = None
    doctor_notes: str | None = None
    created_at: datetime
    updated_at: datetime


class DietPlanEdit(BaseModel):
    """Whole-list replacement; omitted fields are left as they are."""

    meals: Dict[MealSlot, List[str]] | None = None
    recommendations: List[str] | None = None
    doctor_notes: str | None = None


class ShoppingListOut(BaseModel):
    plan_id: int
    items: Dict[str, List[str]]
