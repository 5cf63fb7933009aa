from __future__ import annotations
from datetime import date as Date
from typing import Dict, List

from pydantic import BaseModel, Field

from core.dosha import MealSlot


class AdherenceIn(BaseModel):
    date: Date = Field(default_factory=Date.today)
    meals: Dict[MealSlot, bool]


class AdherenceOut(BaseModel):
    id: int
    date: Date
    meals: Dict[str, bool]
    score: int


class WeightIn(BaseModel):
    date: Date = Field(default_factory=Date.today)
    weight: float = Field(..., gt=0, le=500)


class WeightOut(BaseModel):
    id: int
    date: Date
    weight: float


class InsightsOut(BaseModel):
    duration_days: int
    adherence_score: float
    adherence_level: str
    perfect_streak: int
    weekly_adherence: Dict[str, float] = {}
    weight_change: float | None = None
    weight_trend_per_week: float | None = None
    improvements: List[str] = []
    challenges: List[str] = []
    next_steps: List[str] = []
