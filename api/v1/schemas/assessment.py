from __future__ import annotations
from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from core.dosha import DoshaAxis
from core.models.patient import DemographicProfile
from core.models.plan import PlanReport


class QuestionOptionOut(BaseModel):
    text: str
    dosha: DoshaAxis


class QuestionOut(BaseModel):
    id: int
    text: str
    category: str
    options: List[QuestionOptionOut]


class QuestionnaireOut(BaseModel):
    mode: str
    questions: List[QuestionOut]


class AssessmentIn(BaseModel):
    mode: str | None = Field(None, examples=["basic", "enhanced"])
    answers: Dict[int, DoshaAxis] = Field(..., examples=[{1: "vata", 2: "pitta"}])
    demographics: DemographicProfile | None = None


class AssessmentCreate(AssessmentIn):
    patient_id: int


class AssessmentOut(BaseModel):
    assessment_id: int
    diet_plan_id: int
    report: PlanReport


class AgniOut(BaseModel):
    should_eat: bool
    message: str
    recommendation: str


class AssessmentRecordOut(BaseModel):
    """A stored assessment, without the plan it produced."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    mode: str
    scores: Dict[str, int]
    percentages: Dict[str, float]
    dominant: str
    constitution: str
    created_at: datetime
