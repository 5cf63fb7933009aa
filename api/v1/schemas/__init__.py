"""Re-export individual schema modules for easy imports."""

from .assessment import (
    AgniOut,
    AssessmentCreate,
    AssessmentIn,
    AssessmentOut,
    AssessmentRecordOut,
    QuestionnaireOut,
    QuestionOptionOut,
    QuestionOut,
)
from .patient import (
    DoctorAccountOut,
    DoctorCreate,
    DoctorLink,
    DoctorOut,
    PatientAccountOut,
    PatientCreate,
    PatientOut,
)
from .plan import DietPlanEdit, DietPlanOut, ShoppingListOut
from .progress import AdherenceIn, AdherenceOut, InsightsOut, WeightIn, WeightOut

__all__ = [
    "AgniOut",
    "AssessmentCreate",
    "AssessmentIn",
    "AssessmentOut",
    "AssessmentRecordOut",
    "QuestionnaireOut",
    "QuestionOptionOut",
    "QuestionOut",
    "DoctorAccountOut",
    "DoctorCreate",
    "DoctorLink",
    "DoctorOut",
    "PatientAccountOut",
    "PatientCreate",
    "PatientOut",
    "DietPlanEdit",
    "DietPlanOut",
    "ShoppingListOut",
    "AdherenceIn",
    "AdherenceOut",
    "InsightsOut",
    "WeightIn",
    "WeightOut",
]
