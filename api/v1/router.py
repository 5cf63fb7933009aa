# api/v1/router.py
from fastapi import APIRouter

from . import accounts, agni, assessments, patients, plans, progress

api_router = APIRouter()

api_router.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])
api_router.include_router(agni.router, prefix="/agni", tags=["Agni"])
api_router.include_router(accounts.router, tags=["Accounts"])
api_router.include_router(plans.router, tags=["Diet plans"])
api_router.include_router(patients.router, tags=["Patients"])

# progress lives *under* the patient resource
api_router.include_router(
    progress.router,
    prefix="/patients/{patient_id}/progress",   # results in /patients/{id}/progress/...
    tags=["Progress"],
)
