from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.deps import Principal, ensure_patient_access, require_role
from api.v1.schemas import AdherenceIn, AdherenceOut, InsightsOut, WeightIn, WeightOut
from core.progress import ProgressTracker, adherence_score
from services import db as dao
from services.db import get_session

router = APIRouter()


# ───────────────────────── adherence ────────────────────────
@router.post("/adherence", response_model=AdherenceOut, status_code=status.HTTP_201_CREATED)
async def log_adherence(
    patient_id: int,
    body: AdherenceIn,
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> AdherenceOut:
    await ensure_patient_access(db, principal, patient_id)
    meals = {slot.value: followed for slot, followed in body.meals.items()}
    try:
        row = await dao.log_adherence(db, patient_id, body.date, meals)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return AdherenceOut(id=row.id, date=row.log_date, meals=row.meals, score=adherence_score(row.meals))


# ───────────────────────── weight ───────────────────────────
@router.post("/weight", response_model=WeightOut, status_code=status.HTTP_201_CREATED)
async def log_weight(
    patient_id: int,
    body: WeightIn,
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> WeightOut:
    await ensure_patient_access(db, principal, patient_id)
    try:
        row = await dao.log_weight(db, patient_id, body.date, body.weight)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return WeightOut(id=row.id, date=row.log_date, weight=row.weight)


# ───────────────────────── insights ─────────────────────────
@router.get("/insights", response_model=InsightsOut)
async def insights(
    patient_id: int,
    days: int = Query(7, ge=1, le=365),
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> InsightsOut:
    await ensure_patient_access(db, principal, patient_id)
    try:
        adherence, weights = await dao.progress_history(db, patient_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    tracker = ProgressTracker(adherence, weights)
    return InsightsOut(
        duration_days=days,
        weekly_adherence=tracker.weekly_adherence(),
        **asdict(tracker.insights(days)),
    )
