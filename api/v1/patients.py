from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.deps import Principal, ensure_patient_access, require_role
from api.v1.schemas import DoctorLink, PatientOut
from services import db as dao
from services.db import get_session

router = APIRouter()


# ───────────────────────── link ─────────────────────────────
# patients pick their doctor; a doctor only gains access once linked
@router.post("/patients/{patient_id}/doctor", response_model=PatientOut)
async def link_doctor(
    patient_id: int,
    body: DoctorLink,
    principal: Principal = Depends(require_role("patient")),
    db: AsyncSession = Depends(get_session),
) -> PatientOut:
    await ensure_patient_access(db, principal, patient_id)
    try:
        patient = await dao.link_patient_to_doctor(db, patient_id, body.doctor_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return PatientOut.model_validate(patient)


# ───────────────────────── unlink ───────────────────────────
@router.delete("/patients/{patient_id}/doctor/{doctor_id}", response_model=PatientOut)
async def unlink_doctor(
    patient_id: int,
    doctor_id: int,
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> PatientOut:
    await ensure_patient_access(db, principal, patient_id)
    if principal.role == "doctor" and principal.subject != str(doctor_id):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not your patient")
    try:
        patient = await dao.unlink_patient_from_doctor(db, patient_id, doctor_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return PatientOut.model_validate(patient)


# ───────────────────────── roster ───────────────────────────
@router.get("/doctors/{doctor_id}/patients", response_model=List[PatientOut])
async def list_patients(
    doctor_id: int,
    principal: Principal = Depends(require_role("doctor")),
    db: AsyncSession = Depends(get_session),
) -> List[PatientOut]:
    if principal.subject != str(doctor_id):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not your roster")
    try:
        rows = await dao.doctor_patients(db, doctor_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return [PatientOut.model_validate(p) for p in rows]
