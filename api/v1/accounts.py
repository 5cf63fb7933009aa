from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.deps import Principal, ensure_patient_access, require_role
from api.v1.schemas import (
    AssessmentRecordOut,
    DoctorAccountOut,
    DoctorCreate,
    DoctorOut,
    PatientAccountOut,
    PatientCreate,
    PatientOut,
)
from services import db as dao
from services.auth import create_token
from services.db import Doctor, Patient, get_session

router = APIRouter()


# ───────────────────────── create patient ───────────────────
@router.post(
    "/patients",
    response_model=PatientAccountOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_patient(
    body: PatientCreate,
    db: AsyncSession = Depends(get_session),
) -> PatientAccountOut:
    if body.email and await dao.find_by_email(db, Patient, body.email):
        raise HTTPException(status_code=409, detail="Patient already exists")

    patient = await dao.create_patient(db, **body.model_dump())
    return PatientAccountOut(
        **PatientOut.model_validate(patient).model_dump(),
        access_token=create_token(str(patient.id), role="patient"),
    )


# ───────────────────────── fetch patient ────────────────────
@router.get("/patients/{patient_id}", response_model=PatientOut)
async def fetch_patient(
    patient_id: int,
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> PatientOut:
    patient = await ensure_patient_access(db, principal, patient_id)
    return PatientOut.model_validate(patient)


# ───────────────────────── assessment history ───────────────
@router.get("/patients/{patient_id}/assessments", response_model=List[AssessmentRecordOut])
async def patient_assessments(
    patient_id: int,
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> List[AssessmentRecordOut]:
    await ensure_patient_access(db, principal, patient_id)
    rows = await dao.patient_assessments(db, patient_id)
    return [AssessmentRecordOut.model_validate(r) for r in rows]


# ───────────────────────── create doctor ────────────────────
@router.post(
    "/doctors",
    response_model=DoctorAccountOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_doctor(
    body: DoctorCreate,
    db: AsyncSession = Depends(get_session),
) -> DoctorAccountOut:
    if body.email and await dao.find_by_email(db, Doctor, body.email):
        raise HTTPException(status_code=409, detail="Doctor already exists")

    doctor = await dao.create_doctor(db, **body.model_dump())
    return DoctorAccountOut(
        **DoctorOut.model_validate(doctor).model_dump(),
        access_token=create_token(str(doctor.id), role="doctor"),
    )


# ───────────────────────── directory ────────────────────────
@router.get("/doctors", response_model=List[DoctorOut])
async def list_doctors(
    _: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> List[DoctorOut]:
    return [DoctorOut.model_validate(d) for d in await dao.list_doctors(db)]
