from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PatientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str | None = None
    age: int | None = Field(None, ge=0, le=130)
    gender: str | None = None


class PatientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    email: str | None = None
    age: int | None = None
    gender: str | None = None
    doctor_id: int | None = None
    dosha: str | None = None
    constitution: str | None = None
    has_completed_assessment: bool = False


class PatientAccountOut(PatientOut):
    access_token: str


class DoctorCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str | None = None
    specialization: str | None = None


class DoctorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None = None
    specialization: str | None = None
    created_at: datetime


class DoctorAccountOut(DoctorOut):
    access_token: str


class DoctorLink(BaseModel):
    doctor_id: int
