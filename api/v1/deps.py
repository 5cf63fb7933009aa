# api/v1/deps.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.engine import PlanEngine
from core.engine_config import EngineConfig
from services import db as dao
from services.auth import verify_token
from services.db import Patient

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    subject: str
    role: str


@lru_cache
def get_engine() -> PlanEngine:
    return PlanEngine(EngineConfig.from_settings(settings))


def current_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> Principal:
    if creds is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing bearer token")
    try:
        sub, role = verify_token(creds.credentials)
    except jwt.PyJWTError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token") from exc
    return Principal(sub, role)


def require_role(*roles: str) -> Callable[..., Principal]:
    def _dep(principal: Principal = Depends(current_principal)) -> Principal:
        if principal.role not in roles:
            raise HTTPException(status.HTTP_403_FORBIDDEN, f"Requires role: {', '.join(roles)}")
        return principal

    return _dep


async def ensure_patient_access(db: AsyncSession, principal: Principal, patient_id: int) -> Patient:
    """
    Patients only see their own records; doctors only see patients linked
    to them. Returns the patient row, 404 if it does not exist.
    """
    if principal.role == "patient" and principal.subject != str(patient_id):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not your record")
    try:
        patient = await dao.get_patient(db, patient_id)
    except LookupError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Patient not found") from exc
    if principal.role == "doctor" and patient.doctor_id != int(principal.subject):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not your patient")
    return patient
