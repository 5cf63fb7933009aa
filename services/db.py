"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models for doctors, patients, assessments, diet plans and progress logs
* Small DAO helpers used by routers / scripts

Missing rows surface as `LookupError`; routers turn them into 404s.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Any, AsyncGenerator, AsyncIterator, Dict, List, Tuple

from sqlalchemy import JSON, Date, DateTime, Float, ForeignKey, Integer, String, Text, select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncAttrs,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings

_LOG = logging.getLogger(__name__)

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None


async def _create_engine() -> AsyncEngine:
    # 1) plain TCP URL
    if settings.database_url:
        return create_async_engine(settings.database_url, pool_pre_ping=True)

    # 2) Cloud SQL connector (only if URL not supplied)
    if not settings.cloud_sql_instance:
        raise RuntimeError(
            "Set either DATABASE_URL or CLOUD_SQL_CONNECTION_NAME env var"
        )

    # optional extra: pip install '.[cloudsql]'
    try:
        from google.cloud.sql.connector import Connector, IPTypes  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "cloud-sql-python-connector missing. Run:\n"
            "pip install 'cloud-sql-python-connector[asyncpg]>=1.4.0'"
        ) from exc

    connector = Connector()

    async def _getconn():  # type: ignore[name-defined]
        return await connector.connect_async(
            settings.cloud_sql_instance,
            "asyncpg",
            user=settings.db_user,
            password=settings.db_pass,
            db=settings.db_name,
            ip_type=IPTypes.PRIVATE,
        )

    return create_async_engine(
        "postgresql+asyncpg://",
        async_creator=_getconn,
        pool_pre_ping=True,
    )


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)

# ───────── models ────────────────────────────────────────────────────


class Doctor(Base):
    __tablename__ = "doctors"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String)
    email: Mapped[str | None] = mapped_column(String, unique=True)
    specialization: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str | None] = mapped_column(String)
    email: Mapped[str | None] = mapped_column(String, unique=True)
    age: Mapped[int | None] = mapped_column(Integer)
    gender: Mapped[str | None] = mapped_column(String)
    doctor_id: Mapped[int | None] = mapped_column(ForeignKey("doctors.id"), index=True)
    dosha: Mapped[str | None] = mapped_column(String)
    constitution: Mapped[str | None] = mapped_column(String)
    has_completed_assessment: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Assessment(Base):
    __tablename__ = "assessments"

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), index=True)
    mode: Mapped[str] = mapped_column(String)
    answers: Mapped[dict] = mapped_column(JSON)           # {question_id: axis}
    scores: Mapped[dict] = mapped_column(JSON)
    percentages: Mapped[dict] = mapped_column(JSON)
    dominant: Mapped[str] = mapped_column(String)
    constitution: Mapped[str] = mapped_column(String)
    demographics: Mapped[dict | None] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class DietPlan(Base):
    __tablename__ = "diet_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), index=True)
    doctor_id: Mapped[int | None] = mapped_column(ForeignKey("doctors.id"))
    assessment_id: Mapped[int | None] = mapped_column(ForeignKey("assessments.id"))
    document: Mapped[dict] = mapped_column(JSON)          # PlanDocument.model_dump(mode="json")
    edited_by: Mapped[int | None] = mapped_column(Integer)
    doctor_notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


class AdherenceLog(Base):
    __tablename__ = "adherence_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), index=True)
    log_date: Mapped[date] = mapped_column(Date)
    meals: Mapped[dict] = mapped_column(JSON)             # {slot: followed}
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class WeightEntry(Base):
    __tablename__ = "weight_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), index=True)
    log_date: Mapped[date] = mapped_column(Date)
    weight: Mapped[float] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


# ───────── DAO helpers ───────────────────────────────────────────────


async def _get(session: AsyncSession, model: type, pk: int) -> Any:
    row = await session.get(model, pk)
    if row is None:
        raise LookupError(f"{model.__tablename__} {pk} not found")
    return row


async def get_patient(session: AsyncSession, patient_id: int) -> Patient:
    return await _get(session, Patient, patient_id)


async def get_doctor(session: AsyncSession, doctor_id: int) -> Doctor:
    return await _get(session, Doctor, doctor_id)


async def get_diet_plan(session: AsyncSession, plan_id: int) -> DietPlan:
    return await _get(session, DietPlan, plan_id)


async def find_by_email(session: AsyncSession, model: type, email: str) -> Any:
    return (await session.execute(select(model).where(model.email == email))).scalars().first()


async def create_patient(
    session: AsyncSession,
    *,
    name: str,
    email: str | None = None,
    age: int | None = None,
    gender: str | None = None,
) -> Patient:
    row = Patient(name=name, email=email, age=age, gender=gender)
    session.add(row)
    await session.commit()
    await session.refresh(row)
    _LOG.debug("created patient %s", row.id)
    return row


async def create_doctor(
    session: AsyncSession,
    *,
    name: str,
    email: str | None = None,
    specialization: str | None = None,
) -> Doctor:
    row = Doctor(name=name, email=email, specialization=specialization)
    session.add(row)
    await session.commit()
    await session.refresh(row)
    _LOG.debug("created doctor %s", row.id)
    return row


async def list_doctors(session: AsyncSession) -> List[Doctor]:
    rows = await session.execute(select(Doctor).order_by(Doctor.id))
    return list(rows.scalars().all())


async def patient_assessments(session: AsyncSession, patient_id: int) -> List[Assessment]:
    """Stored assessments for a patient, newest first."""
    await get_patient(session, patient_id)
    rows = await session.execute(
        select(Assessment)
        .where(Assessment.patient_id == patient_id)
        .order_by(Assessment.created_at.desc(), Assessment.id.desc())
    )
    return list(rows.scalars().all())


async def save_assessment(
    session: AsyncSession,
    patient_id: int,
    *,
    mode: str,
    answers: Dict[str, str],
    scores: Dict[str, int],
    percentages: Dict[str, float],
    dominant: str,
    constitution: str,
    demographics: Dict[str, Any] | None = None,
) -> Assessment:
    patient = await get_patient(session, patient_id)
    row = Assessment(
        patient_id=patient_id,
        mode=mode,
        answers=answers,
        scores=scores,
        percentages=percentages,
        dominant=dominant,
        constitution=constitution,
        demographics=demographics,
    )
    session.add(row)
    patient.dosha = dominant
    patient.constitution = constitution
    patient.has_completed_assessment = True
    await session.commit()
    await session.refresh(row)
    _LOG.debug("saved assessment %s for patient %s (%s)", row.id, patient_id, constitution)
    return row


async def save_diet_plan(
    session: AsyncSession,
    patient_id: int,
    document: Dict[str, Any],
    *,
    doctor_id: int | None = None,
    assessment_id: int | None = None,
) -> DietPlan:
    if doctor_id is None:
        doctor_id = (await get_patient(session, patient_id)).doctor_id
    row = DietPlan(
        patient_id=patient_id,
        doctor_id=doctor_id,
        assessment_id=assessment_id,
        document=document,
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


async def latest_diet_plan(session: AsyncSession, patient_id: int) -> DietPlan | None:
    """Most recently created plan for a patient, or None."""
    rows = (
        await session.execute(select(DietPlan).where(DietPlan.patient_id == patient_id))
    ).scalars().all()
    if not rows:
        return None
    return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)[0]


async def update_diet_plan(
    session: AsyncSession,
    plan_id: int,
    document: Dict[str, Any],
    *,
    edited_by: int | None = None,
    doctor_notes: str | None = None,
) -> DietPlan:
    row = await get_diet_plan(session, plan_id)
    row.document = document
    if edited_by is not None:
        row.edited_by = edited_by
    if doctor_notes is not None:
        row.doctor_notes = doctor_notes
    await session.commit()
    await session.refresh(row)
    return row


async def link_patient_to_doctor(session: AsyncSession, patient_id: int, doctor_id: int) -> Patient:
    patient = await get_patient(session, patient_id)
    await get_doctor(session, doctor_id)
    patient.doctor_id = doctor_id
    await session.commit()
    _LOG.debug("linked patient %s → doctor %s", patient_id, doctor_id)
    return patient


async def unlink_patient_from_doctor(session: AsyncSession, patient_id: int, doctor_id: int) -> Patient:
    patient = await get_patient(session, patient_id)
    if patient.doctor_id != doctor_id:
        raise LookupError(f"patient {patient_id} is not linked to doctor {doctor_id}")
    patient.doctor_id = None
    await session.commit()
    return patient


async def doctor_patients(session: AsyncSession, doctor_id: int) -> List[Patient]:
    await get_doctor(session, doctor_id)
    rows = await session.execute(
        select(Patient).where(Patient.doctor_id == doctor_id).order_by(Patient.id)
    )
    return list(rows.scalars().all())


async def log_adherence(
    session: AsyncSession, patient_id: int, log_date: date, meals: Dict[str, bool]
) -> AdherenceLog:
    await get_patient(session, patient_id)
    row = AdherenceLog(patient_id=patient_id, log_date=log_date, meals=meals)
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


async def log_weight(session: AsyncSession, patient_id: int, log_date: date, weight: float) -> WeightEntry:
    await get_patient(session, patient_id)
    row = WeightEntry(patient_id=patient_id, log_date=log_date, weight=weight)
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


async def progress_history(
    session: AsyncSession, patient_id: int
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """`(adherence rows, weight rows)` as plain dicts, oldest first."""
    await get_patient(session, patient_id)
    adh = (
        await session.execute(
            select(AdherenceLog)
            .where(AdherenceLog.patient_id == patient_id)
            .order_by(AdherenceLog.log_date, AdherenceLog.id)
        )
    ).scalars().all()
    wts = (
        await session.execute(
            select(WeightEntry)
            .where(WeightEntry.patient_id == patient_id)
            .order_by(WeightEntry.log_date, WeightEntry.id)
        )
    ).scalars().all()
    return (
        [{"date": r.log_date, "meals": r.meals} for r in adh],
        [{"date": r.log_date, "weight": r.weight} for r in wts],
    )


# ───────── session helpers ───────────────────────────────────────────

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    eng = await engine()
    async_session = async_sessionmaker(eng, expire_on_commit=False)
    async with async_session() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """`async with session_scope() as s:` for scripts outside FastAPI."""
    eng = await engine()
    async_session = async_sessionmaker(eng, expire_on_commit=False)
    async with async_session() as session:
        yield session


async def create_all() -> None:
    eng = await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
