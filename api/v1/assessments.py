from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.deps import Principal, ensure_patient_access, get_engine, require_role
from api.v1.schemas import (
    AssessmentCreate,
    AssessmentIn,
    AssessmentOut,
    QuestionnaireOut,
    QuestionOptionOut,
    QuestionOut,
)
from core.assessment import answers_from_choices
from core.engine import PlanEngine
from core.errors import EngineError
from core.models.plan import PlanReport
from services import db as dao
from services.db import get_session

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
def _evaluate(engine: PlanEngine, body: AssessmentIn) -> PlanReport:
    try:
        questions = engine.questions(body.mode)
        items = answers_from_choices(questions, body.answers)
        return engine.generate_complete_plan(items, body.demographics, questions)
    except (EngineError, ValueError) as exc:
        raise HTTPException(422, str(exc)) from exc


# ───────────────────────── questionnaire ────────────────────
@router.get("/questionnaire", response_model=QuestionnaireOut)
def get_questionnaire(
    mode: str | None = None,
    engine: PlanEngine = Depends(get_engine),
) -> QuestionnaireOut:
    mode = mode or engine.config.assessment_mode
    try:
        questions = engine.questions(mode)
    except ValueError as exc:
        raise HTTPException(422, str(exc)) from exc
    # option weights stay server-side
    return QuestionnaireOut(
        mode=mode,
        questions=[
            QuestionOut(
                id=q.id,
                text=q.text,
                category=q.category,
                options=[QuestionOptionOut(text=o.text, dosha=o.axis) for o in q.options],
            )
            for q in questions
        ],
    )


# ───────────────────────── preview ──────────────────────────
@router.post("/preview", response_model=PlanReport)
def preview(
    body: AssessmentIn,
    engine: PlanEngine = Depends(get_engine),
) -> PlanReport:
    return _evaluate(engine, body)


# ───────────────────────── submit ───────────────────────────
@router.post("", response_model=AssessmentOut, status_code=status.HTTP_201_CREATED)
async def submit_assessment(
    body: AssessmentCreate,
    engine: PlanEngine = Depends(get_engine),
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> AssessmentOut:
    await ensure_patient_access(db, principal, body.patient_id)
    report = _evaluate(engine, body)
    a = report.assessment
    try:
        row = await dao.save_assessment(
            db,
            body.patient_id,
            mode=body.mode or engine.config.assessment_mode,
            answers={str(k): v.value for k, v in body.answers.items()},
            scores={k.value: v for k, v in a.scores.items()},
            percentages={k.value: v for k, v in a.percentages.items()},
            dominant=a.dominant.value,
            constitution=a.constitution,
            demographics=body.demographics.model_dump(mode="json") if body.demographics else None,
        )
        plan = await dao.save_diet_plan(
            db,
            body.patient_id,
            report.plan.model_dump(mode="json"),
            assessment_id=row.id,
        )
    except LookupError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
    return AssessmentOut(assessment_id=row.id, diet_plan_id=plan.id, report=report)
