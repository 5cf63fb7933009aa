from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.deps import Principal, ensure_patient_access, get_engine, require_role
from api.v1.schemas import DietPlanEdit, DietPlanOut, ShoppingListOut
from core.engine import PlanEngine
from core.models.plan import PlanDocument, PlanFeedback
from services import db as dao
from services.db import DietPlan, get_session

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
async def _load(db: AsyncSession, plan_id: int, principal: Principal) -> DietPlan:
    try:
        row = await dao.get_diet_plan(db, plan_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail="Diet plan not found") from exc
    await ensure_patient_access(db, principal, row.patient_id)
    return row


def _document(row: DietPlan) -> PlanDocument:
    return PlanDocument.model_validate(row.document)


# ───────────────────────── latest ───────────────────────────
@router.get("/patients/{patient_id}/diet-plan", response_model=DietPlanOut)
async def latest_plan(
    patient_id: int,
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> DietPlanOut:
    await ensure_patient_access(db, principal, patient_id)
    row = await dao.latest_diet_plan(db, patient_id)
    if row is None:
        raise HTTPException(status_code=404, detail="No diet plan for this patient")
    return DietPlanOut.model_validate(row)


# ───────────────────────── doctor edit ──────────────────────
@router.put("/diet-plans/{plan_id}", response_model=DietPlanOut)
async def edit_plan(
    plan_id: int,
    body: DietPlanEdit,
    principal: Principal = Depends(require_role("doctor")),
    db: AsyncSession = Depends(get_session),
) -> DietPlanOut:
    row = await _load(db, plan_id, principal)
    doc = _document(row)

    update: dict = {}
    if body.meals is not None:
        meals = {slot: m.model_copy() for slot, m in doc.meals.items()}
        for slot, items in body.meals.items():
            if slot not in meals:
                raise HTTPException(422, f"plan has no {slot.value} slot")
            # category grouping no longer holds once a doctor rewrites the list
            meals[slot] = meals[slot].model_copy(update={"items": list(items), "by_category": {}})
        update["meals"] = meals
    if body.recommendations is not None:
        update["recommendations"] = list(body.recommendations)

    new_doc = doc.model_copy(update=update)
    row = await dao.update_diet_plan(
        db,
        plan_id,
        new_doc.model_dump(mode="json"),
        edited_by=int(principal.subject),
        doctor_notes=body.doctor_notes,
    )
    return DietPlanOut.model_validate(row)


# ───────────────────────── feedback ─────────────────────────
@router.post("/diet-plans/{plan_id}/feedback", response_model=DietPlanOut)
async def plan_feedback(
    plan_id: int,
    body: PlanFeedback,
    engine: PlanEngine = Depends(get_engine),
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> DietPlanOut:
    row = await _load(db, plan_id, principal)
    new_doc = engine.update_plan_with_feedback(_document(row), body)
    row = await dao.update_diet_plan(db, plan_id, new_doc.model_dump(mode="json"))
    return DietPlanOut.model_validate(row)


# ───────────────────────── shopping list ────────────────────
@router.get(
    "/diet-plans/{plan_id}/shopping-list",
    response_model=ShoppingListOut,
    status_code=status.HTTP_200_OK,
)
async def shopping_list(
    plan_id: int,
    engine: PlanEngine = Depends(get_engine),
    principal: Principal = Depends(require_role("patient", "doctor")),
    db: AsyncSession = Depends(get_session),
) -> ShoppingListOut:
    row = await _load(db, plan_id, principal)
    return ShoppingListOut(plan_id=plan_id, items=engine.generate_shopping_list(_document(row)))
