from __future__ import annotations

from fastapi import APIRouter

from api.v1.schemas import AgniOut
from core.plan_composer import check_agni

router = APIRouter()


@router.get("", response_model=AgniOut)
def agni(hungry: bool) -> AgniOut:
    advice = check_agni(hungry)
    return AgniOut(
        should_eat=advice.should_eat,
        message=advice.message,
        recommendation=advice.recommendation,
    )
