from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from core.dosha import ActivityLevel, Season


class DemographicProfile(BaseModel):
    """Optional per-session signals that modify a composed plan."""

    age: int | None = Field(None, ge=0, le=130)
    gender: str | None = None
    activity: ActivityLevel | None = None
    health: list[str] = []          # free tags, normalised by the composer
    season: Season | None = None
    dietary_preference: str | None = None   # e.g. "vegetarian"
    goals: list[str] = []

    @field_validator("activity", "season", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @property
    def is_vegetarian(self) -> bool:
        pref = (self.dietary_preference or "").strip().lower()
        if pref.startswith("non"):
            return False
        return "vegetarian" in pref or "vegan" in pref
