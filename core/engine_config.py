from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EngineConfig:
    """Feature switches handed to the engine at construction time."""

    assessment_mode: str = "basic"          # "basic" | "enhanced"
    secondary_blend_threshold: float = 30.0
    enable_personalization: bool = True     # age / activity notes
    enable_seasonal_adjustments: bool = True
    enable_health_condition_support: bool = True
    random_seed: int | None = None

    @classmethod
    def from_settings(cls, s: Any) -> "EngineConfig":
        return cls(
            assessment_mode=s.assessment_mode,
            secondary_blend_threshold=s.secondary_blend_threshold,
            enable_personalization=s.enable_personalization,
            enable_seasonal_adjustments=s.enable_seasonal_adjustments,
            enable_health_condition_support=s.enable_health_condition_support,
            random_seed=s.plan_random_seed,
        )
