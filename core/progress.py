"""
core/progress.py
────────────────────────────────────────────────────────────────────────
Adherence + weight tracking over a patient's logged days.

Input rows are plain dicts, as they come back from the DB helpers:

    adherence  {"date": date | str, "meals": {"breakfast": True, ...}}
    weight     {"date": date | str, "weight": 71.4}

Everything is computed with pandas; the weight trend is a numpy
least-squares slope expressed per week.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np
import pandas as pd

_LOG = logging.getLogger(__name__)

HIGH_ADHERENCE = 75
MEDIUM_ADHERENCE = 50


def adherence_score(meals: Mapping[str, bool]) -> int:
    """Percentage of planned meals followed, rounded to an int. No meals → 0."""
    if not meals:
        return 0
    followed = sum(1 for v in meals.values() if v)
    return round(followed / len(meals) * 100)


def adherence_level(score: float) -> str:
    if score >= HIGH_ADHERENCE:
        return "High"
    if score >= MEDIUM_ADHERENCE:
        return "Medium"
    return "Low"


@dataclass
class ProgressInsights:
    adherence_score: float
    adherence_level: str
    perfect_streak: int
    weight_change: float | None
    weight_trend_per_week: float | None
    improvements: List[str] = field(default_factory=list)
    challenges: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)


class ProgressTracker:
    def __init__(
        self,
        adherence: Sequence[Dict[str, Any]] = (),
        weights: Sequence[Dict[str, Any]] = (),
    ) -> None:
        self._adh = self._adherence_frame(adherence)
        self._wt = self._weight_frame(weights)

    # ───────────────────────────── frames ─────────────────────────── #
    @staticmethod
    def _adherence_frame(rows: Sequence[Dict[str, Any]]) -> pd.DataFrame:
        if not rows:
            return pd.DataFrame(columns=["date", "score", "meals"])
        df = pd.DataFrame(rows)
        df["date"] = pd.to_datetime(df["date"]).dt.normalize()
        df["score"] = df["meals"].apply(lambda m: adherence_score(m or {}))
        # one row per day, last log wins
        df = df.drop_duplicates("date", keep="last").sort_values("date")
        return df.reset_index(drop=True)

    @staticmethod
    def _weight_frame(rows: Sequence[Dict[str, Any]]) -> pd.DataFrame:
        if not rows:
            return pd.DataFrame(columns=["date", "weight"])
        df = pd.DataFrame(rows)[["date", "weight"]]
        df["date"] = pd.to_datetime(df["date"])
        df["weight"] = df["weight"].astype(float)
        return df.sort_values("date", kind="stable").reset_index(drop=True)

    # ───────────────────────────── adherence ──────────────────────── #
    def average_adherence(self, days: int = 7) -> float:
        """Mean daily score over the `days` calendar days ending at the last log."""
        if self._adh.empty:
            return 0.0
        cutoff = self._adh["date"].max() - pd.Timedelta(days=days - 1)
        window = self._adh[self._adh["date"] >= cutoff]
        return round(float(window["score"].mean()), 1)

    def perfect_streak(self) -> int:
        """Consecutive most-recent logged days scoring 100."""
        streak = 0
        for s in reversed(self._adh["score"].tolist()):
            if s != 100:
                break
            streak += 1
        return streak

    def weekly_adherence(self) -> Dict[str, float]:
        if self._adh.empty:
            return {}
        weekly = self._adh.set_index("date")["score"].astype(float).resample("W").mean().dropna()
        return {ts.date().isoformat(): round(float(v), 1) for ts, v in weekly.items()}

    def slot_follow_rates(self) -> Dict[str, float]:
        if self._adh.empty:
            return {}
        slots = pd.DataFrame([m or {} for m in self._adh["meals"]]).astype(float)
        return {str(k): float(v) for k, v in slots.mean().items()}

    # ───────────────────────────── weight ─────────────────────────── #
    def weight_change(self) -> float | None:
        if len(self._wt) < 2:
            return None
        w = self._wt["weight"]
        return round(float(w.iloc[-1] - w.iloc[-2]), 2)

    def weight_trend_per_week(self) -> float | None:
        if self._wt["date"].nunique() < 2:
            return None
        days = (self._wt["date"] - self._wt["date"].iloc[0]).dt.total_seconds() / 86400
        slope, _ = np.polyfit(days.to_numpy(dtype=float), self._wt["weight"].to_numpy(dtype=float), 1)
        return round(float(slope) * 7, 3)

    # ───────────────────────────── insights ───────────────────────── #
    def insights(self, duration_days: int) -> ProgressInsights:
        score = self.average_adherence(max(duration_days, 1))
        level = adherence_level(score)
        streak = self.perfect_streak()
        change = self.weight_change()
        trend = self.weight_trend_per_week()

        improvements: List[str] = []
        challenges: List[str] = []
        next_steps: List[str] = []

        if level == "High":
            improvements.append("Consistent adherence to the meal plan")
        elif level == "Low" and not self._adh.empty:
            challenges.append("Meal plan adherence is below 50%")
        if streak >= 3:
            improvements.append(f"{streak}-day perfect adherence streak")
        if trend is not None and trend < 0:
            improvements.append(f"Weight trending down ({trend:+.2f} kg/week)")
        elif trend is not None and trend > 0.5:
            challenges.append(f"Weight trending up ({trend:+.2f} kg/week)")

        for slot, rate in self.slot_follow_rates().items():
            if rate < 0.5:
                challenges.append(f"{slot.capitalize()} is often skipped or off-plan")

        if duration_days < 7:
            next_steps.append("Continue the current plan for one more week")
        elif duration_days >= 14 and level == "High":
            next_steps.append("Ready to advance to the next phase of the plan")
        if level == "Low":
            next_steps.append("Review the plan with your doctor")
        if not next_steps:
            next_steps.append("Keep following the plan and log meals daily")

        _LOG.debug("insights over %d days: %.1f%% (%s)", duration_days, score, level)
        return ProgressInsights(
            adherence_score=score,
            adherence_level=level,
            perfect_streak=streak,
            weight_change=change,
            weight_trend_per_week=trend,
            improvements=improvements,
            challenges=challenges,
            next_steps=next_steps,
        )
