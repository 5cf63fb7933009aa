"""
core/plan_composer.py
────────────────────────────────────────────────────────────────────────
Constitution label → structured day plan.

Steps, in order:

1.  base selection     – sample each meal slot from the dominant axis's
                         favourable-food table, counts per MEAL_TEMPLATES
2.  secondary blend    – the strongest non-dominant axis adds one snack
                         item and its first two spices when its share is
                         above the blend threshold; spices already on
                         the list are not repeated
3.  modifiers          – age / activity notes, season and health-tag
                         sentences (additive only)
4.  recommendations    – lifestyle list + activity + age band + health
5.  assemble           – `PlanDocument`

Selection is the only non-deterministic step; pass a seeded
`random.Random` to pin it.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from core.classifier import ConstitutionLabel, classify, rank
from core.dosha import AXES, ActivityLevel, DoshaAxis, MealSlot, PercentageVector, coerce_axis
from core.engine_config import EngineConfig
from core.food_tables import (
    ACTIVITY_RECOMMENDATIONS,
    AGE_MAX,
    AGE_MIN,
    AGE_NOTE,
    DAILY_ROUTINE,
    DOSHA_PROFILES,
    FOODS,
    HEALTH_ADJUSTMENTS,
    HEALTH_RECOMMENDATIONS,
    HIGH_ACTIVITY_NOTE,
    LIFESTYLE_RECOMMENDATIONS,
    MEAL_TEMPLATES,
    MINDFUL_EATING,
    SEASONAL_ADJUSTMENTS,
    SPICES_NOTE,
    FoodItem,
    age_band_recommendation,
    normalize_health_tag,
)
from core.models.patient import DemographicProfile
from core.models.plan import DoshaGuidance, DoshaProfileSummary, MealPlanSlot, PlanDocument

_LOG = logging.getLogger(__name__)

SECONDARY_SNACK_ITEMS = 1
SECONDARY_SPICES = 2


@dataclass(frozen=True)
class AgniAdvice:
    should_eat: bool
    message: str
    recommendation: str


def check_agni(is_hungry: bool) -> AgniAdvice:
    if not is_hungry:
        return AgniAdvice(
            should_eat=False,
            message=(
                "Your Agni (digestive fire) may not be ready. "
                "Wait until you feel true hunger before eating."
            ),
            recommendation="Try light movement, drink warm water, or wait 30-60 minutes.",
        )
    return AgniAdvice(
        should_eat=True,
        message="Your Agni is ready. Enjoy your meal mindfully.",
        recommendation="Follow the pre-meal reminders for optimal digestion.",
    )


class PlanComposer:
    def __init__(self, config: EngineConfig | None = None, rng: random.Random | None = None) -> None:
        self.config = config or EngineConfig()
        self._rng = rng if rng is not None else random.Random(self.config.random_seed)

    # ──────────────────────────── selection ───────────────────────── #
    def _pick(self, pool: Sequence[FoodItem], k: int, vegetarian: bool) -> List[str]:
        if vegetarian:
            pool = [f for f in pool if f.vegetarian]
        k = min(k, len(pool))
        return [f.name for f in self._rng.sample(list(pool), k)]

    def _base_meals(self, axis: DoshaAxis, vegetarian: bool) -> Dict[MealSlot, MealPlanSlot]:
        table = FOODS[axis]
        meals: Dict[MealSlot, MealPlanSlot] = {}
        for slot, tpl in MEAL_TEMPLATES.items():
            by_cat: Dict[str, List[str]] = {}
            items: List[str] = []
            for category, count in tpl.counts:
                picked = self._pick(table[category], count, vegetarian)
                by_cat[category] = picked
                items.extend(picked)
            meals[slot] = MealPlanSlot(
                items=items,
                by_category=by_cat,
                portions=tpl.portions,
                timing=tpl.timing,
                note=tpl.note,
            )
        return meals

    # ──────────────────────────── blending ────────────────────────── #
    def _secondary_axis(self, dominant: DoshaAxis, pct: PercentageVector) -> Tuple[DoshaAxis, float] | None:
        for axis, share in rank(pct):
            if axis is not dominant:
                if share > self.config.secondary_blend_threshold:
                    return axis, share
                return None
        return None

    def _blend(
        self,
        meals: Dict[MealSlot, MealPlanSlot],
        spices: List[str],
        secondary: DoshaAxis,
        share: float,
        vegetarian: bool,
    ) -> List[str]:
        table = FOODS[secondary]
        snack = self._pick(table["fruits"], SECONDARY_SNACK_ITEMS, vegetarian)
        extra_spices = [f.name for f in table["spices"][:SECONDARY_SPICES]]

        slot = meals[MealSlot.SNACKS]
        slot.items.extend(snack)
        slot.by_category.setdefault("fruits", []).extend(snack)
        spices.extend(s for s in extra_spices if s not in spices)

        _LOG.debug("secondary blend %s (%.1f%%): %s + %s", secondary, share, snack, extra_spices)
        return [
            f"Secondary {secondary.value.capitalize()} influence ({share:.1f}%): "
            f"added {', '.join(snack)} to snacks",
            f"{secondary.value.capitalize()}-balancing spices added: {', '.join(extra_spices)}",
        ]

    # ──────────────────────────── modifiers ───────────────────────── #
    def _health_tags(self, demo: DemographicProfile) -> List[str]:
        tags: List[str] = []
        for raw in demo.health:
            tag = normalize_health_tag(raw)
            if tag in HEALTH_ADJUSTMENTS:
                if tag not in tags:
                    tags.append(tag)
            elif tag and tag != "none":
                _LOG.warning("dropping unmapped health condition %r", raw)
        return tags

    def _special_notes(self, demo: DemographicProfile) -> List[str]:
        notes: List[str] = []
        if demo.age is not None and (demo.age < AGE_MIN or demo.age > AGE_MAX):
            notes.append(AGE_NOTE)
        if demo.activity is ActivityLevel.HIGH:
            notes.append(HIGH_ACTIVITY_NOTE)
        return notes

    def _recommendations(
        self, axis: DoshaAxis, demo: DemographicProfile | None, health_tags: Sequence[str]
    ) -> List[str]:
        recs = list(LIFESTYLE_RECOMMENDATIONS[axis])
        if demo is None:
            return recs
        if self.config.enable_personalization:
            if demo.activity in ACTIVITY_RECOMMENDATIONS:
                recs.append(ACTIVITY_RECOMMENDATIONS[demo.activity])
            age_rec = age_band_recommendation(demo.age)
            if age_rec:
                recs.append(age_rec)
        recs.extend(HEALTH_RECOMMENDATIONS[t] for t in health_tags)
        return recs

    # ──────────────────────────── compose ─────────────────────────── #
    def compose(
        self,
        label: ConstitutionLabel | str | None,
        dominant_axis: DoshaAxis | str,
        percentages: Mapping[str, float],
        demographics: DemographicProfile | None = None,
    ) -> PlanDocument:
        axis = coerce_axis(dominant_axis)
        ranked = rank(percentages)
        shares = dict(ranked)
        pct: PercentageVector = {a: shares[a] for a in AXES}
        constitution = classify(pct)
        if label is not None and str(label) != str(constitution):
            _LOG.debug("label %s differs from recomputed %s; using recomputed", label, constitution)

        vegetarian = demographics is not None and demographics.is_vegetarian
        profile = DOSHA_PROFILES[axis]

        # 1. base
        meals = self._base_meals(axis, vegetarian)
        spices = [f.name for f in FOODS[axis]["spices"]]
        beverages = [f.name for f in FOODS[axis]["beverages"]]

        # 2. secondary
        blend_notes: List[str] = []
        secondary = self._secondary_axis(axis, pct)
        if secondary is not None:
            blend_notes = self._blend(meals, spices, secondary[0], secondary[1], vegetarian)

        # 3. modifiers
        special_notes: List[str] = []
        seasonal: str | None = None
        health_tags: List[str] = []
        if demographics is not None:
            if self.config.enable_personalization:
                special_notes = self._special_notes(demographics)
            if self.config.enable_seasonal_adjustments and demographics.season is not None:
                seasonal = SEASONAL_ADJUSTMENTS[demographics.season]
            if self.config.enable_health_condition_support:
                health_tags = self._health_tags(demographics)

        # 4. recommendations
        recommendations = self._recommendations(axis, demographics, health_tags)

        _LOG.debug(
            "composed %s plan (%s): %d notes, %d health tags",
            axis, constitution, len(special_notes), len(health_tags),
        )
        return PlanDocument(
            dosha=axis,
            dosha_profile=DoshaProfileSummary(
                dominant=axis, percentages=pct, constitution=constitution.text
            ),
            dosha_info=DoshaGuidance(
                goal=profile.goal,
                qualities=profile.qualities,
                rasas=profile.rasas,
                avoid=profile.avoid,
            ),
            meals=meals,
            spices=spices,
            spices_note=SPICES_NOTE,
            beverages=beverages,
            meal_timing={slot: tpl.timing for slot, tpl in MEAL_TEMPLATES.items()},
            portion_guidance=dict(profile.portions),
            food_preferences={
                "rasas": profile.rasas,
                "temperature": profile.temperature,
                "consistency": profile.consistency,
            },
            foods_to_avoid=list(profile.foods_to_avoid),
            key_principles=[
                f"Favor {profile.rasas.lower()} tastes",
                f"Emphasize {profile.qualities.lower()} in food choices",
                f"Avoid {profile.avoid.lower()}",
                "Make lunch the largest meal of the day",
            ],
            mindful_eating={k: list(v) for k, v in MINDFUL_EATING.items()},
            daily_routine=list(DAILY_ROUTINE),
            recommendations=recommendations,
            special_notes=special_notes,
            seasonal_adjustment=seasonal,
            health_adjustments=[HEALTH_ADJUSTMENTS[t] for t in health_tags],
            secondary_blend=blend_notes,
        )
