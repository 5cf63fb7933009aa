"""
core/food_tables.py
────────────────────────────────────────────────────────────────────────
Static, read-only lookup tables consumed by the plan composer.

* FOODS                – favourable foods per axis, per category, rasa-tagged
* MEAL_TEMPLATES       – per-slot selection counts, portion, timing, note
* DOSHA_PROFILES       – goal / qualities / avoid text per axis
* modifier tables      – season, health condition, activity, age band
* narrative tables     – lifestyle advice, mindful eating, daily routine

Every table is keyed by a closed enum from `core.dosha`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from core.dosha import ActivityLevel, DoshaAxis, MealSlot, Rasa, Season

SW, SO, SA = Rasa.SWEET, Rasa.SOUR, Rasa.SALTY
PU, BI, AS = Rasa.PUNGENT, Rasa.BITTER, Rasa.ASTRINGENT

CATEGORIES = ("grains", "vegetables", "fruits", "proteins", "fats", "spices", "beverages")


@dataclass(frozen=True)
class FoodItem:
    name: str
    rasas: Tuple[Rasa, ...]
    heavy: bool = False
    warming: bool = False
    oily: bool = False
    vegetarian: bool = True


def _f(
    name: str,
    rasas: Tuple[Rasa, ...],
    heavy: bool = False,
    warming: bool = False,
    oily: bool = False,
    veg: bool = True,
) -> FoodItem:
    return FoodItem(name, rasas, heavy, warming, oily, veg)


FoodTable = Mapping[str, Tuple[FoodItem, ...]]

# ──────────────────────────────────────────────────────────────────────
#  Favourable foods
# ──────────────────────────────────────────────────────────────────────
_VATA: FoodTable = {
    # sweet, sour, salty; warm, oily, heavy
    "grains": (
        _f("Basmati Rice", (SW,), heavy=True, warming=True, oily=True),
        _f("Oatmeal (cooked)", (SW,), heavy=True, warming=True, oily=True),
        _f("Wheat Bread", (SW,), heavy=True, warming=True),
        _f("Quinoa (cooked)", (SW,), heavy=True, warming=True),
    ),
    "vegetables": (
        _f("Cooked Carrots", (SW,), heavy=True, warming=True),
        _f("Cooked Beets", (SW,), heavy=True, warming=True),
        _f("Sweet Potato (cooked)", (SW,), heavy=True, warming=True),
        _f("Cooked Zucchini", (SW,), warming=True),
    ),
    "fruits": (
        _f("Stewed Apples", (SW,), warming=True),
        _f("Ripe Bananas", (SW,), heavy=True),
        _f("Cooked Pears", (SW,), warming=True),
        _f("Sweet Mango", (SW, SO), heavy=True),
    ),
    "proteins": (
        _f("Mung Dal (cooked)", (SW,), warming=True),
        _f("Paneer", (SW,), heavy=True, oily=True),
        _f("Eggs (cooked)", (SW,), heavy=True, warming=True, oily=True, veg=False),
        _f("Chicken (well-cooked)", (SW,), heavy=True, warming=True, oily=True, veg=False),
    ),
    "fats": (
        _f("Ghee", (SW,), heavy=True, warming=True, oily=True),
        _f("Sesame Oil", (SW,), heavy=True, warming=True, oily=True),
        _f("Avocado", (SW,), heavy=True, oily=True),
    ),
    "spices": (
        _f("Ginger", (PU,), warming=True),
        _f("Cinnamon", (SW, PU), warming=True),
        _f("Cardamom", (SW, PU), warming=True),
        _f("Cumin", (PU,), warming=True),
        _f("Fennel", (SW,), warming=True),
        _f("Rock Salt", (SA,), warming=True),
    ),
    "beverages": (
        _f("Warm Milk with Honey", (SW,), heavy=True, warming=True, oily=True),
        _f("Ginger Tea", (PU,), warming=True),
        _f("Warm Water", (SW,), warming=True),
    ),
}

_PITTA: FoodTable = {
    # sweet, bitter, astringent; cooling
    "grains": (
        _f("Basmati Rice", (SW,), heavy=True),
        _f("Barley", (SW, AS)),
        _f("Oats (cooked)", (SW,), heavy=True),
        _f("Wheat", (SW,), heavy=True),
    ),
    "vegetables": (
        _f("Cucumber", (SW, AS)),
        _f("Cilantro", (BI, AS)),
        _f("Leafy Greens", (BI, AS)),
        _f("Zucchini", (SW,)),
        _f("Asparagus", (SW, BI)),
    ),
    "fruits": (
        _f("Sweet Grapes", (SW,)),
        _f("Watermelon", (SW,)),
        _f("Sweet Apple", (SW, AS)),
        _f("Pomegranate", (SW, AS)),
    ),
    "proteins": (
        _f("Mung Dal", (SW, AS)),
        _f("Chickpeas", (SW, AS), heavy=True),
        _f("Tofu", (SW,), heavy=True),
    ),
    "fats": (
        _f("Ghee (small amount)", (SW,), heavy=True, oily=True),
        _f("Coconut Oil", (SW,), heavy=True, oily=True),
        _f("Sunflower Oil", (SW,), oily=True),
    ),
    "spices": (
        _f("Coriander", (SW, BI)),
        _f("Fennel", (SW,)),
        _f("Cardamom", (SW, PU)),
        _f("Mint", (PU, BI)),
        _f("Turmeric (small)", (BI, PU)),
        _f("Dill", (PU,)),
    ),
    "beverages": (
        _f("Coconut Water", (SW,)),
        _f("Mint Tea", (BI,)),
        _f("Rose Water", (SW, AS)),
    ),
}

_KAPHA: FoodTable = {
    # pungent, bitter, astringent; light, warm, dry
    "grains": (
        _f("Barley", (SW, AS), warming=True),
        _f("Millet", (SW, AS), warming=True),
        _f("Quinoa", (SW, AS), warming=True),
        _f("Buckwheat", (SW, AS), warming=True),
    ),
    "vegetables": (
        _f("Leafy Greens", (BI, AS)),
        _f("Radish", (PU,), warming=True),
        _f("Cabbage", (SW, AS)),
        _f("Cauliflower", (SW, AS), warming=True),
        _f("Bitter Gourd", (BI,)),
    ),
    "fruits": (
        _f("Apple", (SW, AS)),
        _f("Pear", (SW, AS)),
        _f("Pomegranate", (SW, AS)),
        _f("Cranberries", (AS,)),
    ),
    "proteins": (
        _f("Red Lentils", (SW, AS), warming=True),
        _f("Mung Dal", (SW, AS), warming=True),
        _f("Chickpeas (dry)", (SW, AS), warming=True),
    ),
    "fats": (
        _f("Mustard Oil (small)", (PU,), warming=True, oily=True),
        _f("Sunflower Oil (small)", (SW,), oily=True),
    ),
    "spices": (
        _f("Black Pepper", (PU,), warming=True),
        _f("Ginger", (PU,), warming=True),
        _f("Turmeric", (BI, PU), warming=True),
        _f("Cinnamon", (PU, SW), warming=True),
        _f("Cloves", (PU,), warming=True),
        _f("Mustard Seeds", (PU,), warming=True),
    ),
    "beverages": (
        _f("Ginger Tea", (PU,), warming=True),
        _f("Green Tea", (BI, AS)),
        _f("Warm Water with Honey", (SW,), warming=True),
    ),
}

FOODS: Dict[DoshaAxis, FoodTable] = {
    DoshaAxis.VATA: _VATA,
    DoshaAxis.PITTA: _PITTA,
    DoshaAxis.KAPHA: _KAPHA,
}


def food_names(axis: DoshaAxis, category: str) -> Tuple[str, ...]:
    return tuple(item.name for item in FOODS[axis][category])


# ──────────────────────────────────────────────────────────────────────
#  Meal templates – lunch richest, dinner lightest
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class MealTemplate:
    counts: Tuple[Tuple[str, int], ...]    # (category, how many), in display order
    portions: str
    timing: str
    note: str


MEAL_TEMPLATES: Dict[MealSlot, MealTemplate] = {
    MealSlot.BREAKFAST: MealTemplate(
        counts=(("grains", 1), ("fruits", 2), ("beverages", 1)),
        portions="Light (1-1.5 cups total)",
        timing="7:00 AM - 9:00 AM",
        note="Start your day gently. Breakfast should be light and easy to digest.",
    ),
    MealSlot.LUNCH: MealTemplate(
        counts=(("grains", 2), ("vegetables", 3), ("proteins", 2), ("fats", 1), ("beverages", 1)),
        portions="Substantial (2-3 cups total)",
        timing="12:00 PM - 2:00 PM",
        note="Main meal of the day. Your Agni is strongest now. Include all food groups.",
    ),
    MealSlot.DINNER: MealTemplate(
        counts=(("grains", 1), ("vegetables", 1), ("proteins", 1)),
        portions="Lightest (about 1 cup total)",
        timing="6:00 PM - 7:00 PM",
        note="Keep it light and simple. Avoid heavy foods before sleep.",
    ),
    MealSlot.SNACKS: MealTemplate(
        counts=(("fruits", 1), ("beverages", 1)),
        portions="Very light (handful or 1/2 cup)",
        timing="Only if truly hungry between meals",
        note="Snack only when genuinely hungry. Wait 3-4 hours between meals.",
    ),
}

# ──────────────────────────────────────────────────────────────────────
#  Per-axis guidance
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class DoshaProfile:
    goal: str
    qualities: str
    rasas: str
    avoid: str
    foods_to_avoid: Tuple[str, ...]
    temperature: str
    consistency: str
    portions: Tuple[Tuple[str, str], ...]


DOSHA_PROFILES: Dict[DoshaAxis, DoshaProfile] = {
    DoshaAxis.VATA: DoshaProfile(
        goal="Balance excess Vata",
        qualities="Warmth, Oiliness, Heaviness",
        rasas="Sweet, Sour, Salty",
        avoid="Cold, dry, raw foods",
        foods_to_avoid=("raw vegetables", "cold foods", "dry foods", "carbonated drinks"),
        temperature="warm",
        consistency="moist, oily",
        portions=(("breakfast", "medium"), ("lunch", "large"), ("dinner", "small")),
    ),
    DoshaAxis.PITTA: DoshaProfile(
        goal="Balance excess Pitta",
        qualities="Cooling, Heaviness, Dryness",
        rasas="Sweet, Bitter, Astringent",
        avoid="Spicy, sour, salty foods",
        foods_to_avoid=("spicy foods", "fermented foods", "citrus fruits", "tomatoes"),
        temperature="cool to moderate",
        consistency="moderate",
        portions=(("breakfast", "medium"), ("lunch", "large"), ("dinner", "medium")),
    ),
    DoshaAxis.KAPHA: DoshaProfile(
        goal="Balance excess Kapha",
        qualities="Lightness, Warmth, Dryness",
        rasas="Pungent, Bitter, Astringent",
        avoid="Heavy, oily, sweet foods",
        foods_to_avoid=("heavy foods", "oily foods", "cold foods", "sweet foods"),
        temperature="warm to hot",
        consistency="light, dry",
        portions=(("breakfast", "small"), ("lunch", "large"), ("dinner", "small")),
    ),
}

LIFESTYLE_RECOMMENDATIONS: Dict[DoshaAxis, Tuple[str, ...]] = {
    DoshaAxis.VATA: (
        "Eat at regular intervals",
        "Favor warm, cooked foods",
        "Practice calming activities like meditation",
        "Go to bed early (before 10 PM)",
    ),
    DoshaAxis.PITTA: (
        "Avoid skipping meals",
        "Stay cool and avoid excessive heat",
        "Practice moderation in all activities",
        "Include cooling activities like swimming",
    ),
    DoshaAxis.KAPHA: (
        "Eat your largest meal at midday",
        "Stay active and exercise regularly",
        "Avoid heavy, oily foods",
        "Wake up early (before 6 AM)",
    ),
}

PERSONALITY_TRAITS: Dict[DoshaAxis, Tuple[str, ...]] = {
    DoshaAxis.VATA: ("creativity", "enthusiasm", "flexibility", "quick thinking"),
    DoshaAxis.PITTA: ("intelligence", "focus", "determination", "leadership"),
    DoshaAxis.KAPHA: ("stability", "endurance", "compassion", "patience"),
}

EXPECTED_BENEFITS: Dict[DoshaAxis, Tuple[str, ...]] = {
    DoshaAxis.VATA: (
        "Improved digestion and reduced bloating",
        "Better sleep quality and reduced anxiety",
        "Increased energy and vitality",
        "Enhanced mental clarity and focus",
    ),
    DoshaAxis.PITTA: (
        "Better temperature regulation and cooling",
        "Reduced irritability and improved mood",
        "Enhanced mental focus and decision-making",
        "Improved skin health and complexion",
    ),
    DoshaAxis.KAPHA: (
        "Increased energy and motivation",
        "Better weight management",
        "Enhanced mental alertness",
        "Improved respiratory health",
    ),
}

# ──────────────────────────────────────────────────────────────────────
#  Modifier tables
# ──────────────────────────────────────────────────────────────────────
AGE_MIN, AGE_MAX = 16, 60
AGE_NOTE = "Easily digestible foods recommended due to age"
HIGH_ACTIVITY_NOTE = "Increase portion sizes and include more proteins"

SEASONAL_ADJUSTMENTS: Dict[Season, str] = {
    Season.SPRING: "Reduce kapha-increasing foods, add more bitter and pungent tastes",
    Season.SUMMER: "Focus on cooling foods, avoid excessive heat and spice",
    Season.MONSOON: "Boost digestion with warm, light foods",
    Season.WINTER: "Increase warming foods and healthy fats",
}

HEALTH_ADJUSTMENTS: Dict[str, str] = {
    "diabetes": "Avoid sweet and refined foods, focus on complex carbs",
    "hypertension": "Reduce salt intake, increase potassium-rich foods",
    "digestive-issues": "Focus on easily digestible foods, proper food combining",
    "anxiety-stress": "Favor grounding, warm meals at regular times",
    "sleep-issues": "Keep dinner light and early, finish eating 3 hours before bed",
    "weight-management": "Favor light, fibrous foods and keep portions moderate",
}

HEALTH_RECOMMENDATIONS: Dict[str, str] = {
    "diabetes": "Monitor blood sugar and keep meal times consistent",
    "hypertension": "Practice daily relaxation and limit stimulants",
    "digestive-issues": "Eat mindfully and chew food thoroughly",
    "anxiety-stress": "Practice daily breathing exercises (pranayama)",
    "sleep-issues": "Keep a fixed bedtime and avoid screens after 9 PM",
    "weight-management": "Pair the plan with 30 minutes of daily movement",
}

_HEALTH_ALIASES = {
    "digestive": "digestive-issues",
    "high-blood-pressure": "hypertension",
    "blood-pressure": "hypertension",
    "anxiety": "anxiety-stress",
    "stress": "anxiety-stress",
    "sleep": "sleep-issues",
    "weight-management-concerns": "weight-management",
    "weight": "weight-management",
}


def normalize_health_tag(tag: str) -> str:
    """'High Blood Pressure' → 'hypertension', 'Anxiety/Stress' → 'anxiety-stress'."""
    slug = re.sub(r"[\s_/]+", "-", tag.strip().lower()).strip("-")
    return _HEALTH_ALIASES.get(slug, slug)


ACTIVITY_RECOMMENDATIONS: Dict[ActivityLevel, str] = {
    ActivityLevel.LOW: "Start with gentle exercises like walking or yoga",
    ActivityLevel.HIGH: "Ensure adequate rest and recovery time",
}


def age_band_recommendation(age: int | None) -> str | None:
    if age is None:
        return None
    if age > 50:
        return "Focus on gentle, low-impact exercises"
    if age < 25:
        return "Establish healthy habits early in life"
    return None


# ──────────────────────────────────────────────────────────────────────
#  Narrative
# ──────────────────────────────────────────────────────────────────────
SPICES_NOTE = (
    "Use these spices liberally to balance your Dosha. "
    "They enhance Agni and aid digestion."
)

MINDFUL_EATING: Dict[str, Tuple[str, ...]] = {
    "pre_meal": (
        "Sit in a calm, peaceful environment",
        "Take 3 deep breaths before eating",
        "Express gratitude for the meal",
        "Avoid distractions (TV, phone, work)",
    ),
    "during_meal": (
        "Chew each bite thoroughly",
        "Focus on the taste, texture, and aroma",
        "Eat at a moderate, relaxed pace",
        "Stop eating when 75% full",
    ),
    "post_meal": (
        "Take a short 10-minute walk",
        "Sit in Vajrasana (thunderbolt pose) for 5-10 minutes",
        "Avoid sleeping immediately after eating",
    ),
    "timing": (
        "Largest meal at lunch (12 PM - 2 PM) when Agni is strongest",
        "Light breakfast to awaken digestion",
        "Lightest meal at dinner (before 7 PM)",
        "Wait 3-4 hours between meals",
    ),
}

DAILY_ROUTINE: Tuple[str, ...] = (
    "Wake up: 6:00 AM - 7:00 AM",
    "Drink warm water upon waking",
    "Breakfast: 7:00 AM - 9:00 AM (Light)",
    "Lunch: 12:00 PM - 2:00 PM (Heaviest meal)",
    "Dinner: 6:00 PM - 7:00 PM (Lightest meal)",
    "Sleep: 10:00 PM - 11:00 PM",
)
