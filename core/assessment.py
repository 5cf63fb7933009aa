"""
core/assessment.py
────────────────────────────────────────────────────────────────────────
Prakruti questionnaire → score vector.

1. `score()`             – fold answered items into per-axis point totals
2. `to_percentages()`    – normalise a score vector to shares of 100
3. `AssessmentCalculator` – the richer evaluation (category breakdown,
   strengths, imbalances) used by the enhanced questionnaire

Two fixed questionnaires are shipped: the 8-item BASIC set where every
option weighs 2, and the 12-item ENHANCED set grouped in six categories
with weights 2–3. Weights always come from the questionnaire, never
from the client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence

from core.classifier import ConstitutionLabel, classify, dominant_axis
from core.dosha import AXES, ActivityLevel, DoshaAxis, PercentageVector, ScoreVector, coerce_axis
from core.errors import DegenerateScores, EmptyAssessment, UnknownQuestion
from core.food_tables import PERSONALITY_TRAITS
from core.models.patient import DemographicProfile


# ──────────────────────────────────────────────────────────────────────
#  Questionnaire types
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class QuestionOption:
    text: str
    axis: DoshaAxis
    points: int


@dataclass(frozen=True)
class Question:
    id: int
    text: str
    options: tuple[QuestionOption, ...]
    category: str = "General"

    def option_for(self, axis: DoshaAxis) -> QuestionOption:
        for opt in self.options:
            if opt.axis is axis:
                return opt
        raise UnknownQuestion(self.id, f"offers no {axis.value} option")


@dataclass(frozen=True)
class AnsweredItem:
    question_id: int
    axis: DoshaAxis
    points: int

    def __post_init__(self) -> None:
        if self.points <= 0:
            raise ValueError(f"points must be positive, got {self.points}")


def _q(qid: int, text: str, category: str, vata: str, pitta: str, kapha: str, points: int = 2) -> Question:
    return Question(
        id=qid,
        text=text,
        category=category,
        options=(
            QuestionOption(vata, DoshaAxis.VATA, points),
            QuestionOption(pitta, DoshaAxis.PITTA, points),
            QuestionOption(kapha, DoshaAxis.KAPHA, points),
        ),
    )


BASIC_QUESTIONS: tuple[Question, ...] = (
    _q(1, "What is your body build?", "General",
       "Thin, light frame", "Medium build", "Large, heavy frame"),
    _q(2, "How is your skin?", "General",
       "Dry, rough, cool", "Warm, oily, prone to rashes", "Thick, oily, cool, smooth"),
    _q(3, "How is your hair?", "General",
       "Dry, brittle, thin", "Fine, oily, early graying", "Thick, oily, wavy, lustrous"),
    _q(4, "How is your appetite?", "General",
       "Variable, skip meals easily", "Strong, get irritable when hungry",
       "Steady, can skip meals without discomfort"),
    _q(5, "How is your digestion?", "General",
       "Irregular, gas, bloating", "Strong, heartburn, loose stools", "Slow but steady"),
    _q(6, "How is your sleep?", "General",
       "Light, interrupted, 6-7 hours", "Sound, moderate, 6-8 hours", "Deep, long, 8+ hours"),
    _q(7, "How is your energy level?", "General",
       "Comes in bursts, gets tired easily", "Moderate, consistent", "Steady, good endurance"),
    _q(8, "How is your mental activity?", "General",
       "Quick thinking, restless mind", "Sharp, focused, judgmental",
       "Calm, steady, good long-term memory"),
)

PHYSICAL = "Physical Constitution"
DIGESTIVE = "Digestive Patterns"
MENTAL = "Mental & Emotional"
SLEEP = "Sleep & Energy"
ACTIVITY = "Physical Activity"
ENVIRONMENT = "Environmental Preferences"

ENHANCED_QUESTIONS: tuple[Question, ...] = (
    _q(1, "What is your body build?", PHYSICAL,
       "Thin, light frame, prominent bones", "Medium build, well-proportioned",
       "Large, heavy frame, broad shoulders", points=3),
    _q(2, "How is your skin texture and appearance?", PHYSICAL,
       "Dry, rough, cool to touch, thin", "Warm, oily, soft, prone to rashes/acne",
       "Thick, oily, cool, smooth, pale"),
    _q(3, "Describe your hair characteristics:", PHYSICAL,
       "Dry, brittle, thin, coarse", "Fine, oily, early graying/balding",
       "Thick, oily, wavy, lustrous, strong"),
    _q(4, "How is your appetite throughout the day?", DIGESTIVE,
       "Variable, sometimes forget to eat", "Strong, get irritable when hungry",
       "Steady, can skip meals easily", points=3),
    _q(5, "How is your digestion after meals?", DIGESTIVE,
       "Variable, sometimes bloated/gassy", "Strong, digest quickly, rarely bloated",
       "Slow, feel heavy after eating"),
    _q(6, "What foods do you naturally crave?", DIGESTIVE,
       "Sweet, sour, salty foods", "Sweet, bitter, astringent foods",
       "Pungent, bitter, astringent foods"),
    _q(7, "How do you typically handle stress?", MENTAL,
       "Become anxious, worried, restless", "Become irritable, angry, impatient",
       "Become withdrawn, depressed, lethargic"),
    _q(8, "Describe your memory and learning style:", MENTAL,
       "Quick to learn, quick to forget", "Sharp memory, focused learning",
       "Slow to learn, excellent long-term memory"),
    _q(9, "How is your sleep pattern?", SLEEP,
       "Light sleeper, difficulty falling asleep", "Moderate sleep, wake up refreshed",
       "Deep sleeper, need more than 8 hours"),
    _q(10, "When do you have the most energy?", SLEEP,
       "Energy comes in bursts, then crashes", "Consistent energy throughout the day",
       "Slow to start, steady energy once going"),
    _q(11, "What type of exercise do you prefer?", ACTIVITY,
       "Light, flexible activities (yoga, walking)",
       "Moderate, competitive activities (swimming, cycling)",
       "Gentle, consistent activities (walking, light weights)"),
    _q(12, "What weather/climate do you prefer?", ENVIRONMENT,
       "Warm, humid weather", "Cool, moderate weather", "Warm, dry weather"),
)

QUESTIONNAIRES: Dict[str, tuple[Question, ...]] = {
    "basic": BASIC_QUESTIONS,
    "enhanced": ENHANCED_QUESTIONS,
}


def questionnaire(mode: str = "basic") -> tuple[Question, ...]:
    try:
        return QUESTIONNAIRES[mode.lower()]
    except KeyError:
        raise ValueError(f"unknown questionnaire mode {mode!r}") from None


def answers_from_choices(
    questions: Sequence[Question],
    choices: Mapping[int, str | DoshaAxis],
) -> List[AnsweredItem]:
    """Turn `{question_id: chosen axis}` into weighted items, in questionnaire order."""
    by_id = {q.id: q for q in questions}
    unknown = [qid for qid in choices if qid not in by_id]
    if unknown:
        raise UnknownQuestion(unknown[0])

    items: List[AnsweredItem] = []
    for q in questions:
        if q.id not in choices:
            continue
        opt = q.option_for(coerce_axis(choices[q.id]))
        items.append(AnsweredItem(q.id, opt.axis, opt.points))
    return items


# ──────────────────────────────────────────────────────────────────────
#  Scoring
# ──────────────────────────────────────────────────────────────────────
def score(items: Iterable[AnsweredItem]) -> ScoreVector:
    totals: ScoreVector = {axis: 0 for axis in AXES}
    seen = False
    for item in items:
        seen = True
        totals[coerce_axis(item.axis)] += item.points
    if not seen:
        raise EmptyAssessment()
    return totals


def to_percentages(scores: Mapping[DoshaAxis, int]) -> PercentageVector:
    total = sum(scores.get(axis, 0) for axis in AXES)
    if total <= 0:
        raise DegenerateScores()
    return {axis: scores.get(axis, 0) / total * 100 for axis in AXES}


# ──────────────────────────────────────────────────────────────────────
#  Detailed evaluation
# ──────────────────────────────────────────────────────────────────────
@dataclass
class AssessmentResult:
    scores: ScoreVector
    percentages: PercentageVector
    dominant: DoshaAxis
    constitution: ConstitutionLabel
    category_breakdown: Dict[str, ScoreVector] = field(default_factory=dict)
    strengths: List[str] = field(default_factory=list)
    imbalances: List[str] = field(default_factory=list)
    personality_traits: List[str] = field(default_factory=list)


def category_breakdown(
    questions: Sequence[Question], items: Iterable[AnsweredItem]
) -> Dict[str, ScoreVector]:
    category_of = {q.id: q.category for q in questions}
    out: Dict[str, ScoreVector] = {}
    for q in questions:
        out.setdefault(q.category, {axis: 0 for axis in AXES})
    for item in items:
        cat = category_of.get(item.question_id)
        if cat is not None:
            out[cat][item.axis] += item.points
    return out


_STRENGTHS = {
    PHYSICAL: "Strong physical foundation",
    DIGESTIVE: "Good digestive capacity",
    MENTAL: "Stable mental-emotional state",
    SLEEP: "Good energy and sleep patterns",
}

_IMBALANCES = {
    DIGESTIVE: {
        DoshaAxis.VATA: "Irregular digestion - focus on regular eating schedule",
        DoshaAxis.PITTA: "Strong digestive fire - avoid skipping meals",
        DoshaAxis.KAPHA: "Slow digestion - incorporate digestive spices",
    },
    MENTAL: {
        DoshaAxis.VATA: "Tendency toward anxiety - practice grounding activities",
        DoshaAxis.PITTA: "Tendency toward irritability - practice cooling activities",
        DoshaAxis.KAPHA: "Tendency toward lethargy - increase stimulating activities",
    },
}


def identify_strengths(breakdown: Mapping[str, ScoreVector], dominant: DoshaAxis) -> List[str]:
    strengths = [
        _STRENGTHS[cat]
        for cat, scores in breakdown.items()
        if cat in _STRENGTHS and scores[dominant] > 4
    ]
    return strengths or ["Balanced overall constitution"]


def identify_imbalances(
    breakdown: Mapping[str, ScoreVector],
    demographics: DemographicProfile | None = None,
) -> List[str]:
    imbalances: List[str] = []
    for cat, scores in breakdown.items():
        if cat not in _IMBALANCES:
            continue
        top = max(AXES, key=lambda a: scores[a])   # first axis wins ties
        if scores[top] > 6:
            imbalances.append(_IMBALANCES[cat][top])

    if demographics is not None:
        if demographics.age is not None:
            if demographics.age < 16:
                imbalances.append("Growing phase - ensure adequate nutrition for development")
            elif demographics.age > 50:
                imbalances.append("Mature phase - focus on easily digestible foods")
        if demographics.activity is not None:
            if demographics.activity is ActivityLevel.LOW:
                imbalances.append("Low activity - gradually increase movement and exercise")
            elif demographics.activity is ActivityLevel.HIGH:
                imbalances.append("High activity - ensure adequate rest and recovery")

    return imbalances or ["No significant imbalances detected"]


class AssessmentCalculator:
    """Score, classify and annotate one questionnaire session."""

    def __init__(self, questions: Sequence[Question] = BASIC_QUESTIONS) -> None:
        self.questions = tuple(questions)

    def evaluate(
        self,
        items: Sequence[AnsweredItem],
        demographics: DemographicProfile | None = None,
    ) -> AssessmentResult:
        scores = score(items)
        pct = to_percentages(scores)
        dominant = dominant_axis(pct)
        breakdown = category_breakdown(self.questions, items)
        return AssessmentResult(
            scores=scores,
            percentages=pct,
            dominant=dominant,
            constitution=classify(pct),
            category_breakdown=breakdown,
            strengths=identify_strengths(breakdown, dominant),
            imbalances=identify_imbalances(breakdown, demographics),
            personality_traits=list(PERSONALITY_TRAITS[dominant]),
        )
