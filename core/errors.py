"""
Typed failures raised by the assessment → plan engine.

None of these are retryable: the engine is pure, so the same input
fails the same way every time. Callers translate them into user-facing
messages (the HTTP layer maps all of them to 422).
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for every engine failure."""


class EmptyAssessment(EngineError):
    def __init__(self) -> None:
        super().__init__("assessment has no answered items")


class DegenerateScores(EngineError):
    def __init__(self) -> None:
        super().__init__("score vector sums to zero – percentages undefined")


class UnknownAxis(EngineError, ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"unknown dosha axis: {value!r}")


class UnknownQuestion(EngineError, ValueError):
    def __init__(self, question_id: object, detail: str = "not in questionnaire") -> None:
        self.question_id = question_id
        super().__init__(f"question {question_id!r}: {detail}")
