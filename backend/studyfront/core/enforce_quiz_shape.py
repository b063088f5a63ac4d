"""Quiz Shape Enforcement — strict parsing of completion output and length policy.

Invariants:
    - parse_completion_text either returns validated questions or raises QuizShapeError
    - fit_quiz_length always returns exactly QUIZ_LENGTH questions
    - Truncation keeps the first questions; padding appends placeholders
    - Markdown code fences are stripped before decoding
"""

import json
import re

from pydantic import ValidationError

from studyfront.core.errors import QuizShapeError
from studyfront.schemas.quiz import (
    QUIZ_LENGTH,
    CompletionQuizPayload,
    QuizQuestion,
)


_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")

PLACEHOLDER_EXPLANATION = (
    "This is a placeholder question. Configure a completion provider "
    "for better quiz generation."
)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def parse_completion_text(text: str) -> list[QuizQuestion]:
    """Decode and validate completion text. Pure — raises on any mismatch."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise QuizShapeError("Completion returned empty content")
    try:
        raw = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise QuizShapeError(f"Completion is not valid JSON: {e.msg}")
    try:
        payload = CompletionQuizPayload.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(loc) for loc in first["loc"])
        raise QuizShapeError(
            f"Completion JSON failed schema at '{where}': {first['msg']}",
        )
    return payload.questions


def placeholder_question(number: int) -> QuizQuestion:
    """Generic review question used to pad short quizzes."""
    return QuizQuestion(
        question=(
            f"Review question {number}: "
            "What is an important concept from these notes?"
        ),
        choices=["Concept A", "Concept B", "Concept C", "Concept D"],
        answer=0,
        explanation=PLACEHOLDER_EXPLANATION,
    )


def fit_quiz_length(questions: list[QuizQuestion]) -> list[QuizQuestion]:
    """Truncate or pad to exactly QUIZ_LENGTH questions."""
    fitted = list(questions[:QUIZ_LENGTH])
    while len(fitted) < QUIZ_LENGTH:
        fitted.append(placeholder_question(len(fitted) + 1))
    return fitted
