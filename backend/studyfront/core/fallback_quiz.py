"""Fallback Quiz — heuristic question generator used when the completion service is unavailable.

Invariants:
    - Always returns exactly QUIZ_LENGTH questions with CHOICES_PER_QUESTION choices
    - answer points at the keyword's position after shuffling
    - Randomness comes only from the injected random.Random
"""

import random
import re

from studyfront.core.enforce_quiz_shape import (
    PLACEHOLDER_EXPLANATION,
    fit_quiz_length,
)
from studyfront.schemas.quiz import QUIZ_LENGTH, QuizQuestion


DISTRACTORS: tuple[str, ...] = (
    "None of the above",
    "All of the above",
    "This is incorrect",
)
MIN_SENTENCE_CHARS = 10
MIN_KEYWORD_CHARS = 3
MIN_KEYWORDS = 3
EXCERPT_CHARS = 60

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def split_sentences(notes: str) -> list[str]:
    """Sentences longer than MIN_SENTENCE_CHARS, stripped."""
    return [
        s.strip() for s in _SENTENCE_SPLIT_RE.split(notes)
        if len(s.strip()) > MIN_SENTENCE_CHARS
    ]


def _question_from_sentence(
    sentence: str, rng: random.Random,
) -> QuizQuestion | None:
    words = [w for w in sentence.split(" ") if len(w) > MIN_KEYWORD_CHARS]
    if len(words) < MIN_KEYWORDS:
        return None
    keyword = rng.choice(words)
    choices = [keyword, *DISTRACTORS]
    rng.shuffle(choices)
    return QuizQuestion(
        question=(
            "Based on the notes, which concept relates to: "
            f'"{sentence[:EXCERPT_CHARS]}..."?'
        ),
        choices=choices,
        answer=choices.index(keyword),
        explanation=PLACEHOLDER_EXPLANATION,
    )


def generate_fallback_quiz(
    notes: str, rng: random.Random | None = None,
) -> list[QuizQuestion]:
    """Build a quiz from the first sentences of `notes`, padded to QUIZ_LENGTH."""
    rng = rng or random.Random()
    questions = []
    for sentence in split_sentences(notes)[:QUIZ_LENGTH]:
        question = _question_from_sentence(sentence, rng)
        if question is not None:
            questions.append(question)
    return fit_quiz_length(questions)
