"""Quiz Shape Enforcement — strict parsing of completion text and the length policy.

Tests cover:
    - Fenced and bare JSON accepted
    - Empty text, invalid JSON, wrong types, bad answer index rejected
    - Truncation to 5 and padding with placeholders
"""

import json

import pytest

from studyfront.core.enforce_quiz_shape import (
    fit_quiz_length,
    parse_completion_text,
    placeholder_question,
    strip_code_fences,
)
from studyfront.core.errors import QuizShapeError
from studyfront.schemas.quiz import QUIZ_LENGTH, QuizQuestion


def _question(answer=0, choices=None, **extra):
    return {
        "question": "What is a stack?",
        "choices": choices or ["LIFO", "FIFO", "Tree", "Graph"],
        "answer": answer,
        **extra,
    }


def _payload(*questions):
    return json.dumps({"questions": list(questions)})


def test_strip_code_fences_removes_json_fence():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_parse_accepts_fenced_json():
    text = "```json\n" + _payload(_question(explanation="Stacks are LIFO")) + "\n```"
    questions = parse_completion_text(text)
    assert len(questions) == 1
    assert questions[0].choices[0] == "LIFO"
    assert questions[0].explanation == "Stacks are LIFO"


def test_parse_allows_missing_explanation():
    assert parse_completion_text(_payload(_question()))[0].explanation is None


@pytest.mark.parametrize("text", ["", "   ", "```json\n```"])
def test_parse_rejects_empty(text):
    with pytest.raises(QuizShapeError):
        parse_completion_text(text)


def test_parse_rejects_invalid_json():
    with pytest.raises(QuizShapeError, match="not valid JSON"):
        parse_completion_text("Here is your quiz: {questions: [")


@pytest.mark.parametrize("bad", [
    _question(answer=4),
    _question(answer=-1),
    _question(answer="0"),
    _question(choices=["a", "b", "c"]),
    {"question": "No choices", "answer": 0},
])
def test_parse_rejects_shape_mismatch(bad):
    with pytest.raises(QuizShapeError, match="schema"):
        parse_completion_text(_payload(bad))


def test_parse_rejects_missing_questions_key():
    with pytest.raises(QuizShapeError):
        parse_completion_text(json.dumps({"quiz": []}))


def test_parse_rejects_empty_questions_list():
    with pytest.raises(QuizShapeError):
        parse_completion_text(_payload())


def test_fit_truncates_long_quiz():
    questions = [
        QuizQuestion(question=f"Q{i}", choices=["a", "b", "c", "d"], answer=1)
        for i in range(8)
    ]
    fitted = fit_quiz_length(questions)
    assert len(fitted) == QUIZ_LENGTH
    assert [q.question for q in fitted] == ["Q0", "Q1", "Q2", "Q3", "Q4"]


def test_fit_pads_short_quiz_with_numbered_placeholders():
    first = QuizQuestion(question="Q0", choices=["a", "b", "c", "d"], answer=2)
    fitted = fit_quiz_length([first])
    assert len(fitted) == QUIZ_LENGTH
    assert fitted[0] is first
    assert fitted[1].question.startswith("Review question 2:")
    assert fitted[4].question.startswith("Review question 5:")


def test_placeholder_question_is_valid():
    q = placeholder_question(3)
    assert q.choices == ["Concept A", "Concept B", "Concept C", "Concept D"]
    assert q.answer == 0
