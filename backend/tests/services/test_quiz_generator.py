"""Quiz Generator — completion path, length policy, fallback paths.

Tests cover:
    - Well-formed completion (fenced or bare) → exactly five questions
    - Short/long completions padded/truncated
    - Malformed JSON, bad answer index, wrong choice count → fallback
    - Upstream failure → fallback, never raised
    - Completer built on the Anthropic client joins text blocks
"""

import random
from types import SimpleNamespace
from unittest.mock import AsyncMock

from studyfront.core.errors import CompletionServiceError
from studyfront.core.enforce_quiz_shape import PLACEHOLDER_EXPLANATION
from studyfront.schemas.quiz import QUIZ_LENGTH
from studyfront.services.quiz_generator import AnthropicQuizCompleter, QuizGenerator
from tests.services.fakes import FakeCompleter, quiz_json

NOTES = (
    "Photosynthesis converts light energy into chemical energy. "
    "Chlorophyll absorbs mostly blue and red wavelengths of light. "
    "The Calvin cycle fixes carbon dioxide into sugar molecules."
)


def _is_fallback(questions) -> bool:
    return all(q.explanation == PLACEHOLDER_EXPLANATION for q in questions)


async def test_valid_completion_used_as_is():
    completer = FakeCompleter(quiz_json(5, answer=2))
    questions = await QuizGenerator(completer).generate(NOTES)
    assert len(questions) == QUIZ_LENGTH
    assert [q.answer for q in questions] == [2] * 5
    assert completer.calls == [NOTES]


async def test_fenced_completion_accepted():
    completer = FakeCompleter(f"```json\n{quiz_json(5)}\n```")
    questions = await QuizGenerator(completer).generate(NOTES)
    assert questions[0].question == "Question 1?"


async def test_short_completion_padded():
    questions = await QuizGenerator(FakeCompleter(quiz_json(3))).generate(NOTES)
    assert len(questions) == QUIZ_LENGTH
    assert questions[2].question == "Question 3?"
    assert questions[3].question.startswith("Review question 4")


async def test_long_completion_truncated():
    questions = await QuizGenerator(FakeCompleter(quiz_json(8))).generate(NOTES)
    assert [q.question for q in questions][-1] == "Question 5?"


async def test_out_of_range_answer_falls_back():
    questions = await QuizGenerator(FakeCompleter(quiz_json(5, answer=4))).generate(NOTES)
    assert len(questions) == QUIZ_LENGTH
    assert _is_fallback(questions)


async def test_malformed_completion_falls_back():
    for reply in ("not json at all", '{"questions": []}', '{"items": []}', ""):
        questions = await QuizGenerator(FakeCompleter(reply)).generate(NOTES)
        assert len(questions) == QUIZ_LENGTH
        assert _is_fallback(questions)


async def test_upstream_failure_falls_back():
    completer = FakeCompleter(CompletionServiceError("overloaded", "transient"))
    questions = await QuizGenerator(completer, random.Random(1)).generate(NOTES)
    assert len(questions) == QUIZ_LENGTH
    assert _is_fallback(questions)


async def test_no_completer_uses_fallback():
    questions = await QuizGenerator(rng=random.Random(3)).generate(NOTES)
    assert len(questions) == QUIZ_LENGTH
    for q in questions:
        assert len(q.choices) == 4
        assert 0 <= q.answer < 4


async def test_anthropic_completer_joins_text_blocks():
    client = SimpleNamespace(create_message=AsyncMock(return_value=SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text='{"questions": '),
            SimpleNamespace(type="tool_use", input={}),
            SimpleNamespace(type="text", text="[]}"),
        ],
    )))
    completer = AnthropicQuizCompleter(client, model="claude-test", max_tokens=100)

    text = await completer.complete_quiz(NOTES)

    assert text == '{"questions": []}'
    kwargs = client.create_message.await_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["max_tokens"] == 100
    assert NOTES in kwargs["messages"][0]["content"]
