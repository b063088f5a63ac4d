"""Quiz Generator — completion-service quiz with strict validation and heuristic fallback.

Invariants:
    - generate() always returns exactly QUIZ_LENGTH valid questions
    - Any completion failure or shape mismatch falls back to the heuristic
      generator; no upstream error reaches the caller
    - The completion output is never trusted structurally: it goes through
      parse_completion_text (pydantic, strict) before use

Design Decisions:
    - Completer injected as a QuizCompleter protocol: None means "no provider
      configured", tests pass plain fakes
"""

import logging
import random

from studyfront.core.enforce_quiz_shape import fit_quiz_length, parse_completion_text
from studyfront.core.errors import QuizShapeError, UpstreamServiceError
from studyfront.core.fallback_quiz import generate_fallback_quiz
from studyfront.core.repository_protocols import QuizCompleter
from studyfront.infrastructure.anthropic_client import ResilientAnthropicClient
from studyfront.schemas.quiz import QuizQuestion
from studyfront.services.quiz_prompt import QUIZ_SYSTEM_PROMPT, build_quiz_prompt

logger = logging.getLogger(__name__)


class AnthropicQuizCompleter:
    """QuizCompleter backed by the Anthropic Messages API."""

    def __init__(
        self,
        client: ResilientAnthropicClient,
        model: str,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete_quiz(self, notes: str) -> str:
        response = await self.client.create_message(
            model=self.model,
            max_tokens=self.max_tokens,
            system=QUIZ_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_quiz_prompt(notes)}],
            temperature=self.temperature,
        )
        return "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )


class QuizGenerator:
    def __init__(
        self,
        completer: QuizCompleter | None = None,
        rng: random.Random | None = None,
    ):
        self._completer = completer
        self._rng = rng or random.Random()

    async def generate(self, notes: str) -> list[QuizQuestion]:
        if self._completer is None:
            return generate_fallback_quiz(notes, self._rng)
        try:
            text = await self._completer.complete_quiz(notes)
            return fit_quiz_length(parse_completion_text(text))
        except UpstreamServiceError as e:
            logger.warning(
                f"Completion unavailable, using fallback quiz: {e.message}",
                extra={"service": e.service, "error_code": e.code},
            )
        except QuizShapeError as e:
            logger.warning(
                f"Completion output rejected, using fallback quiz: {e.message}",
                extra={"error_code": e.code},
            )
        return generate_fallback_quiz(notes, self._rng)
