"""Quiz Schemas — question shape, completion payload, and quiz API contracts.

Invariants:
    - QuizQuestion.choices has exactly CHOICES_PER_QUESTION entries
    - QuizQuestion.answer is a valid 0-based index into its own choices
    - CompletionQuizPayload rejects unknown shapes (extra keys ignored, types strict)
    - GenerateQuizRequest.notes is at least 50 characters after stripping
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


QUIZ_LENGTH: int = 5
CHOICES_PER_QUESTION: int = 4
MIN_NOTES_CHARS: int = 50
MAX_NOTES_CHARS: int = 50_000


class CamelModel(BaseModel):
    """Base for JSON contracts using camelCase keys on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class QuizQuestion(BaseModel):
    """One multiple-choice question."""
    model_config = ConfigDict(strict=True)

    question: str = Field(min_length=1)
    choices: list[str] = Field(
        min_length=CHOICES_PER_QUESTION, max_length=CHOICES_PER_QUESTION,
    )
    answer: int
    explanation: str | None = None

    @model_validator(mode="after")
    def answer_in_range(self):
        if not 0 <= self.answer < len(self.choices):
            raise ValueError(
                f"answer index {self.answer} outside choices "
                f"[0, {len(self.choices)})",
            )
        return self


class CompletionQuizPayload(BaseModel):
    """Expected JSON document from the completion service."""
    questions: list[QuizQuestion] = Field(min_length=1)


class GenerateQuizRequest(CamelModel):
    notes: str = Field(max_length=MAX_NOTES_CHARS)
    course_id: UUID | None = None

    @field_validator("notes")
    @classmethod
    def notes_long_enough(cls, v: str) -> str:
        v = v.strip()
        if len(v) < MIN_NOTES_CHARS:
            raise ValueError(
                f"Notes must be at least {MIN_NOTES_CHARS} characters",
            )
        return v


class GenerateQuizResponse(CamelModel):
    questions: list[QuizQuestion]
    remaining: int
    limit: int
    is_pro: bool
