from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from uuid import UUID
from datetime import datetime
from typing import List

from quizmaster.core.base_config import BaseConfig
from quizmaster.db.models import QuestionCategory, QuestionLevel


def _lower_strip(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class QuestionBase(BaseModel):
    question_text: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: str
    level: QuestionLevel
    category: QuestionCategory

    @field_validator("level", "category", mode="before")
    @classmethod
    def normalize_choice(cls, value):
        return _lower_strip(value)

    @field_validator("question_text")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must have a value")
        return value

    @model_validator(mode="after")
    def correct_answer_in_options(self):
        if self.correct_answer not in self.options:
            raise ValueError("correct answer must be one of the options")
        return self


class QuestionCreate(QuestionBase):
    pass


class QuestionUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    question_text: str | None = None
    options: List[str] | None = None
    correct_answer: str | None = None
    level: str | None = None
    category: str | None = None


class QuestionResponse(BaseConfig):
    id: UUID
    question_text: str
    options: List[str]
    correct_answer: str
    level: str
    category: str
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime | None = None


class QuestionPublic(BaseModel):
    """Client-safe projection: never carries the correct answer."""
    id: UUID
    category: str
    text: str
    options: List[str]

    @classmethod
    def from_question(cls, question) -> "QuestionPublic":
        return cls(
            id=question.id,
            category=question.category,
            text=question.question_text,
            options=question.options,
        )


class PracticeAnswerRequest(BaseModel):
    question_id: UUID
    answer: str = Field(min_length=1)


class PracticeAnswerResponse(BaseModel):
    is_correct: bool
    correct_answer: str
