import uuid
from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import datetime
from typing import List

from quizmaster.core.base_config import BaseConfig
from quizmaster.schemas.question import QuestionPublic
from quizmaster.schemas.quiz_result import ScoredAnswerResponse


class QuizStartResponse(BaseConfig):
    session_id: UUID
    result: int
    expires_at: datetime
    questions: List[QuestionPublic]


class ActiveQuizResponse(BaseConfig):
    session_id: UUID
    question_ids: List[str]
    created_at: datetime
    expires_at: datetime


class SingleAnswer(BaseModel):
    id: str = Field(min_length=1)
    answer: str

    @field_validator("id")
    @classmethod
    def canonical_id(cls, value: str) -> str:
        # Issued ids are stored in canonical UUID form; unknown shapes are kept
        # so the answer-set check can report them.
        try:
            return str(uuid.UUID(value.strip()))
        except ValueError:
            return value


class QuizSubmission(BaseModel):
    answers: List[SingleAnswer] = Field(min_length=1)


class QuizSubmitResponse(BaseModel):
    message: str
    result_id: UUID
    score: float
    total_questions: int
    correct_answers: int
    false_answers: int
    results: List[ScoredAnswerResponse]
