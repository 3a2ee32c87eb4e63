from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from quizmaster.core.base_config import BaseConfig


class ScoredAnswerResponse(BaseModel):
    question_id: UUID
    user_answer: str
    is_correct: bool
    correct_answer: str

    class Config:
        from_attributes = True


class QuizResultCreate(BaseModel):
    user_id: UUID
    user_name: str
    user_email: str
    active_quiz_id: Optional[UUID]
    raw_score: int
    total_questions: int
    quiz_answers: List[ScoredAnswerResponse]


class QuizResultResponse(BaseConfig):
    id: UUID
    active_quiz_id: Optional[UUID]
    user_name: str
    user_email: str
    score: float
    total_questions: int
    attempted_at: datetime
    quiz_answers: List[ScoredAnswerResponse]
