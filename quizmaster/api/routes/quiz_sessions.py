from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizmaster.api.deps import get_current_user
from quizmaster.core.config import settings
from quizmaster.core.errors import NotFound
from quizmaster.crud import crud_result
from quizmaster.db.models import User
from quizmaster.db.session import get_db
from quizmaster.schemas.quiz_result import QuizResultResponse
from quizmaster.schemas.quiz_session import (
    ActiveQuizResponse,
    QuizStartResponse,
    QuizSubmission,
    QuizSubmitResponse,
)
from quizmaster.services import quiz_service

router = APIRouter(prefix="/quiz", tags=["Quiz"])


@router.post("/start", response_model=QuizStartResponse)
def start_quiz(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return quiz_service.start_quiz_for_user(db, current_user, settings.QUIZ_QUESTION_COUNT)


@router.get("/active", response_model=ActiveQuizResponse)
def get_active_quiz(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return quiz_service.get_active_quiz_for_user(db, current_user)


@router.post("/submit", response_model=QuizSubmitResponse)
def submit_quiz(
    submission: QuizSubmission,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quiz_service.submit_quiz_for_user(db, current_user, submission)


@router.get("/history", response_model=List[QuizResultResponse])
def get_quiz_history(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_result.get_user_results(db, current_user.id)


@router.get("/history/{result_id}", response_model=QuizResultResponse)
def get_quiz_result(
    result_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = crud_result.get_user_result(db, current_user.id, result_id)
    if result is None:
        raise NotFound("Quiz result not found")
    return result
