from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from quizmaster.api.deps import get_current_user, require_admin
from quizmaster.core.errors import NotFound, QuestionNotFound
from quizmaster.crud import crud_question
from quizmaster.db.models import User
from quizmaster.db.session import get_db
from quizmaster.schemas.question import (
    PracticeAnswerRequest,
    PracticeAnswerResponse,
    QuestionCreate,
    QuestionPublic,
    QuestionResponse,
    QuestionUpdate,
)
from quizmaster.services.scoring import answers_match

router = APIRouter(prefix="/questions", tags=["Questions"])


@router.get("/random", response_model=QuestionPublic)
def get_random_question(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """One random question for practice mode, without its answer."""
    return QuestionPublic.from_question(crud_question.get_random_question(db))


@router.post("/submit-answer", response_model=PracticeAnswerResponse)
def submit_practice_answer(
    payload: PracticeAnswerRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    question = crud_question.get_question(db, payload.question_id)
    if question is None:
        raise QuestionNotFound()
    return PracticeAnswerResponse(
        is_correct=answers_match(payload.answer, question.correct_answer),
        correct_answer=question.correct_answer,
    )


@router.get("/", response_model=List[QuestionResponse])
def list_questions(
    category: Optional[str] = None,
    level: Optional[str] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return crud_question.list_questions(db, category=category, level=level)


@router.post("/", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
def create_question(
    question_in: QuestionCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return crud_question.create_question(db, question_in, created_by=admin.id)


@router.get("/{question_id}", response_model=QuestionResponse)
def get_question(question_id: UUID, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    question = crud_question.get_question(db, question_id)
    if question is None:
        raise NotFound()
    return question


@router.patch("/{question_id}", response_model=QuestionResponse)
def update_question(
    question_id: UUID,
    question_in: QuestionUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return crud_question.update_question(db, question_id, question_in)


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(question_id: UUID, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    crud_question.delete_question(db, question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
