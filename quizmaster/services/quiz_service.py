"""Quiz flow: start a quiz, submit it, inspect the live one.

Start:  QuestionBank sample -> ActiveQuiz upsert -> client-safe questions.
Submit: load ActiveQuiz -> expiry check -> fresh question records ->
        score -> finalize (result written, quiz consumed).
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from quizmaster.core.errors import NoActiveSession
from quizmaster.crud import crud_question, crud_quiz, crud_result
from quizmaster.db.models import User
from quizmaster.schemas.question import QuestionPublic
from quizmaster.schemas.quiz_result import QuizResultCreate, ScoredAnswerResponse
from quizmaster.schemas.quiz_session import (
    ActiveQuizResponse,
    QuizStartResponse,
    QuizSubmission,
    QuizSubmitResponse,
)
from quizmaster.services.scoring import SubmittedAnswer, score_submission

logger = logging.getLogger(__name__)


def start_quiz_for_user(
    db: Session, user: User, count: int, now: Optional[datetime] = None
) -> QuizStartResponse:
    quiz, questions = crud_quiz.start_quiz(db, user.id, count, now=now)
    return QuizStartResponse(
        session_id=quiz.id,
        result=len(questions),
        expires_at=crud_quiz.quiz_expires_at(quiz),
        questions=[QuestionPublic.from_question(q) for q in questions],
    )


def get_active_quiz_for_user(
    db: Session, user: User, now: Optional[datetime] = None
) -> ActiveQuizResponse:
    quiz = crud_quiz.get_active_quiz(db, user.id)
    if quiz is None:
        raise NoActiveSession()
    crud_quiz.validate_not_expired(db, quiz, now)
    return ActiveQuizResponse(
        session_id=quiz.id,
        question_ids=list(quiz.question_ids),
        created_at=quiz.created_at,
        expires_at=crud_quiz.quiz_expires_at(quiz),
    )


def submit_quiz_for_user(
    db: Session, user: User, submission: QuizSubmission, now: Optional[datetime] = None
) -> QuizSubmitResponse:
    """Score the user's active quiz and record the result.

    Scoring failures leave the active quiz in place so the user can resubmit
    a corrected payload; only expiry or a recorded result removes it.
    """
    quiz = crud_quiz.get_active_quiz(db, user.id)
    if quiz is None:
        raise NoActiveSession()
    crud_quiz.validate_not_expired(db, quiz, now)

    quiz_id, quiz_version = quiz.id, quiz.version
    issued_ids = list(quiz.question_ids)
    records = crud_question.get_questions_by_ids(db, issued_ids)

    summary = score_submission(
        issued_ids,
        [SubmittedAnswer(question_id=a.id, answer=a.answer) for a in submission.answers],
        records,
    )
    scored = [ScoredAnswerResponse.model_validate(a, from_attributes=True) for a in summary.answers]

    result = crud_result.finalize_result(
        db,
        QuizResultCreate(
            user_id=user.id,
            user_name=user.name,
            user_email=user.email,
            active_quiz_id=quiz_id,
            raw_score=summary.raw_score,
            total_questions=len(issued_ids),
            quiz_answers=scored,
        ),
        quiz_id,
        quiz_version,
    )
    logger.info(
        "User %s submitted quiz %s: %d/%d correct",
        user.id, quiz_id, summary.correct_count, summary.total_questions,
    )

    return QuizSubmitResponse(
        message="Quiz submitted successfully!",
        result_id=result.id,
        score=result.score,
        total_questions=result.total_questions,
        correct_answers=summary.correct_count,
        false_answers=summary.incorrect_count,
        results=scored,
    )
