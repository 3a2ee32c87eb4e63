import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from quizmaster.core.errors import AlreadySubmitted, ValidationFault
from quizmaster.crud import crud_quiz
from quizmaster.db.models import QuizResult, QuizResultAnswer, utcnow
from quizmaster.schemas.quiz_result import QuizResultCreate
from quizmaster.services.scoring import percentage_score

logger = logging.getLogger(__name__)


def finalize_result(
    db: Session, result_in: QuizResultCreate, active_quiz_id, active_quiz_version: int
) -> QuizResult:
    """Store the result and delete the active quiz in one transaction.

    The delete is conditional on the quiz version that was scored. If another
    submission consumed the quiz first, nothing is written and
    ``AlreadySubmitted`` is raised.
    """
    if len(result_in.quiz_answers) != result_in.total_questions:
        raise ValidationFault(
            f"Result has {len(result_in.quiz_answers)} answers for {result_in.total_questions} questions."
        )

    result = QuizResult(
        id=uuid.uuid4(),
        user_id=result_in.user_id,
        active_quiz_id=active_quiz_id,
        user_name=result_in.user_name,
        user_email=result_in.user_email,
        score=percentage_score(result_in.raw_score, result_in.total_questions),
        total_questions=result_in.total_questions,
        attempted_at=utcnow(),
    )
    for idx, answer in enumerate(result_in.quiz_answers):
        result.quiz_answers.append(QuizResultAnswer(
            id=uuid.uuid4(),
            question_id=answer.question_id,
            user_answer=answer.user_answer,
            is_correct=answer.is_correct,
            correct_answer=answer.correct_answer,
            answer_order=idx + 1,
        ))

    db.add(result)
    try:
        db.flush()
        if not crud_quiz.consume_active_quiz(db, active_quiz_id, active_quiz_version):
            raise AlreadySubmitted()
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(result)
    logger.info(
        "Recorded result %s for user %s (score %.2f)", result.id, result.user_id, result.score
    )
    return result


def get_user_results(db: Session, user_id) -> List[QuizResult]:
    """All results of a user, oldest attempt first."""
    return (
        db.query(QuizResult)
        .filter(QuizResult.user_id == user_id)
        .order_by(QuizResult.attempted_at.asc(), QuizResult.id.asc())
        .all()
    )


def get_user_result(db: Session, user_id, result_id) -> Optional[QuizResult]:
    return (
        db.query(QuizResult)
        .filter(QuizResult.id == result_id, QuizResult.user_id == user_id)
        .first()
    )
