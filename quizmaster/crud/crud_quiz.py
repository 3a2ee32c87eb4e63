import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizmaster.core.errors import SessionExpired
from quizmaster.crud import crud_question
from quizmaster.db.models import ActiveQuiz, Question, as_utc, utcnow

logger = logging.getLogger(__name__)

# A started quiz is valid for 100 minutes.
QUIZ_TTL_SECONDS = 6000


def get_active_quiz(db: Session, user_id) -> Optional[ActiveQuiz]:
    return db.query(ActiveQuiz).filter(ActiveQuiz.user_id == user_id).first()


def quiz_expires_at(quiz: ActiveQuiz) -> datetime:
    return as_utc(quiz.created_at) + timedelta(seconds=QUIZ_TTL_SECONDS)


def is_quiz_expired(quiz: ActiveQuiz, now: Optional[datetime] = None) -> bool:
    now = as_utc(now or utcnow())
    return now > quiz_expires_at(quiz)


def _replace_questions(quiz: ActiveQuiz, question_ids: List[str], now: datetime) -> None:
    quiz.question_ids = question_ids
    quiz.created_at = now
    quiz.version = (quiz.version or 0) + 1


def start_quiz(
    db: Session, user_id, count: int = 3, now: Optional[datetime] = None
) -> Tuple[ActiveQuiz, List[Question]]:
    """Issue ``count`` fresh questions to ``user_id``.

    An existing quiz of the user keeps its id but gets the new question set
    and a new start time; the old set is dropped, not merged.
    """
    now = now or utcnow()
    purge_expired_quizzes(db, now)

    questions = crud_question.sample_questions(db, count)
    question_ids = [str(q.id) for q in questions]

    quiz = get_active_quiz(db, user_id)
    if quiz is None:
        quiz = ActiveQuiz(
            id=uuid.uuid4(),
            user_id=user_id,
            question_ids=question_ids,
            created_at=now,
            version=1,
        )
        db.add(quiz)
        try:
            db.commit()
        except IntegrityError:
            # Another request inserted the user's quiz first; last writer wins.
            db.rollback()
            quiz = get_active_quiz(db, user_id)
            if quiz is None:
                raise
            _replace_questions(quiz, question_ids, now)
            db.commit()
    else:
        _replace_questions(quiz, question_ids, now)
        db.commit()

    db.refresh(quiz)
    logger.info("Started quiz %s (v%s) for user %s", quiz.id, quiz.version, user_id)
    return quiz, questions


def validate_not_expired(db: Session, quiz: ActiveQuiz, now: Optional[datetime] = None) -> None:
    """Delete the quiz and raise ``SessionExpired`` once its TTL has passed."""
    if not is_quiz_expired(quiz, now):
        return
    quiz_id = quiz.id
    db.delete(quiz)
    db.commit()
    logger.info("Discarded expired quiz %s", quiz_id)
    raise SessionExpired()


def consume_active_quiz(db: Session, quiz_id, version: int) -> bool:
    """Delete the quiz only if it is still the version that was scored.

    Does not commit; the caller owns the transaction. Returns False when the
    quiz was already consumed or restarted in the meantime.
    """
    deleted = (
        db.query(ActiveQuiz)
        .filter(ActiveQuiz.id == quiz_id, ActiveQuiz.version == version)
        .delete(synchronize_session=False)
    )
    return deleted == 1


def purge_expired_quizzes(db: Session, now: Optional[datetime] = None) -> int:
    cutoff = as_utc(now or utcnow()) - timedelta(seconds=QUIZ_TTL_SECONDS)
    deleted = (
        db.query(ActiveQuiz)
        .filter(ActiveQuiz.created_at < cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Purged %d expired quiz(zes)", deleted)
    return deleted
