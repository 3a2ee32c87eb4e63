import logging
import random
import uuid
from typing import Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from quizmaster.core.errors import DuplicateValue, InsufficientData, NotFound, ValidationFault
from quizmaster.db.models import Question
from quizmaster.schemas.question import QuestionCreate, QuestionUpdate

logger = logging.getLogger(__name__)


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def question_exists(db: Session, question_text: str, exclude_id=None) -> bool:
    """Check if a question with the same text already exists in the database."""
    query = db.query(Question).filter(Question.question_text == question_text)
    if exclude_id is not None:
        query = query.filter(Question.id != exclude_id)
    return query.first() is not None


def create_question(db: Session, question_in: QuestionCreate, created_by=None) -> Question:
    if question_exists(db, question_in.question_text):
        raise DuplicateValue(f"Duplicate field value: {question_in.question_text}. Please use another value!")

    question = Question(
        id=uuid.uuid4(),
        question_text=question_in.question_text,
        correct_answer=question_in.correct_answer,
        level=question_in.level.value,
        category=question_in.category.value,
        created_by=created_by,
    )
    question.options = question_in.options
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("Created question %s", question.id)
    return question


def get_question(db: Session, question_id) -> Optional[Question]:
    question_id = _as_uuid(question_id)
    if question_id is None:
        return None
    return db.query(Question).filter(Question.id == question_id).first()


def list_questions(db: Session, category: str | None = None, level: str | None = None) -> List[Question]:
    query = db.query(Question)
    if category:
        query = query.filter(Question.category == category.strip().lower())
    if level:
        query = query.filter(Question.level == level.strip().lower())
    return query.order_by(Question.created_at).all()


def update_question(db: Session, question_id, question_in: QuestionUpdate) -> Question:
    question = get_question(db, question_id)
    if question is None:
        raise NotFound()

    merged = {
        "question_text": question.question_text,
        "options": question.options,
        "correct_answer": question.correct_answer,
        "level": question.level,
        "category": question.category,
    }
    merged.update(question_in.model_dump(exclude_unset=True))
    try:
        validated = QuestionCreate(**merged)
    except ValidationError as exc:
        messages = ". ".join(err["msg"] for err in exc.errors())
        raise ValidationFault(f"Invalid input data. {messages}")

    if question_exists(db, validated.question_text, exclude_id=question.id):
        raise DuplicateValue(f"Duplicate field value: {validated.question_text}. Please use another value!")

    question.question_text = validated.question_text
    question.options = validated.options
    question.correct_answer = validated.correct_answer
    question.level = validated.level.value
    question.category = validated.category.value
    db.commit()
    db.refresh(question)
    logger.info("Updated question %s", question.id)
    return question


def delete_question(db: Session, question_id) -> None:
    question = get_question(db, question_id)
    if question is None:
        raise NotFound()
    db.delete(question)
    db.commit()
    logger.info("Deleted question %s", question_id)


def get_questions_by_ids(db: Session, question_ids: Iterable) -> List[Question]:
    """Return the questions that exist; unknown ids are left out."""
    ids = [qid for qid in (_as_uuid(q) for q in question_ids) if qid is not None]
    if not ids:
        return []
    return db.query(Question).filter(Question.id.in_(ids)).all()


def sample_questions(db: Session, count: int, rng: random.Random | None = None) -> List[Question]:
    """Draw ``count`` distinct questions uniformly at random.

    Ids are sampled without replacement and the records are returned in the
    sampled order.
    """
    if count < 1:
        raise ValidationFault("Number of questions must be at least 1.")
    available = [row[0] for row in db.query(Question.id).all()]
    if not available:
        raise InsufficientData("No questions available to start a quiz.")
    if len(available) < count:
        raise InsufficientData(
            f"Not enough questions available. Please add at least {count} questions."
        )

    picked = (rng or random).sample(available, count)
    by_id = {q.id: q for q in get_questions_by_ids(db, picked)}
    return [by_id[qid] for qid in picked]


def get_random_question(db: Session) -> Question:
    try:
        return sample_questions(db, 1)[0]
    except InsufficientData:
        raise NotFound("No question available")
