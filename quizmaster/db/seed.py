"""Load or remove the question bank.

    python -m quizmaster.db.seed --import [FILE]
    python -m quizmaster.db.seed --delete
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.orm import Session

from quizmaster.core.logging_config import configure_logging
from quizmaster.crud import crud_question
from quizmaster.db.base import Base
from quizmaster.db.models import Question
from quizmaster.db.session import SessionLocal, engine
from quizmaster.schemas.question import QuestionCreate

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "data" / "questions.json"


def import_questions(db: Session, records: list) -> int:
    """Create every record whose text is not in the bank yet; returns the count."""
    created = 0
    for record in records:
        question_in = QuestionCreate(**record)
        if crud_question.question_exists(db, question_in.question_text):
            logger.info("Skipping existing question: %s", question_in.question_text)
            continue
        crud_question.create_question(db, question_in)
        created += 1
    return created


def delete_questions(db: Session) -> int:
    deleted = db.query(Question).delete(synchronize_session=False)
    db.commit()
    return deleted


def main(argv=None) -> int:
    configure_logging()
    parser = argparse.ArgumentParser(description="Manage the question bank")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--import", dest="import_file", nargs="?", const=str(DEFAULT_DATA_FILE),
                       help="import questions from a JSON file (default: bundled sample bank)")
    group.add_argument("--delete", action="store_true", help="remove all questions")
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if args.delete:
            logger.info("Removed %d question(s)", delete_questions(db))
            return 0
        records = json.loads(Path(args.import_file).read_text(encoding="utf-8"))
        logger.info("Loaded %d question(s)", import_questions(db, records))
        return 0
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("Cannot import data: %s", exc)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
