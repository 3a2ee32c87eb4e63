import random
import uuid

import pytest

from quizmaster.core.errors import DuplicateValue, InsufficientData, NotFound, ValidationFault
from quizmaster.crud import crud_question
from quizmaster.schemas.question import QuestionCreate, QuestionUpdate
from tests.conftest import make_question


def test_sample_returns_distinct_questions(db, questions):
    sampled = crud_question.sample_questions(db, 3)
    assert len(sampled) == 3
    assert len({q.id for q in sampled}) == 3


def test_sample_whole_bank(db, questions):
    sampled = crud_question.sample_questions(db, len(questions), rng=random.Random(7))
    assert {q.id for q in sampled} == {q.id for q in questions}


def test_sample_more_than_available(db, questions):
    with pytest.raises(InsufficientData) as exc_info:
        crud_question.sample_questions(db, 6)
    assert "Not enough questions" in exc_info.value.message


def test_sample_from_empty_bank(db):
    with pytest.raises(InsufficientData) as exc_info:
        crud_question.sample_questions(db, 3)
    assert exc_info.value.message == "No questions available to start a quiz."


def test_random_question_on_empty_bank(db):
    with pytest.raises(NotFound):
        crud_question.get_random_question(db)


def test_get_questions_by_ids_skips_unknown(db, questions):
    ids = [questions[0].id, uuid.uuid4(), str(questions[1].id), "not-a-uuid"]
    found = crud_question.get_questions_by_ids(db, ids)
    assert {q.id for q in found} == {questions[0].id, questions[1].id}


def test_create_question_normalizes_and_rejects_duplicates(db, admin):
    question_in = QuestionCreate(
        question_text="  What is 2 + 2?  ",
        options=["3", "4", "5", "6"],
        correct_answer="4",
        level="EASY",
        category=" Math ",
    )
    question = crud_question.create_question(db, question_in, created_by=admin.id)
    assert question.question_text == "What is 2 + 2?"
    assert question.level == "easy"
    assert question.category == "math"
    assert question.options == ["3", "4", "5", "6"]

    with pytest.raises(DuplicateValue):
        crud_question.create_question(db, question_in)


@pytest.mark.parametrize("overrides", [
    {"options": ["a", "b", "c"]},
    {"correct_answer": "e"},
    {"level": "impossible"},
    {"category": "cooking"},
])
def test_question_validation(overrides):
    data = {
        "question_text": "Pick one",
        "options": ["a", "b", "c", "d"],
        "correct_answer": "a",
        "level": "easy",
        "category": "general",
    }
    data.update(overrides)
    with pytest.raises(ValueError):
        QuestionCreate(**data)


def test_update_question_revalidates_merged_record(db):
    question = make_question(db, "Capital of France?")
    updated = crud_question.update_question(
        db, question.id, QuestionUpdate(level="Hard", category="history")
    )
    assert updated.level == "hard"
    assert updated.category == "history"

    with pytest.raises(ValidationFault):
        crud_question.update_question(db, question.id, QuestionUpdate(correct_answer="Berlin"))


def test_update_question_rejects_taken_text(db):
    make_question(db, "First?")
    second = make_question(db, "Second?")
    with pytest.raises(DuplicateValue):
        crud_question.update_question(db, second.id, QuestionUpdate(question_text="First?"))


def test_list_questions_filters(db):
    make_question(db, "Math one?", category="math")
    make_question(db, "Science one?", category="science", level="hard")
    assert [q.question_text for q in crud_question.list_questions(db, category="math")] == ["Math one?"]
    assert [q.question_text for q in crud_question.list_questions(db, level="HARD")] == ["Science one?"]
