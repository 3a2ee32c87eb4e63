from types import SimpleNamespace

import pytest

from quizmaster.core.errors import AnswerSetMismatch, QuestionNotFound
from quizmaster.services.scoring import (
    SubmittedAnswer,
    answers_match,
    percentage_score,
    score_submission,
)

ISSUED = ["q1", "q2", "q3"]
RECORDS = [
    SimpleNamespace(id="q1", correct_answer="Paris"),
    SimpleNamespace(id="q2", correct_answer="56"),
    SimpleNamespace(id="q3", correct_answer="Mars"),
]


def _answers(*pairs):
    return [SubmittedAnswer(question_id=qid, answer=answer) for qid, answer in pairs]


def test_all_correct():
    summary = score_submission(
        ISSUED, _answers(("q1", "Paris"), ("q2", "56"), ("q3", "Mars")), RECORDS
    )
    assert summary.raw_score == 30
    assert summary.correct_count == 3
    assert summary.incorrect_count == 0
    assert summary.total_questions == 3


def test_mixed_answers_keep_correct_answer_for_audit():
    summary = score_submission(
        ISSUED, _answers(("q1", "Lyon"), ("q2", "56"), ("q3", "Venus")), RECORDS
    )
    assert summary.raw_score == 10
    assert summary.correct_count == 1
    assert summary.incorrect_count == 2
    first = summary.answers[0]
    assert first.question_id == "q1"
    assert first.user_answer == "Lyon"
    assert first.is_correct is False
    assert first.correct_answer == "Paris"


def test_answers_are_case_and_whitespace_insensitive():
    summary = score_submission(
        ["q1"], _answers(("q1", "  pARIS ")), [SimpleNamespace(id="q1", correct_answer="paris")]
    )
    assert summary.correct_count == 1
    assert answers_match("Paris", "paris")
    assert not answers_match("Pari", "paris")


def test_submission_order_does_not_change_result():
    forward = _answers(("q1", "Paris"), ("q2", "5"), ("q3", "Mars"))
    backward = list(reversed(forward))
    assert score_submission(ISSUED, forward, RECORDS) == score_submission(ISSUED, backward, RECORDS)
    assert score_submission(ISSUED, forward, RECORDS) == score_submission(ISSUED, forward, RECORDS)


@pytest.mark.parametrize("answers", [
    _answers(("q1", "Paris"), ("q2", "56")),
    _answers(("q1", "Paris"), ("q2", "56"), ("q3", "Mars"), ("q4", "x")),
    _answers(("q1", "Paris"), ("q2", "56"), ("q9", "Mars")),
    _answers(("q1", "Paris"), ("q1", "Paris"), ("q2", "56")),
])
def test_answer_set_must_match_issued_questions(answers):
    with pytest.raises(AnswerSetMismatch):
        score_submission(ISSUED, answers, RECORDS)


def test_missing_question_record_is_reported():
    with pytest.raises(QuestionNotFound):
        score_submission(
            ISSUED, _answers(("q1", "Paris"), ("q2", "56"), ("q3", "Mars")), RECORDS[:2]
        )


@pytest.mark.parametrize("raw, total, expected", [
    (30, 3, 100.0),
    (10, 3, 33.33),
    (20, 3, 66.67),
    (0, 3, 0.0),
    (0, 0, 0.0),
    (50, 3, 100.0),
    (-10, 3, 0.0),
    (float("nan"), 3, 0.0),
])
def test_percentage_score(raw, total, expected):
    assert percentage_score(raw, total) == expected
