"""Scoring of quiz submissions.

Everything here is pure: no database access, no clock. The quiz routes fetch
the issued question ids and the question records, and hand them in.
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from quizmaster.core.errors import AnswerSetMismatch, QuestionNotFound

POINTS_PER_CORRECT_ANSWER = 10


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: str
    answer: str


@dataclass(frozen=True)
class ScoredAnswer:
    question_id: str
    user_answer: str
    is_correct: bool
    correct_answer: str


@dataclass(frozen=True)
class ScoreSummary:
    raw_score: int
    correct_count: int
    incorrect_count: int
    answers: List[ScoredAnswer]

    @property
    def total_questions(self) -> int:
        return len(self.answers)


def normalize_answer(value: str) -> str:
    return value.strip().lower()


def answers_match(submitted: str, correct: str) -> bool:
    return normalize_answer(submitted) == normalize_answer(correct)


def percentage_score(raw_score: float, total_questions: int) -> float:
    """Raw points as a percentage of the maximum, rounded to two decimals."""
    if not total_questions or total_questions <= 0:
        return 0.0
    value = raw_score / (total_questions * POINTS_PER_CORRECT_ANSWER) * 100
    if math.isnan(value):
        return 0.0
    return round(min(max(value, 0.0), 100.0), 2)


def _check_answer_set(issued_ids: Sequence[str], submitted_ids: Sequence[str]) -> None:
    if len(submitted_ids) != len(issued_ids):
        raise AnswerSetMismatch(
            f"Expected answers for {len(issued_ids)} questions, got {len(submitted_ids)}."
        )
    duplicates = [qid for qid, count in Counter(submitted_ids).items() if count > 1]
    if duplicates:
        raise AnswerSetMismatch(
            f"Question(s) answered more than once: {', '.join(sorted(duplicates))}"
        )
    if set(submitted_ids) != set(issued_ids):
        raise AnswerSetMismatch()


def score_submission(
    issued_question_ids: Sequence[str],
    submitted_answers: Iterable[SubmittedAnswer],
    question_records: Iterable,
) -> ScoreSummary:
    """Score ``submitted_answers`` against the questions of an active quiz.

    The submitted ids must be exactly the issued ids (any order, no
    duplicates), otherwise nothing is scored. ``question_records`` are objects
    with ``id`` and ``correct_answer``. Detail records follow the issued order,
    so the result does not depend on the order answers were submitted in.
    """
    issued = [str(qid) for qid in issued_question_ids]
    submitted = list(submitted_answers)
    _check_answer_set(issued, [a.question_id for a in submitted])

    records = {str(q.id): q for q in question_records}
    by_id = {a.question_id: a for a in submitted}

    raw_score = 0
    correct_count = 0
    incorrect_count = 0
    scored = []
    for qid in issued:
        question = records.get(qid)
        if question is None:
            raise QuestionNotFound(
                "A submitted question ID could not be matched with an original question in the database."
            )
        answer = by_id[qid]
        is_correct = answers_match(answer.answer, question.correct_answer)
        if is_correct:
            raw_score += POINTS_PER_CORRECT_ANSWER
            correct_count += 1
        else:
            incorrect_count += 1
        scored.append(ScoredAnswer(
            question_id=qid,
            user_answer=answer.answer,
            is_correct=is_correct,
            correct_answer=question.correct_answer,
        ))

    return ScoreSummary(
        raw_score=raw_score,
        correct_count=correct_count,
        incorrect_count=incorrect_count,
        answers=scored,
    )
