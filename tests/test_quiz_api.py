from datetime import timedelta

from quizmaster.crud import crud_quiz
from quizmaster.db.models import ActiveQuiz, QuizResult, utcnow
from tests.conftest import auth_headers


def _start(client, user):
    response = client.post("/quiz/start", headers=auth_headers(user))
    assert response.status_code == 200
    return response.json()


def _correct_answers(db, question_ids):
    from quizmaster.crud import crud_question

    records = {str(q.id): q for q in crud_question.get_questions_by_ids(db, question_ids)}
    return [{"id": qid, "answer": records[qid].correct_answer} for qid in question_ids]


def test_start_hides_correct_answers(client, user, questions):
    body = _start(client, user)
    assert body["result"] == 3
    assert len(body["questions"]) == 3
    for question in body["questions"]:
        assert set(question) == {"id", "category", "text", "options"}
        assert len(question["options"]) == 4
    assert body["expires_at"].endswith("Z")


def test_start_with_empty_bank(client, user):
    response = client.post("/quiz/start", headers=auth_headers(user))
    assert response.status_code == 404
    assert response.json() == {
        "status": "fail",
        "message": "No questions available to start a quiz.",
    }


def test_start_requires_authentication(client, questions):
    assert client.post("/quiz/start").status_code == 401


def test_full_round_trip(client, db, user, questions):
    body = _start(client, user)
    question_ids = [q["id"] for q in body["questions"]]

    answers = _correct_answers(db, question_ids)
    answers[0]["answer"] = "  " + answers[0]["answer"].upper() + " "
    response = client.post("/quiz/submit", json={"answers": answers}, headers=auth_headers(user))
    assert response.status_code == 200
    result = response.json()
    assert set(result) == {
        "message", "result_id", "score", "total_questions",
        "correct_answers", "false_answers", "results",
    }
    assert result["score"] == 100.0
    assert result["total_questions"] == 3
    assert result["correct_answers"] == 3
    assert result["false_answers"] == 0
    assert [r["question_id"] for r in result["results"]] == question_ids

    assert db.query(ActiveQuiz).count() == 0
    history = client.get("/quiz/history", headers=auth_headers(user)).json()
    assert len(history) == 1
    assert history[0]["id"] == result["result_id"]
    assert history[0]["active_quiz_id"] == body["session_id"]
    assert len(history[0]["quiz_answers"]) == 3

    detail = client.get(f"/quiz/history/{result['result_id']}", headers=auth_headers(user))
    assert detail.status_code == 200
    assert detail.json()["score"] == 100.0


def test_wrong_answers_score_partially(client, db, user, questions):
    body = _start(client, user)
    answers = [{"id": q["id"], "answer": "nope"} for q in body["questions"]]
    answers[1] = _correct_answers(db, [body["questions"][1]["id"]])[0]
    result = client.post("/quiz/submit", json={"answers": answers}, headers=auth_headers(user)).json()
    assert result["score"] == 33.33
    assert result["correct_answers"] == 1
    assert result["false_answers"] == 2
    assert result["results"][0]["correct_answer"].startswith("Answer")


def test_submit_without_quiz(client, user, questions):
    response = client.post(
        "/quiz/submit", json={"answers": [{"id": "x", "answer": "y"}]}, headers=auth_headers(user)
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("No active quiz found")


def test_mismatched_answers_keep_the_quiz(client, db, user, questions):
    body = _start(client, user)
    question_ids = [q["id"] for q in body["questions"]]
    answers = _correct_answers(db, question_ids)
    extra = str(next(q.id for q in questions if str(q.id) not in question_ids))

    response = client.post(
        "/quiz/submit",
        json={"answers": answers + [{"id": extra, "answer": "x"}]},
        headers=auth_headers(user),
    )
    assert response.status_code == 400
    assert db.query(QuizResult).count() == 0
    assert db.query(ActiveQuiz).count() == 1

    retry = client.post("/quiz/submit", json={"answers": answers}, headers=auth_headers(user))
    assert retry.status_code == 200
    assert retry.json()["score"] == 100.0


def test_second_submission_finds_no_quiz(client, db, user, questions):
    body = _start(client, user)
    answers = _correct_answers(db, [q["id"] for q in body["questions"]])
    assert client.post("/quiz/submit", json={"answers": answers}, headers=auth_headers(user)).status_code == 200
    again = client.post("/quiz/submit", json={"answers": answers}, headers=auth_headers(user))
    assert again.status_code == 400
    assert db.query(QuizResult).count() == 1


def test_expired_quiz_is_discarded_on_submit(client, db, user, questions):
    body = _start(client, user)
    quiz = crud_quiz.get_active_quiz(db, user.id)
    quiz.created_at = utcnow() - timedelta(seconds=crud_quiz.QUIZ_TTL_SECONDS + 1)
    db.commit()

    answers = _correct_answers(db, [q["id"] for q in body["questions"]])
    response = client.post("/quiz/submit", json={"answers": answers}, headers=auth_headers(user))
    assert response.status_code == 400
    assert response.json()["message"] == "Your quiz time has expired."
    assert db.query(ActiveQuiz).count() == 0
    assert db.query(QuizResult).count() == 0


def test_restart_replaces_question_set(client, db, user, questions):
    first = _start(client, user)
    second = _start(client, user)
    assert first["session_id"] == second["session_id"]
    assert db.query(ActiveQuiz).count() == 1

    active = client.get("/quiz/active", headers=auth_headers(user)).json()
    assert active["question_ids"] == [q["id"] for q in second["questions"]]


def test_active_quiz_when_none(client, user):
    response = client.get("/quiz/active", headers=auth_headers(user))
    assert response.status_code == 400


def test_malformed_submission(client, user, questions):
    _start(client, user)
    response = client.post("/quiz/submit", json={"answers": [{"id": "abc"}]}, headers=auth_headers(user))
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid input data.")


def test_history_of_other_user_is_hidden(client, db, user, admin, questions):
    body = _start(client, user)
    answers = _correct_answers(db, [q["id"] for q in body["questions"]])
    result_id = client.post("/quiz/submit", json={"answers": answers}, headers=auth_headers(user)).json()["result_id"]

    assert client.get("/quiz/history", headers=auth_headers(admin)).json() == []
    assert client.get(f"/quiz/history/{result_id}", headers=auth_headers(admin)).status_code == 404
