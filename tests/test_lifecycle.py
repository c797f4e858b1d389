"""Tests for test acquisition, submission and application status."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from jobprep.db import ApplicationTest, JobApplication, Resume
from jobprep.errors import (
    AlreadyCompletedError,
    GenerationFailedError,
    InvalidQuestionError,
    NotFoundError,
)
from jobprep.models import ApplicationStatus, TestType
from jobprep.services import lifecycle


def _answers(correct: int, total: int) -> dict[str, str]:
    return {str(i): ("a" if i <= correct else "d") for i in range(1, total + 1)}


# AcquireTest
def test_acquire_generates_and_persists_new_test(db, application, fake_generator, make_quiz):
    generator = fake_generator(make_quiz(10))

    view = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator)

    assert view.mode == "in_progress"
    assert view.max_score == 10
    assert view.score is None
    assert view.answers == {}
    assert view.title == "Backend Quiz"
    assert view.time_limit_minutes == 20
    assert len(generator.calls) == 1
    assert generator.calls[0] == {
        "role": "Backend Engineer",
        "company": "Acme",
        "requirements": ["Python", "PostgreSQL"],
        "test_type": TestType.QUIZ,
    }

    row = db.query(ApplicationTest).one()
    assert row.max_score == 10
    assert row.completed_at is None
    assert row.questions[0]["correctAnswer"] == "a"


def test_acquire_reuses_unfinished_test(db, application, fake_generator, make_quiz):
    generator = fake_generator(make_quiz(10))
    first = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator)

    second = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator)

    assert second.id == first.id
    assert second.mode == "in_progress"
    assert second.questions == first.questions
    assert len(generator.calls) == 1
    assert db.query(ApplicationTest).count() == 1


def test_acquire_completed_test_returns_review_without_generating(db, application, fake_generator, make_quiz):
    generator = fake_generator(make_quiz(10))
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator)
    lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, _answers(7, 10))

    view = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator)

    assert view.mode == "review"
    assert view.score == 7
    assert view.answers == _answers(7, 10)
    assert len(generator.calls) == 1


def test_quiz_and_coding_tests_are_separate(db, application, fake_generator, make_quiz, make_coding):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(10)))
    coding = lifecycle.acquire_test(db, "user-1", application.id, TestType.CODING, fake_generator(make_coding(3)))

    assert coding.max_score == 3
    assert coding.questions[0]["starterCode"].startswith("def solve")
    assert db.query(ApplicationTest).count() == 2


def test_acquire_unknown_application(db, fake_generator, make_quiz):
    generator = fake_generator(make_quiz())
    with pytest.raises(NotFoundError):
        lifecycle.acquire_test(db, "user-1", "missing", TestType.QUIZ, generator)
    assert generator.calls == []
    assert db.query(ApplicationTest).count() == 0


def test_acquire_is_scoped_to_owner(db, application, fake_generator, make_quiz):
    with pytest.raises(NotFoundError):
        lifecycle.acquire_test(db, "user-2", application.id, TestType.QUIZ, fake_generator(make_quiz()))


def test_generator_failure_persists_nothing_and_retry_works(
    db, application, failing_generator, fake_generator, make_quiz
):
    with pytest.raises(GenerationFailedError):
        lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, failing_generator)
    assert db.query(ApplicationTest).count() == 0

    view = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(4)))
    assert view.max_score == 4


def test_unexpected_generator_exception_becomes_generation_failed(db, application, fake_generator):
    generator = fake_generator(error=TimeoutError("read timed out"))
    with pytest.raises(GenerationFailedError):
        lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator)


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "No questions", "description": "", "timeLimit": 10},
        {"title": "Empty", "questions": []},
        {"questions": [{"id": 1, "question": "Missing options and answer"}]},
        "not json",
        None,
    ],
)
def test_malformed_generator_response(db, application, fake_generator, payload):
    with pytest.raises(GenerationFailedError):
        lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(payload))
    assert db.query(ApplicationTest).count() == 0


def test_duplicate_question_ids_rejected(db, application, fake_generator, make_quiz):
    payload = make_quiz(3)
    payload["questions"][2]["id"] = 1
    with pytest.raises(GenerationFailedError):
        lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(payload))


def test_structured_requirements_are_flattened(db, fake_generator, make_quiz):
    app = lifecycle.create_application(
        db, "user-1", "Acme", "Data Engineer", requirements=["SQL", {"skill": "Spark", "years": 2}]
    )
    generator = fake_generator(make_quiz())
    lifecycle.acquire_test(db, "user-1", app.id, TestType.QUIZ, generator)
    assert generator.calls[0]["requirements"] == ["SQL", '{"skill": "Spark", "years": 2}']


def test_in_progress_quiz_hides_answer_key(db, application, fake_generator, make_quiz):
    view = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(2)))
    shown = view.display_questions()
    assert "correctAnswer" not in shown[0]
    assert "explanation" not in shown[0]
    assert shown[0]["options"][0] == {"id": "a", "text": "Option a"}


# SubmitTest
def test_submit_scenario_backend_engineer_at_acme(db, application, fake_generator, make_quiz):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(10)))

    result = lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, _answers(7, 10))

    assert (result.score, result.max_score) == (7, 10)
    assert result.status_updated is True
    row = db.query(ApplicationTest).one()
    assert row.score == 7
    assert row.completed_at is not None
    assert row.answers == _answers(7, 10)
    assert db.get(JobApplication, application.id).status == "test_taken"

    with pytest.raises(AlreadyCompletedError):
        lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, _answers(10, 10))
    db.expire_all()
    assert db.query(ApplicationTest).one().score == 7


def test_submit_partial_answers(db, application, fake_generator, make_quiz):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(10)))
    result = lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, {"1": "a", "2": "a", "3": "c"})
    assert (result.score, result.max_score) == (2, 10)


def test_submit_coding_gives_attempt_credit(db, application, fake_generator, make_coding):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.CODING, fake_generator(make_coding(3)))
    result = lifecycle.submit_test(
        db, "user-1", application.id, TestType.CODING, {"1": "def solve(s): return s[::-1]", "3": "pass"}
    )
    assert (result.score, result.max_score) == (2, 3)


def test_submit_integer_keys_are_normalized(db, application, fake_generator, make_quiz):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(3)))
    result = lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, {1: "a", 2: "a"})
    assert result.score == 2
    assert db.query(ApplicationTest).one().answers == {"1": "a", "2": "a"}


def test_submit_unknown_question_id(db, application, fake_generator, make_quiz):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(3)))
    with pytest.raises(InvalidQuestionError):
        lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, {"1": "a", "99": "a"})
    assert db.query(ApplicationTest).one().completed_at is None


def test_submit_without_test(db, application):
    with pytest.raises(NotFoundError):
        lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, {})


def test_submit_other_owner(db, application, fake_generator, make_quiz):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(3)))
    with pytest.raises(NotFoundError):
        lifecycle.submit_test(db, "user-2", application.id, TestType.QUIZ, {"1": "a"})


def test_status_update_failure_keeps_completed_test(db, application, fake_generator, make_quiz, monkeypatch):
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(3)))

    real_commit = db.commit
    commits = []

    def flaky_commit():
        commits.append(1)
        if len(commits) == 2:
            raise OperationalError("UPDATE job_applications", {}, Exception("database is locked"))
        real_commit()

    monkeypatch.setattr(db, "commit", flaky_commit)
    result = lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, {"1": "a"})
    monkeypatch.undo()

    assert result.score == 1
    assert result.status_updated is False
    db.expire_all()
    assert db.query(ApplicationTest).one().completed_at is not None
    assert db.get(JobApplication, application.id).status == "pending"


# TestSession (RecordAnswer)
def test_session_records_and_overwrites_answers(db, application, fake_generator, make_quiz):
    view = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(3)))
    session = lifecycle.TestSession(view)

    session.record_answer(1, "b")
    session.record_answer("1", "a")
    session.record_answer(2, "a")

    assert session.answers == {"1": "a", "2": "a"}
    assert db.query(ApplicationTest).one().answers is None

    result = session.submit(db, "user-1")
    assert (result.score, result.max_score) == (2, 3)


def test_session_rejects_unknown_question(db, application, fake_generator, make_quiz):
    view = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(make_quiz(3)))
    session = lifecycle.TestSession(view)
    with pytest.raises(InvalidQuestionError):
        session.record_answer(42, "a")


def test_session_on_completed_test_is_read_only(db, application, fake_generator, make_quiz):
    generator = fake_generator(make_quiz(3))
    lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator)
    lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, {"1": "a"})

    session = lifecycle.TestSession(lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, generator))
    assert session.answers == {"1": "a"}
    with pytest.raises(AlreadyCompletedError):
        session.record_answer(2, "a")


# Applications
def test_list_applications_newest_first_with_tests(db, fake_generator, make_quiz):
    base = datetime(2026, 1, 1)
    created = []
    for i, company in enumerate(["Acme", "Globex", "Initech"]):
        view = lifecycle.create_application(db, "user-1", company, "Engineer")
        db.get(JobApplication, view.id).created_at = base + timedelta(days=i)
        created.append(view)
    db.commit()
    lifecycle.create_application(db, "user-2", "Umbrella", "Engineer")
    lifecycle.acquire_test(db, "user-1", created[0].id, TestType.QUIZ, fake_generator(make_quiz(5)))

    apps = lifecycle.list_applications(db, "user-1")

    assert [a.company_name for a in apps] == ["Initech", "Globex", "Acme"]
    assert [len(a.tests) for a in apps] == [0, 0, 1]
    assert apps[2].tests[0].max_score == 5
    assert all(a.status == "pending" for a in apps)


def test_each_apply_creates_a_new_application(db):
    first = lifecycle.create_application(db, "user-1", "Acme", "Engineer")
    second = lifecycle.create_application(db, "user-1", "Acme", "Engineer")
    assert first.id != second.id
    assert db.query(JobApplication).count() == 2


def test_create_application_with_resume(db):
    resume = Resume(user_id="user-1", file_name="cv.txt")
    db.add(resume)
    db.commit()

    view = lifecycle.create_application(db, "user-1", "Acme", "Engineer", resume_id=resume.id)
    assert view.resume_id == resume.id

    with pytest.raises(NotFoundError):
        lifecycle.create_application(db, "user-2", "Acme", "Engineer", resume_id=resume.id)


def test_update_application_status(db, application):
    view = lifecycle.update_application_status(db, "user-1", application.id, ApplicationStatus.ACCEPTED)
    assert view.status == "accepted"

    with pytest.raises(ValueError):
        lifecycle.update_application_status(db, "user-1", application.id, "hired")
    with pytest.raises(NotFoundError):
        lifecycle.update_application_status(db, "user-2", application.id, ApplicationStatus.REJECTED)


def test_numeric_option_ids_are_scored_as_strings(db, application, fake_generator, make_quiz):
    payload = make_quiz(2)
    for q in payload["questions"]:
        q["options"] = [{"id": n, "text": f"Option {n}"} for n in range(1, 5)]
        q["correctAnswer"] = 2

    view = lifecycle.acquire_test(db, "user-1", application.id, TestType.QUIZ, fake_generator(payload))
    assert view.questions[0]["options"][0] == {"id": "1", "text": "Option 1"}
    assert view.questions[0]["correctAnswer"] == "2"

    result = lifecycle.submit_test(db, "user-1", application.id, TestType.QUIZ, {"1": "2", "2": "1"})
    assert (result.score, result.max_score) == (1, 2)
