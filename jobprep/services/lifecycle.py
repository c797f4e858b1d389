"""
Application lifecycle.

Owns test acquisition, answer staging, scoring and the status transition of a
job application. Every operation is scoped by an explicit owner id.

Exactly-once test creation per (application, test type) relies on the
``uq_tests_application_type`` constraint: a losing concurrent insert rolls
back and returns the row that won.
"""

import json
import logging
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from jobprep.db.tables import ApplicationTest, JobApplication, Resume, utcnow
from jobprep.errors import (
    AlreadyCompletedError,
    GenerationFailedError,
    InvalidQuestionError,
    NotFoundError,
    PersistenceFailedError,
)
from jobprep.models import ApplicationStatus, TestType, parse_generated_test
from jobprep.services.scoring import answer_key, question_ids, score_answers

logger = logging.getLogger(__name__)

# Keys hidden from a quiz while it is still being taken
ANSWER_KEY_FIELDS = ("correctAnswer", "explanation")


class TestView(BaseModel):
    """A test as handed to the caller, in review or in-progress mode."""

    __test__ = False

    id: str
    application_id: str
    test_type: TestType
    mode: Literal["review", "in_progress"]
    title: str
    description: str
    time_limit_minutes: int
    questions: list[dict]
    answers: dict[str, str] = Field(default_factory=dict)
    score: int | None = None
    max_score: int
    completed_at: datetime | None = None

    @classmethod
    def from_row(cls, row: ApplicationTest) -> "TestView":
        completed = row.completed_at is not None
        return cls(
            id=row.id,
            application_id=row.application_id,
            test_type=TestType(row.test_type),
            mode="review" if completed else "in_progress",
            title=row.title,
            description=row.description,
            time_limit_minutes=row.time_limit_minutes,
            questions=list(row.questions or []),
            answers=dict(row.answers or {}) if completed else {},
            score=row.score,
            max_score=row.max_score,
            completed_at=row.completed_at,
        )

    @property
    def is_completed(self) -> bool:
        return self.mode == "review"

    def display_questions(self) -> list[dict]:
        """Questions safe to show; the answer key is only revealed in review."""
        if self.is_completed or self.test_type != TestType.QUIZ:
            return self.questions
        return [{k: v for k, v in q.items() if k not in ANSWER_KEY_FIELDS} for q in self.questions]


class SubmitResult(BaseModel):
    score: int
    max_score: int
    status_updated: bool = True


class ApplicationView(BaseModel):
    id: str
    company_name: str
    role_title: str
    job_url: str
    job_description: str
    requirements: list
    status: str
    resume_id: str | None
    created_at: datetime
    tests: list[TestView] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: JobApplication) -> "ApplicationView":
        return cls(
            id=row.id,
            company_name=row.company_name,
            role_title=row.role_title,
            job_url=row.job_url,
            job_description=row.job_description,
            requirements=list(row.requirements or []),
            status=row.status,
            resume_id=row.resume_id,
            created_at=row.created_at,
            tests=[TestView.from_row(t) for t in row.tests],
        )


class TestSession:
    """Answers staged locally while a test is being taken.

    Nothing is persisted until ``submit``.
    """

    __test__ = False

    def __init__(self, view: TestView):
        self.view = view
        self.answers: dict[str, str] = dict(view.answers)
        self._question_ids = question_ids(view.questions)

    def record_answer(self, question_id, answer_text: str) -> None:
        if self.view.is_completed:
            raise AlreadyCompletedError()
        key = answer_key(question_id)
        if key not in self._question_ids:
            raise InvalidQuestionError(f"Unknown question id: {key}")
        self.answers[key] = answer_text

    def submit(self, db: Session, owner_id: str) -> SubmitResult:
        return submit_test(db, owner_id, self.view.application_id, self.view.test_type, self.answers)


def flatten_requirements(requirements) -> list[str]:
    """Requirements as plain strings; structured entries are JSON encoded."""
    return [r if isinstance(r, str) else json.dumps(r) for r in (requirements or [])]


def _get_application(db: Session, owner_id: str, application_id: str) -> JobApplication:
    application = (
        db.query(JobApplication)
        .filter(JobApplication.id == application_id, JobApplication.user_id == owner_id)
        .first()
    )
    if not application:
        raise NotFoundError("Application not found")
    return application


def _find_test(db: Session, application_id: str, test_type: TestType) -> ApplicationTest | None:
    return (
        db.query(ApplicationTest)
        .filter(ApplicationTest.application_id == application_id, ApplicationTest.test_type == test_type.value)
        .first()
    )


def acquire_test(
    db: Session,
    owner_id: str,
    application_id: str,
    test_type: TestType,
    generator,
) -> TestView:
    """
    Return the test for an application, generating it on first request.

    A completed test comes back in review mode, an unfinished one in
    in-progress mode. The generator is only called when no test exists.

    Raises:
        NotFoundError: application missing or owned by someone else
        GenerationFailedError: generator failed or returned a malformed test
        PersistenceFailedError: the new test could not be stored
    """
    test_type = TestType(test_type)
    application = _get_application(db, owner_id, application_id)

    existing = _find_test(db, application_id, test_type)
    if existing:
        return TestView.from_row(existing)

    try:
        payload = generator.generate(
            role=application.role_title,
            company=application.company_name,
            requirements=flatten_requirements(application.requirements),
            test_type=test_type,
        )
    except GenerationFailedError:
        raise
    except Exception as e:
        logger.error(f"[{application_id}] Test generator error: {e}")
        raise GenerationFailedError(f"Could not generate test, try again ({e})") from e

    try:
        generated = parse_generated_test(test_type, payload)
    except ValueError as e:
        logger.error(f"[{application_id}] Malformed {test_type.value} test: {e}")
        raise GenerationFailedError("Could not generate test, try again (malformed response)") from e

    questions = [q.model_dump(by_alias=True, exclude_none=True) for q in generated.questions]
    default_title = "Quiz Test" if test_type == TestType.QUIZ else "Coding Test"
    row = ApplicationTest(
        application_id=application_id,
        user_id=owner_id,
        test_type=test_type.value,
        title=generated.title or default_title,
        description=generated.description,
        time_limit_minutes=generated.time_limit,
        questions=questions,
        max_score=len(questions),
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"[{application_id}] {test_type.value} test created concurrently, reusing it")
        existing = _find_test(db, application_id, test_type)
        if existing is None:
            raise PersistenceFailedError("Could not save test, try again")
        return TestView.from_row(existing)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[{application_id}] Failed to store test: {e}")
        raise PersistenceFailedError("Could not save test, try again") from e

    db.refresh(row)
    logger.info(f"[{application_id}] Created {test_type.value} test with {row.max_score} questions")
    return TestView.from_row(row)


def submit_test(
    db: Session,
    owner_id: str,
    application_id: str,
    test_type: TestType,
    answers: dict,
) -> SubmitResult:
    """
    Score and complete a test, then mark the application as test_taken.

    Answers, score and completion time are written together. If the status
    update fails afterwards the completed test stands and
    ``status_updated`` is False.

    Raises:
        NotFoundError: application or test missing
        AlreadyCompletedError: the test was already submitted
        InvalidQuestionError: answers reference unknown question ids
        PersistenceFailedError: the test could not be stored
    """
    test_type = TestType(test_type)
    application = _get_application(db, owner_id, application_id)
    test = _find_test(db, application_id, test_type)
    if test is None:
        raise NotFoundError("Test not found")
    if test.is_completed:
        raise AlreadyCompletedError()

    answers = {answer_key(k): str(v) for k, v in (answers or {}).items()}
    unknown = set(answers) - question_ids(test.questions)
    if unknown:
        raise InvalidQuestionError(f"Unknown question id(s): {', '.join(sorted(unknown))}")

    score = score_answers(test_type, test.questions, answers)
    max_score = test.max_score

    stmt = (
        update(ApplicationTest)
        .where(ApplicationTest.id == test.id, ApplicationTest.completed_at.is_(None))
        .values(answers=answers, score=score, completed_at=utcnow())
    )
    try:
        result = db.execute(stmt)
        if result.rowcount == 1:
            db.commit()
        else:
            db.rollback()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[{application_id}] Failed to store submission: {e}")
        raise PersistenceFailedError("Could not save test results, try again") from e

    if result.rowcount != 1:
        raise AlreadyCompletedError()

    logger.info(f"[{application_id}] {test_type.value} test submitted: {score}/{max_score}")

    status_updated = True
    try:
        application.status = ApplicationStatus.TEST_TAKEN.value
        application.updated_at = utcnow()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        status_updated = False
        logger.warning(f"[{application_id}] Test completed but status update failed: {e}")

    return SubmitResult(score=score, max_score=max_score, status_updated=status_updated)


def list_applications(db: Session, owner_id: str) -> list[ApplicationView]:
    """All applications of an owner with their tests, newest first."""
    rows = (
        db.query(JobApplication)
        .options(selectinload(JobApplication.tests))
        .filter(JobApplication.user_id == owner_id)
        .order_by(JobApplication.created_at.desc())
        .all()
    )
    return [ApplicationView.from_row(r) for r in rows]


def create_application(
    db: Session,
    owner_id: str,
    company_name: str,
    role_title: str,
    job_url: str = "",
    job_description: str = "",
    requirements: list | None = None,
    resume_id: str | None = None,
) -> ApplicationView:
    """Record a new pending application for a job listing."""
    if resume_id:
        resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == owner_id).first()
        if not resume:
            raise NotFoundError("Resume not found")

    application = JobApplication(
        user_id=owner_id,
        resume_id=resume_id,
        company_name=company_name,
        role_title=role_title,
        job_url=job_url,
        job_description=job_description or "",
        requirements=list(requirements or []),
        status=ApplicationStatus.PENDING.value,
    )
    db.add(application)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailedError("Could not save application, try again") from e
    db.refresh(application)

    logger.info(f"[{application.id}] Application created: {role_title} at {company_name}")
    return ApplicationView.from_row(application)


def update_application_status(
    db: Session,
    owner_id: str,
    application_id: str,
    status: ApplicationStatus,
) -> ApplicationView:
    """Storage-level status update for states set outside the test flow."""
    application = _get_application(db, owner_id, application_id)
    application.status = ApplicationStatus(status).value
    application.updated_at = utcnow()
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailedError("Could not update application, try again") from e
    db.refresh(application)
    return ApplicationView.from_row(application)
