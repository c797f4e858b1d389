"""Test taking endpoints: acquire a generated test and submit answers."""

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from jobprep.agents import TestGenerator
from jobprep.api.deps import get_test_generator
from jobprep.api.limiter import limiter
from jobprep.api.schemas import SubmitRequest, SubmitResponse, TestResponse
from jobprep.config import settings
from jobprep.db import get_db
from jobprep.models import TestType
from jobprep.services import lifecycle
from jobprep.services.scoring import percentage, performance_label

router = APIRouter()


@router.post("/{application_id}/tests/{test_type}", response_model=TestResponse)
@limiter.limit(settings.rate_limit)
def acquire_test(
    request: Request,
    application_id: str,
    test_type: TestType,
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
    generator: TestGenerator = Depends(get_test_generator),
):
    """Get the test for an application, generating it on first request."""
    view = lifecycle.acquire_test(db, x_user_id, application_id, test_type, generator)

    percent = label = None
    if view.is_completed:
        percent = percentage(view.score or 0, view.max_score)
        label = performance_label(percent)

    return TestResponse(
        id=view.id,
        application_id=view.application_id,
        test_type=view.test_type,
        mode=view.mode,
        title=view.title,
        description=view.description,
        time_limit_minutes=view.time_limit_minutes,
        questions=view.display_questions(),
        answers=view.answers,
        score=view.score,
        max_score=view.max_score,
        percentage=percent,
        label=label,
        completed_at=view.completed_at,
    )


@router.post("/{application_id}/tests/{test_type}/submit", response_model=SubmitResponse)
def submit_test(
    application_id: str,
    test_type: TestType,
    data: SubmitRequest,
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
):
    """Score and complete a test. A completed test cannot be resubmitted."""
    result = lifecycle.submit_test(db, x_user_id, application_id, test_type, data.answers)
    percent = percentage(result.score, result.max_score)
    return SubmitResponse(
        score=result.score,
        max_score=result.max_score,
        percentage=percent,
        label=performance_label(percent),
        status_updated=result.status_updated,
    )
