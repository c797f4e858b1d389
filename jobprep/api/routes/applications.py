"""Job application endpoints."""

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from jobprep.api.schemas import (
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
    TestSummaryResponse,
)
from jobprep.db import get_db
from jobprep.services import lifecycle

router = APIRouter()


def _to_response(view: lifecycle.ApplicationView) -> ApplicationResponse:
    return ApplicationResponse(
        id=view.id,
        company_name=view.company_name,
        role_title=view.role_title,
        job_url=view.job_url,
        job_description=view.job_description,
        requirements=view.requirements,
        status=view.status,
        resume_id=view.resume_id,
        created_at=view.created_at,
        tests=[
            TestSummaryResponse(
                id=t.id,
                test_type=t.test_type,
                mode=t.mode,
                score=t.score,
                max_score=t.max_score,
                completed_at=t.completed_at,
            )
            for t in view.tests
        ],
    )


@router.post("", response_model=ApplicationResponse)
def create_application(
    data: ApplicationCreate,
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
):
    """Apply to a job listing. The application starts as pending."""
    view = lifecycle.create_application(
        db,
        owner_id=x_user_id,
        company_name=data.company_name,
        role_title=data.role_title,
        job_url=data.job_url,
        job_description=data.job_description,
        requirements=data.requirements,
        resume_id=data.resume_id,
    )
    return _to_response(view)


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
):
    """List the caller's applications with their tests, newest first."""
    return ApplicationListResponse(
        applications=[_to_response(v) for v in lifecycle.list_applications(db, x_user_id)]
    )


@router.patch("/{application_id}", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
):
    """Set an application's status (applied, accepted, rejected, ...)."""
    view = lifecycle.update_application_status(db, x_user_id, application_id, data.status)
    return _to_response(view)
