"""Job search endpoints."""

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from jobprep.agents import JobAnalyzer
from jobprep.api.deps import get_job_analyzer, get_search_fn
from jobprep.api.limiter import limiter
from jobprep.api.schemas import JobSearchRequest, JobSearchResponse, SuggestionsRequest
from jobprep.config import settings
from jobprep.db import get_db
from jobprep.models import JobSearchResult
from jobprep.services import job_search

router = APIRouter()


def _to_response(result: JobSearchResult) -> JobSearchResponse:
    """Only listings flagged as genuine postings are returned and counted."""
    real_jobs = result.real_jobs
    return JobSearchResponse(
        jobs=real_jobs,
        count=len(real_jobs),
        summary=result.summary,
        suggestions=result.suggestions,
    )


@router.post("/search", response_model=JobSearchResponse)
@limiter.limit(settings.rate_limit)
def search_jobs(
    request: Request,
    data: JobSearchRequest,
    x_user_id: str = Header(..., alias="X-User-ID"),
    analyzer: JobAnalyzer = Depends(get_job_analyzer),
    search_fn=Depends(get_search_fn),
):
    """Search jobs by company and role, or by skills."""
    try:
        result = job_search.search_jobs(
            analyzer,
            company=data.company,
            role=data.role,
            skills=data.skills,
            search_fn=search_fn,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_response(result)


@router.post("/suggestions", response_model=JobSearchResponse)
@limiter.limit(settings.rate_limit)
def suggest_jobs(
    request: Request,
    data: SuggestionsRequest,
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
    analyzer: JobAnalyzer = Depends(get_job_analyzer),
    search_fn=Depends(get_search_fn),
):
    """AI job suggestions from a stored resume's skills."""
    result = job_search.suggest_jobs(db, x_user_id, data.resume_id, analyzer, search_fn=search_fn)
    return _to_response(result)
