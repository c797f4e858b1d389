"""Resume endpoints."""

from fastapi import APIRouter, Depends, File, Header, UploadFile
from sqlalchemy.orm import Session

from jobprep.agents import ResumeParser
from jobprep.api.deps import get_resume_parser
from jobprep.api.schemas import ResumeListResponse, ResumeResponse, ResumeUploadResponse
from jobprep.db import get_db
from jobprep.services import resumes

router = APIRouter()


@router.post("/upload", response_model=ResumeUploadResponse)
async def upload_resume(
    file: UploadFile = File(...),
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
    parser: ResumeParser = Depends(get_resume_parser),
):
    """Upload a resume (PDF, Word or text) and extract its fields."""
    content = await file.read()
    result = resumes.upload_resume(
        db,
        owner_id=x_user_id,
        file_name=file.filename or "resume",
        content=content,
        content_type=file.content_type or "",
        parser=parser,
    )
    resume = resumes.get_resume(db, x_user_id, result.resume_id)
    return ResumeUploadResponse(
        resume=ResumeResponse.model_validate(resume),
        parsed=result.parsed,
        message=result.message,
    )


@router.get("", response_model=ResumeListResponse)
def list_resumes(
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
):
    """List the caller's resumes, newest first."""
    return ResumeListResponse(
        resumes=[ResumeResponse.model_validate(r) for r in resumes.list_resumes(db, x_user_id)]
    )


@router.get("/{resume_id}", response_model=ResumeResponse)
def get_resume(
    resume_id: str,
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
):
    """Get one resume."""
    return ResumeResponse.model_validate(resumes.get_resume(db, x_user_id, resume_id))


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: str,
    x_user_id: str = Header(..., alias="X-User-ID"),
    db: Session = Depends(get_db),
):
    """Delete a resume and its stored file."""
    resumes.delete_resume(db, x_user_id, resume_id)
    return {"message": "Resume deleted"}
