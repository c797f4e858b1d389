"""
Resume storage.

Uploaded files are kept under ``settings.upload_dir``; extracted fields live
in the ``resumes`` table. A parser failure never blocks storage: the resume
is saved with empty extracted fields and the caller is told parsing failed.
"""

import logging
import re
from pathlib import Path

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobprep.config import settings
from jobprep.db.tables import JobApplication, Resume, generate_uuid
from jobprep.errors import NotFoundError, ParseFailedError, PersistenceFailedError, UnsupportedFileError
from jobprep.tools.pdf_parser import parse_pdf

logger = logging.getLogger(__name__)

PDF = "application/pdf"
TEXT = "text/plain"
WORD_TYPES = {
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
ALLOWED_TYPES = {PDF, TEXT} | WORD_TYPES

# Owner ids become a directory name under upload_dir
SAFE_OWNER_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")
SAFE_EXTENSION = re.compile(r"[A-Za-z0-9]{1,8}")


class UploadResult(BaseModel):
    resume_id: str
    parsed: bool
    skills_count: int
    message: str


def extract_text(file_name: str, content: bytes, content_type: str) -> str:
    """Best-effort text for the parser.

    Word documents and unreadable PDFs are described by file metadata only.
    """
    if content_type == TEXT:
        return content.decode("utf-8", errors="replace")

    if content_type == PDF:
        try:
            text = parse_pdf.invoke({"pdf_content": content})
        except Exception as e:
            logger.warning(f"Could not extract PDF text from {file_name}: {e}")
            text = ""
        if text.strip():
            return text

    return (
        f"Resume file: {file_name}. File type: {content_type}. "
        "Please analyze based on common resume structures."
    )


def _store_file(owner_id: str, file_name: str, content: bytes) -> str:
    """Write the upload to ``<upload_dir>/<owner>/<uuid>.<ext>``, never overwriting."""
    if not SAFE_OWNER_ID.fullmatch(owner_id):
        raise UnsupportedFileError("Invalid user id")

    ext = Path(file_name).suffix.lstrip(".")
    if not SAFE_EXTENSION.fullmatch(ext):
        ext = "bin"
    target = Path(settings.upload_dir) / owner_id / f"{generate_uuid()}.{ext}"
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "xb") as f:
        f.write(content)
    return str(target)


def upload_resume(
    db: Session,
    owner_id: str,
    file_name: str,
    content: bytes,
    content_type: str,
    parser,
) -> UploadResult:
    """
    Store a resume file, parse it and persist the extracted fields.

    Raises:
        UnsupportedFileError: file type not accepted, file too large, or
            an owner id that is not a plain path segment
        PersistenceFailedError: the resume row could not be stored
    """
    if content_type not in ALLOWED_TYPES:
        raise UnsupportedFileError()
    if len(content) > settings.max_upload_size:
        raise UnsupportedFileError(f"File too large (max {settings.max_upload_size // (1024 * 1024)} MB)")
    if not content:
        raise UnsupportedFileError("File is empty")

    file_url = _store_file(owner_id, file_name, content)
    raw_text = extract_text(file_name, content, content_type)

    parsed = None
    parse_error = ""
    try:
        parsed = parser.parse(raw_text)
    except ParseFailedError as e:
        parse_error = e.message
        logger.warning(f"Storing {file_name} without extracted fields: {e.message}")

    resume = Resume(
        user_id=owner_id,
        file_name=file_name,
        file_url=file_url,
        raw_text=raw_text,
        extracted_skills=list(parsed.skills) if parsed else [],
        extracted_experience=[e.model_dump() for e in parsed.experience] if parsed else [],
        extracted_education=[e.model_dump() for e in parsed.education] if parsed else [],
        summary=parsed.summary if parsed else "",
    )
    db.add(resume)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        Path(file_url).unlink(missing_ok=True)
        raise PersistenceFailedError("Could not save resume, try again") from e
    db.refresh(resume)

    if parsed:
        message = f"Extracted {len(resume.extracted_skills)} skills"
    else:
        message = f"Uploaded but parsing failed - you can try again ({parse_error})"

    return UploadResult(
        resume_id=resume.id,
        parsed=parsed is not None,
        skills_count=len(resume.extracted_skills),
        message=message,
    )


def list_resumes(db: Session, owner_id: str) -> list[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.user_id == owner_id)
        .order_by(Resume.created_at.desc())
        .all()
    )


def get_resume(db: Session, owner_id: str, resume_id: str) -> Resume:
    resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == owner_id).first()
    if not resume:
        raise NotFoundError("Resume not found")
    return resume


def delete_resume(db: Session, owner_id: str, resume_id: str) -> None:
    """Delete a resume and its file. Applications keep their row, unlinked."""
    resume = get_resume(db, owner_id, resume_id)
    file_url = resume.file_url

    db.query(JobApplication).filter(JobApplication.resume_id == resume_id).update(
        {JobApplication.resume_id: None}, synchronize_session=False
    )
    db.delete(resume)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailedError("Could not delete resume, try again") from e

    if file_url:
        Path(file_url).unlink(missing_ok=True)
