"""Database table models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobprep.db.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Resume(Base):
    """An uploaded resume and the fields extracted from it."""

    __tablename__ = "resumes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    file_name: Mapped[str] = mapped_column(String(255))
    file_url: Mapped[str] = mapped_column(Text, default="")
    raw_text: Mapped[str] = mapped_column(Text, default="")
    extracted_skills: Mapped[list] = mapped_column(JSON, default=list)
    extracted_experience: Mapped[list] = mapped_column(JSON, default=list)
    extracted_education: Mapped[list] = mapped_column(JSON, default=list)
    summary: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    applications: Mapped[list["JobApplication"]] = relationship(back_populates="resume")


class JobApplication(Base):
    """A user's application to one job listing."""

    __tablename__ = "job_applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    resume_id: Mapped[str | None] = mapped_column(
        ForeignKey("resumes.id", ondelete="SET NULL"), nullable=True, default=None
    )
    company_name: Mapped[str] = mapped_column(String(255))
    role_title: Mapped[str] = mapped_column(String(255))
    job_url: Mapped[str] = mapped_column(Text, default="")
    job_description: Mapped[str] = mapped_column(Text, default="")
    requirements: Mapped[list] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending/applied/test_taken/accepted/rejected
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    resume: Mapped["Resume | None"] = relationship(back_populates="applications")
    tests: Mapped[list["ApplicationTest"]] = relationship(
        back_populates="application", order_by="ApplicationTest.created_at"
    )


class ApplicationTest(Base):
    """A generated quiz or coding test. At most one per application and type."""

    __tablename__ = "tests"
    __table_args__ = (
        UniqueConstraint("application_id", "test_type", name="uq_tests_application_type"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    application_id: Mapped[str] = mapped_column(ForeignKey("job_applications.id"))
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    test_type: Mapped[str] = mapped_column(String(20))  # quiz/coding
    title: Mapped[str] = mapped_column(String(255), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    time_limit_minutes: Mapped[int] = mapped_column(Integer, default=60)
    questions: Mapped[list] = mapped_column(JSON, default=list)
    answers: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    max_score: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, default=None)

    application: Mapped["JobApplication"] = relationship(back_populates="tests")

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None
