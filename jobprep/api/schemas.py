"""API request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from jobprep.models import ApplicationStatus, JobListing, TestType


# Resume schemas
class ResumeResponse(BaseModel):
    id: str
    file_name: str
    file_url: str
    extracted_skills: list[str]
    extracted_experience: list[dict]
    extracted_education: list[dict]
    summary: str
    created_at: datetime

    class Config:
        from_attributes = True


class ResumeListResponse(BaseModel):
    resumes: list[ResumeResponse]


class ResumeUploadResponse(BaseModel):
    resume: ResumeResponse
    parsed: bool
    message: str


# Job search schemas
class JobSearchRequest(BaseModel):
    company: str | None = None
    role: str | None = None
    skills: list[str] | None = Field(default=None, description="Used when company/role are not given")


class SuggestionsRequest(BaseModel):
    resume_id: str


class JobSearchResponse(BaseModel):
    jobs: list[JobListing] = Field(description="Genuine job postings only")
    count: int
    summary: str
    suggestions: list[str]


# Application schemas
class ApplicationCreate(BaseModel):
    company_name: str
    role_title: str
    job_url: str = ""
    job_description: str = ""
    requirements: list[str] = Field(default_factory=list)
    resume_id: str | None = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class TestSummaryResponse(BaseModel):
    __test__ = False

    id: str
    test_type: TestType
    mode: str
    score: int | None
    max_score: int
    completed_at: datetime | None


class ApplicationResponse(BaseModel):
    id: str
    company_name: str
    role_title: str
    job_url: str
    job_description: str
    requirements: list
    status: str
    resume_id: str | None
    created_at: datetime
    tests: list[TestSummaryResponse]


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationResponse]


# Test schemas
class TestResponse(BaseModel):
    __test__ = False

    id: str
    application_id: str
    test_type: TestType
    mode: str
    title: str
    description: str
    time_limit_minutes: int
    questions: list[dict]
    answers: dict[str, str]
    score: int | None
    max_score: int
    percentage: int | None = None
    label: str | None = None
    completed_at: datetime | None


class SubmitRequest(BaseModel):
    answers: dict[str, str] = Field(default_factory=dict, description="Question id -> answer text")


class SubmitResponse(BaseModel):
    score: int
    max_score: int
    percentage: int
    label: str
    status_updated: bool
