"""
Data models exchanged with the AI collaborators.

Field aliases keep the camelCase keys the models are prompted with, so the
JSON stored for a test is exactly what the generator produced.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

Difficulty = Literal["easy", "medium", "hard"]


class TestType(str, Enum):
    __test__ = False

    QUIZ = "quiz"
    CODING = "coding"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPLIED = "applied"
    TEST_TAKEN = "test_taken"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Resume parsing
class ExperienceEntry(BaseModel):
    company: str
    role: str
    duration: str | None = None
    description: str | None = None


class EducationEntry(BaseModel):
    institution: str
    degree: str
    field: str | None = None
    year: str | None = None


class ParsedResume(BaseModel):
    """Structured fields extracted from a resume."""

    skills: list[str] = Field(default_factory=list, description="Technical and soft skills")
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    summary: str = Field(default="", description="2-3 sentence professional summary")


# Job search
class JobListing(BaseModel):
    company: str
    role: str
    location: str | None = None
    requirements: list[str] = Field(default_factory=list)
    salary: str | None = None
    url: str
    is_real_job: bool = Field(alias="isRealJob", description="True only for a genuine job posting")
    description: str | None = None

    class Config:
        populate_by_name = True


class JobSearchResult(BaseModel):
    """Job listings extracted from web search results."""

    jobs: list[JobListing] = Field(default_factory=list)
    summary: str = ""
    suggestions: list[str] = Field(default_factory=list, description="Tips when few jobs were found")

    @property
    def real_jobs(self) -> list[JobListing]:
        return [job for job in self.jobs if job.is_real_job]


# Tests
class QuizOption(BaseModel):
    id: str
    text: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        # Options numbered 1-4 are answered as "1".."4"
        return str(value) if isinstance(value, int) else value


class QuizQuestion(BaseModel):
    id: int | str
    question: str
    difficulty: Difficulty = "medium"
    options: list[QuizOption]
    correct_answer: str = Field(alias="correctAnswer")
    explanation: str | None = None

    class Config:
        populate_by_name = True

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _answer_as_str(cls, value):
        return str(value) if isinstance(value, int) else value


class CodingExample(BaseModel):
    input: str
    output: str
    explanation: str | None = None


class CodingQuestion(BaseModel):
    id: int | str
    title: str
    difficulty: Difficulty = "medium"
    description: str
    examples: list[CodingExample] | None = None
    starter_code: str = Field(default="", alias="starterCode")
    expected_complexity: str | None = Field(default=None, alias="expectedComplexity")
    hints: list[str] | None = None

    class Config:
        populate_by_name = True


class _GeneratedTest(BaseModel):
    title: str = ""
    description: str = ""
    time_limit: int = Field(default=60, alias="timeLimit", description="Time limit in minutes")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _check_questions(self):
        if not self.questions:
            raise ValueError("test has no questions")
        ids = [str(q.id) for q in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("question ids must be unique within a test")
        return self


class QuizTest(_GeneratedTest):
    """A multiple choice quiz."""

    questions: list[QuizQuestion]


class CodingTest(_GeneratedTest):
    """A set of coding challenges."""

    questions: list[CodingQuestion]


GeneratedTest = QuizTest | CodingTest

TEST_MODELS: dict[TestType, type[_GeneratedTest]] = {
    TestType.QUIZ: QuizTest,
    TestType.CODING: CodingTest,
}


def parse_generated_test(test_type: TestType, payload) -> GeneratedTest:
    """Validate a raw generator payload for the given test type.

    Raises:
        ValueError: payload is not a mapping or fails validation
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    try:
        return TEST_MODELS[TestType(test_type)].model_validate(payload)
    except ValidationError as e:
        raise ValueError(str(e)) from e
