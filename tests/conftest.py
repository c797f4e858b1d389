"""
Pytest configuration and shared fixtures for JobPrep tests.
"""

import os

# Settings are read at import time
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("DEEPSEEK_API_KEY", "")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobprep.config import settings
from jobprep.db import Base
from jobprep.errors import GenerationFailedError
from jobprep.services import lifecycle


@pytest.fixture
def engine():
    """In-memory SQLite database shared across threads of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture
def make_quiz():
    """Build a quiz payload whose correct answer is always option "a"."""

    def _make(count: int = 10, title: str = "Backend Quiz") -> dict:
        return {
            "title": title,
            "description": "Backend fundamentals",
            "timeLimit": 20,
            "questions": [
                {
                    "id": i,
                    "question": f"Question {i}?",
                    "difficulty": "easy" if i < 4 else "medium",
                    "options": [{"id": o, "text": f"Option {o}"} for o in "abcd"],
                    "correctAnswer": "a",
                    "explanation": "Because a.",
                }
                for i in range(1, count + 1)
            ],
        }

    return _make


@pytest.fixture
def make_coding():
    def _make(count: int = 3) -> dict:
        return {
            "title": "Coding Challenges",
            "description": "Three problems",
            "timeLimit": 45,
            "questions": [
                {
                    "id": i,
                    "title": f"Problem {i}",
                    "difficulty": "medium",
                    "description": "Reverse a string.",
                    "examples": [{"input": "abc", "output": "cba"}],
                    "starterCode": "def solve(s):\n    pass",
                    "expectedComplexity": "O(n)",
                    "hints": ["Use slicing"],
                }
                for i in range(1, count + 1)
            ],
        }

    return _make


class FakeGenerator:
    """Test generator returning canned payloads and counting calls."""

    __test__ = False

    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls = []

    def generate(self, role, company, requirements, test_type):
        self.calls.append(
            {"role": role, "company": company, "requirements": requirements, "test_type": test_type}
        )
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def failing_generator():
    return FakeGenerator(error=GenerationFailedError("AI gateway error: 500"))


@pytest.fixture
def application(db):
    return lifecycle.create_application(
        db,
        owner_id="user-1",
        company_name="Acme",
        role_title="Backend Engineer",
        job_url="https://acme.example/jobs/42",
        job_description="Build APIs",
        requirements=["Python", "PostgreSQL"],
    )
