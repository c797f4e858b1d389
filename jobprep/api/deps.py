"""FastAPI dependencies for the external collaborators.

Overridden in tests with ``app.dependency_overrides``.
"""

from jobprep.agents import JobAnalyzer, ResumeParser, TestGenerator
from jobprep.services.job_search import default_search


def get_resume_parser() -> ResumeParser:
    return ResumeParser()


def get_job_analyzer() -> JobAnalyzer:
    return JobAnalyzer()


def get_test_generator() -> TestGenerator:
    return TestGenerator()


def get_search_fn():
    return default_search
