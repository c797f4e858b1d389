"""
AI collaborators for JobPrep.

- resume_parser: Extracts skills, experience and education from resumes
- job_analyzer: Structures web search hits into job listings
- test_generator: Generates quiz and coding tests for an application
"""

from jobprep.agents.job_analyzer import JobAnalyzer
from jobprep.agents.resume_parser import ResumeParser
from jobprep.agents.test_generator import TestGenerator

__all__ = ["ResumeParser", "JobAnalyzer", "TestGenerator"]
