"""
Resume Parser.

Extracts skills, experience, education and a short summary from resume text.
"""

import logging

from jobprep.agents.llm import get_chat_model
from jobprep.errors import ParseFailedError
from jobprep.models import ParsedResume

logger = logging.getLogger(__name__)

RESUME_PARSER_PROMPT = """You are an expert resume parser. Extract structured information from the resume.

## Fields
- skills: technical and soft skills, one per entry
- experience: jobs held, each with company, role, duration, description
- education: each with institution, degree, field, year
- summary: 2-3 sentence professional summary

## Rules
- Be thorough: extract every relevant skill and position
- Infer skills from context (e.g., "managed team" -> "Leadership")
- Leave optional fields empty rather than guessing
"""


def truncate_resume(resume_text: str, max_chars: int = 8000) -> str:
    """
    Truncate a resume to its essential sections for token efficiency.

    Keeps: Skills, Experience, Education, Summary, Projects
    Removes: references, declarations
    """
    if len(resume_text) <= max_chars:
        return resume_text

    essential_lines = []
    in_section = False
    skip_sections = ["reference", "declaration"]

    for line in resume_text.split("\n"):
        line_lower = line.lower().strip()

        if any(skip in line_lower for skip in skip_sections):
            in_section = False
            continue

        if any(kw in line_lower for kw in ["skill", "experience", "education", "objective", "summary", "project"]):
            in_section = True

        if in_section or len(essential_lines) < 50:
            essential_lines.append(line)

        if len("\n".join(essential_lines)) > max_chars:
            break

    result = "\n".join(essential_lines)
    if len(result) > max_chars:
        result = result[:max_chars] + "\n[truncated]"

    return result


class ResumeParser:
    """Turns raw resume text into a ParsedResume using the chat model."""

    def __init__(self, model=None):
        self._model = model

    def parse(self, resume_text: str) -> ParsedResume:
        """
        Parse resume text.

        Raises:
            ParseFailedError: empty input, model error, or no structured output
        """
        if not resume_text or not resume_text.strip():
            raise ParseFailedError("Resume text is required")

        logger.info("Parsing resume with AI (%d chars)", len(resume_text))
        try:
            model = self._model or get_chat_model()
            structured = model.with_structured_output(ParsedResume)
            result = structured.invoke(
                [
                    ("system", RESUME_PARSER_PROMPT),
                    ("human", f"Parse this resume and extract structured information:\n\n{truncate_resume(resume_text)}"),
                ]
            )
        except Exception as e:
            logger.error(f"Resume parsing failed: {e}")
            raise ParseFailedError(f"Resume parsing failed: {e}") from e

        if result is None:
            raise ParseFailedError("Resume parsing failed: no structured response from AI")

        logger.info(f"Resume parsed: {len(result.skills)} skills")
        return result
