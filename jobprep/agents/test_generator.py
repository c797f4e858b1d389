"""
Test Generator.

Generates a multiple choice quiz or a set of coding challenges for a role.
"""

import logging

from jobprep.agents.llm import get_chat_model
from jobprep.errors import GenerationFailedError
from jobprep.models import TEST_MODELS, TestType

logger = logging.getLogger(__name__)

QUIZ_PROMPT = """You are an expert interviewer writing a multiple choice quiz for a {role} position.

## Rules
- Test both technical knowledge and problem-solving skills
- Each question has exactly 4 options with ids "a", "b", "c", "d"
- Exactly one option is correct; correctAnswer is that option's id
- Give each question a unique numeric id starting at 1
- Add a one-sentence explanation of the correct answer
- Focus on: {focus}
"""

CODING_PROMPT = """You are an expert technical interviewer writing coding challenges for a {role} position.

## Rules
- Practical problems that test real-world skills
- Each problem has a clear statement, input/output examples,
  the expected time complexity and a starter code template
- Give each problem a unique numeric id starting at 1
- Add 1-3 hints per problem
- Focus on: {focus}
"""

QUESTION_COUNTS = {
    TestType.QUIZ: "10 multiple choice questions",
    TestType.CODING: "3 coding challenges",
}


def build_messages(role: str, company: str | None, requirements: list[str], test_type: TestType) -> list:
    """Build the chat messages for a generation request."""
    focus = ", ".join(requirements) if requirements else role
    template = CODING_PROMPT if test_type == TestType.CODING else QUIZ_PROMPT

    request = f"Generate a {QUESTION_COUNTS[test_type]} test for the {role} position"
    if company:
        request += f" at {company}"
    request += "."
    if requirements:
        request += f"\nKey requirements: {', '.join(requirements)}"
    request += "\nMake the questions progressively harder."

    return [
        ("system", template.format(role=role, focus=focus)),
        ("human", request),
    ]


class TestGenerator:
    """Generates structured tests using the chat model."""

    __test__ = False

    def __init__(self, model=None):
        self._model = model

    def generate(
        self,
        role: str,
        company: str | None,
        requirements: list[str],
        test_type: TestType,
    ) -> dict:
        """
        Generate a test.

        Returns:
            JSON-shaped payload with title, description, timeLimit and questions

        Raises:
            GenerationFailedError: missing role, model error, or no structured output
        """
        if not role:
            raise GenerationFailedError("Role is required to generate a test")

        test_type = TestType(test_type)
        logger.info(f"Generating {test_type.value} test for {role} at {company}")
        try:
            model = self._model or get_chat_model()
            structured = model.with_structured_output(TEST_MODELS[test_type])
            result = structured.invoke(build_messages(role, company, requirements, test_type))
        except Exception as e:
            logger.error(f"Test generation failed: {e}")
            raise GenerationFailedError(f"Could not generate test, try again ({e})") from e

        if result is None:
            raise GenerationFailedError("Could not generate test, try again (no test returned)")

        logger.info(f"Generated test with {len(result.questions)} questions")
        return result.model_dump(by_alias=True, exclude_none=True)
