"""
Job Analyzer.

Turns raw web search hits into structured job listings, flagging which hits
are genuine postings.
"""

import logging

from jobprep.agents.llm import get_chat_model
from jobprep.errors import SearchFailedError
from jobprep.models import JobSearchResult

logger = logging.getLogger(__name__)

JOB_ANALYZER_PROMPT = """You are a job search analyst. Extract job listings from web search results.

For each job found, extract: company, role, location, requirements, salary (if available),
application url and a one-sentence description.

## Rules
- Set isRealJob=true only for an actual open position; career blogs, salary
  guides and aggregator landing pages are isRealJob=false
- requirements: MAX 6 short entries
- url: MANDATORY, copy it from the search result
- If nothing useful was found, add suggestions for a better search
- summary: 1-2 sentences on what was found
"""

MAX_CONTENT_CHARS = 2000


def format_search_hits(hits: list[dict]) -> str:
    """Render search hits into the prompt block the analyzer reads."""
    blocks = []
    for i, hit in enumerate(hits, 1):
        content = (hit.get("content") or "")[:MAX_CONTENT_CHARS]
        blocks.append(
            f"--- Result {i} ---\n"
            f"URL: {hit.get('url', '')}\n"
            f"Title: {hit.get('title', '')}\n"
            f"Description: {hit.get('description', '')}\n"
            f"Content: {content}"
        )
    return "\n\n".join(blocks)


class JobAnalyzer:
    """Structures search hits into a JobSearchResult using the chat model."""

    def __init__(self, model=None):
        self._model = model

    def analyze(self, hits: list[dict], search_label: str) -> JobSearchResult:
        """
        Analyze search hits.

        Args:
            hits: search results with url, title, description, content
            search_label: what was searched for, shown to the model

        Raises:
            SearchFailedError: model error or no structured output
        """
        try:
            model = self._model or get_chat_model()
            structured = model.with_structured_output(JobSearchResult)
            result = structured.invoke(
                [
                    ("system", JOB_ANALYZER_PROMPT),
                    (
                        "human",
                        f"Analyze these search results and extract job listings.\n"
                        f"Search was for: {search_label}\n\n"
                        f"Results:\n{format_search_hits(hits)}",
                    ),
                ]
            )
        except Exception as e:
            logger.error(f"Job analysis failed: {e}")
            raise SearchFailedError(f"AI analysis failed: {e}") from e

        if result is None:
            raise SearchFailedError("AI analysis failed: no structured response")

        logger.info(f"Analyzed {len(result.jobs)} jobs ({len(result.real_jobs)} real)")
        return result
