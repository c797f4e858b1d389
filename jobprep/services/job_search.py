"""
Job search.

Builds a web search query from a company/role pair or a skill list, runs it
through the configured search provider and has the analyzer structure the
hits into listings.
"""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from jobprep.config import settings
from jobprep.errors import SearchFailedError
from jobprep.models import JobSearchResult
from jobprep.services.resumes import get_resume
from jobprep.tools.firecrawl import firecrawl_search
from jobprep.tools.tavily_search import tavily_search

logger = logging.getLogger(__name__)

MAX_QUERY_SKILLS = 5

SEARCH_PROVIDERS = {
    "tavily": tavily_search,
    "firecrawl": firecrawl_search,
}


def build_search_query(
    company: str | None = None,
    role: str | None = None,
    skills: list[str] | None = None,
) -> str:
    """
    Build the web search query.

    A company and role pair wins over skills. Only the top skills are used.

    Raises:
        ValueError: neither company/role nor skills were given
    """
    company = (company or "").strip()
    role = (role or "").strip()
    if company and role:
        return f"{company} {role} job openings careers hiring"

    skills = [s.strip() for s in (skills or []) if s and s.strip()]
    if skills:
        return f"{' '.join(skills[:MAX_QUERY_SKILLS])} jobs hiring now careers"

    raise ValueError("Either company and role, or skills, are required")


def default_search(query: str, max_results: int) -> list[dict]:
    """Run the query through the configured search provider."""
    provider = SEARCH_PROVIDERS.get(settings.search_provider)
    if provider is None:
        raise ValueError(f"Unknown search provider: {settings.search_provider}")
    return provider.invoke({"query": query, "max_results": max_results})


def search_jobs(
    analyzer,
    company: str | None = None,
    role: str | None = None,
    skills: list[str] | None = None,
    search_fn: Callable[[str, int], list[dict]] = default_search,
) -> JobSearchResult:
    """
    Search for jobs and structure the results.

    Raises:
        ValueError: no usable search criteria
        SearchFailedError: search provider or analyzer failed
    """
    query = build_search_query(company, role, skills)
    logger.info(f"Searching jobs with query: {query}")

    try:
        hits = search_fn(query, settings.max_search_results)
    except Exception as e:
        logger.error(f"Search failed: {e}")
        raise SearchFailedError(f"Search failed: {e}") from e

    logger.info(f"Found {len(hits)} search results")

    if company and role:
        label = f"{company} - {role}"
    else:
        label = f"Skills: {', '.join(skills or [])}"
    return analyzer.analyze(hits[: settings.max_search_results], label)


def suggest_jobs(
    db: Session,
    owner_id: str,
    resume_id: str,
    analyzer,
    search_fn: Callable[[str, int], list[dict]] = default_search,
) -> JobSearchResult:
    """
    AI job suggestions based on a stored resume's extracted skills.

    Raises:
        NotFoundError: resume missing
        SearchFailedError: resume has no skills, or the search failed
    """
    resume = get_resume(db, owner_id, resume_id)
    skills = list(resume.extracted_skills or [])
    if not skills:
        raise SearchFailedError("Your resume doesn't have any extracted skills. Try re-uploading.")
    return search_jobs(analyzer, skills=skills, search_fn=search_fn)
