"""
Firecrawl search tool for job discovery.

Searches recent pages and returns their markdown content.
"""

import httpx
from langchain_core.tools import tool

from jobprep.config import settings

FIRECRAWL_SEARCH_URL = "https://api.firecrawl.dev/v1/search"


@tool
def firecrawl_search(query: str, max_results: int = 10) -> list[dict]:
    """
    Search the web for job postings using Firecrawl.

    Args:
        query: Search query (e.g., "Acme backend engineer job openings")
        max_results: Maximum number of results to return

    Returns:
        Search hits as dicts with url, title, description and content
    """
    if not settings.firecrawl_api_key:
        raise ValueError("FIRECRAWL_API_KEY not set")

    headers = {
        "Authorization": f"Bearer {settings.firecrawl_api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "query": query,
        "limit": max_results,
        "tbs": "qdr:m",  # Last month
        "scrapeOptions": {"formats": ["markdown"]},
    }

    with httpx.Client(timeout=settings.search_timeout) as client:
        response = client.post(FIRECRAWL_SEARCH_URL, headers=headers, json=payload)
        response.raise_for_status()
        data = response.json()

    return [
        {
            "url": r.get("url", ""),
            "title": r.get("title", ""),
            "description": r.get("description", ""),
            "content": r.get("markdown") or "",
        }
        for r in data.get("data", [])
    ]
