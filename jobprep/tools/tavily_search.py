"""
Tavily search tool for job discovery.

Uses Tavily API to search the web for job postings.
"""

from typing import Literal

from langchain_core.tools import tool
from tavily import TavilyClient

from jobprep.config import settings

# Initialize client (lazy - only when API key is set)
_client: TavilyClient | None = None


def _get_client() -> TavilyClient:
    """Get or create Tavily client."""
    global _client
    if _client is None:
        if not settings.tavily_api_key:
            raise ValueError("TAVILY_API_KEY not set")
        _client = TavilyClient(api_key=settings.tavily_api_key)
    return _client


@tool
def tavily_search(
    query: str,
    max_results: int = 10,
    topic: Literal["general", "news"] = "general",
) -> list[dict]:
    """
    Search the web for job postings using Tavily.

    Args:
        query: Search query (e.g., "Python developer remote jobs")
        max_results: Maximum number of results to return
        topic: Search topic filter - 'general' or 'news'

    Returns:
        Search hits as dicts with url, title, description and content
    """
    client = _get_client()
    results = client.search(
        query=query,
        max_results=max_results,
        topic=topic,
        timeout=settings.search_timeout,
    )

    return [
        {
            "url": r.get("url", ""),
            "title": r.get("title", ""),
            "description": "",
            "content": r.get("content", ""),
        }
        for r in results.get("results", [])
    ]
