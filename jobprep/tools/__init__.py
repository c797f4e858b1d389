"""
Tools for JobPrep.

- pdf_parser: Extract text from PDF resumes
- tavily_search: Web search via Tavily API
- firecrawl: Web search via Firecrawl API
"""

from jobprep.tools.firecrawl import firecrawl_search
from jobprep.tools.pdf_parser import parse_pdf
from jobprep.tools.tavily_search import tavily_search

__all__ = ["parse_pdf", "tavily_search", "firecrawl_search"]
