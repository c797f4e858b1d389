"""
PDF text extraction for uploaded resumes.

Wrapped as a LangChain tool so it can be handed to an agent as well as
invoked directly.
"""

from io import BytesIO

from langchain_core.tools import tool
from pypdf import PdfReader

# Resumes past this length are almost always scanned portfolios
MAX_PDF_PAGES = 20


@tool
def parse_pdf(pdf_content: bytes) -> str:
    """
    Extract text from a resume PDF.

    Args:
        pdf_content: Raw bytes of the PDF file

    Returns:
        Text of the first pages, blank pages skipped

    Raises:
        ValueError: the PDF is encrypted with a password
    """
    reader = PdfReader(BytesIO(pdf_content))
    if reader.is_encrypted and not reader.decrypt(""):
        raise ValueError("PDF is password protected")

    pages = (page.extract_text() for page in reader.pages[:MAX_PDF_PAGES])
    return "\n\n".join(text.strip() for text in pages if text and text.strip())
