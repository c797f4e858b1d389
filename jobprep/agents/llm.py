"""Chat model factory shared by the AI collaborators."""

from langchain_deepseek import ChatDeepSeek

from jobprep.config import settings


def get_chat_model() -> ChatDeepSeek:
    """Create the chat model used for parsing, analysis and test generation."""
    if not settings.deepseek_api_key:
        raise ValueError("DEEPSEEK_API_KEY not set")

    return ChatDeepSeek(
        model=settings.llm_model,
        api_key=settings.deepseek_api_key,
        temperature=settings.llm_temperature,
        timeout=settings.llm_timeout,
        max_retries=settings.llm_max_retries,
    )
