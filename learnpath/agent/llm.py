"""LLM provider configuration."""

from functools import lru_cache

from langchain_openai import ChatOpenAI

from learnpath.core.config import get_settings
from learnpath.core.logging import get_logger

logger = get_logger(__name__)


def _client_kwargs() -> dict:
    settings = get_settings()
    kwargs: dict = {}
    if settings.OPENAI_API_KEY:
        kwargs["api_key"] = settings.OPENAI_API_KEY
    if settings.OPENAI_API_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_API_BASE_URL
    return kwargs


@lru_cache
def get_llm(max_tokens: int | None = None) -> ChatOpenAI:
    """Get configured LLM instance for structured content generation."""
    settings = get_settings()

    kwargs: dict = {
        "model": settings.OPENAI_MODEL,
        "temperature": settings.OPENAI_TEMPERATURE,
        **_client_kwargs(),
    }
    if max_tokens:
        kwargs["max_tokens"] = max_tokens

    logger.info("Initializing LLM", model=settings.OPENAI_MODEL, max_tokens=max_tokens)
    return ChatOpenAI(**kwargs)


@lru_cache
def get_fast_llm() -> ChatOpenAI:
    """Get a short-answer LLM for chat replies and feedback."""
    settings = get_settings()

    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        temperature=settings.OPENAI_TEMPERATURE,
        max_tokens=settings.CHAT_MAX_TOKENS,
        **_client_kwargs(),
    )
