"""LLM module used for content translation."""

from app.core.config import settings
from app.llm.config import LLMConfig
from app.llm.providers.base import BaseLLMProvider
from app.llm.providers.openai import OpenAIConfig, OpenAIProvider


def get_llm_provider() -> BaseLLMProvider:
    """Build the provider named by ``LLM_PROVIDER``.

    Raises:
        ValueError: If the provider is not supported
    """
    if settings.LLM_PROVIDER != "openai":
        raise ValueError(f"Unsupported LLM provider: {settings.LLM_PROVIDER}")

    config = OpenAIConfig(
        model_name=settings.LLM_MODEL_NAME,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
        timeout=settings.LLM_TIMEOUT,
    )
    return OpenAIProvider(config)


__all__ = [
    "LLMConfig",
    "BaseLLMProvider",
    "OpenAIConfig",
    "OpenAIProvider",
    "get_llm_provider",
]
