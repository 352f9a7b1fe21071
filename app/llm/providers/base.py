"""Base classes for LLM providers."""

import os
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from app.llm.config import LLMConfig
from app.llm.providers.types import GenerateConfig, LLMInput, LLMResponse

ModelType = TypeVar("ModelType")
ConfigType = TypeVar("ConfigType", bound=LLMConfig)


class BaseLLMProvider(ABC, Generic[ModelType, ConfigType]):
    """Base class for LLM providers.

    All LLM providers should inherit from this class and implement
    its abstract methods.
    """

    def __init__(
        self,
        config: ConfigType,
        api_key: str | None = None,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the LLM provider.

        Args:
            config: Provider configuration
            api_key: Optional API key for authentication
            base_url: Optional base URL for the API endpoint
            headers: Optional additional HTTP headers
        """
        self.config = config
        self._api_key = api_key
        self._base_url = base_url
        self._headers = headers or {}

    @property
    def model_name(self) -> str:
        return self.config.model_name

    @property
    @abstractmethod
    def environment_key(self) -> str:
        """The environment variable name for the API key."""
        raise NotImplementedError

    @property
    def api_key(self) -> str | None:
        """Get the API key, checking environment if not explicitly set."""
        if self._api_key is None:
            self._api_key = os.environ.get(self.environment_key)
        return self._api_key

    @property
    def base_url(self) -> str | None:
        """Get the base URL for API requests."""
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        """Get HTTP headers for API requests."""
        return self._headers

    @property
    @abstractmethod
    def model(self) -> ModelType:
        """Get the underlying client instance."""
        raise NotImplementedError

    @abstractmethod
    async def generate(
        self,
        prompt: LLMInput,
        config: GenerateConfig | None = None,
        format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Generate a response from the model.

        Args:
            prompt: The input prompt or chat messages
            config: Optional generation configuration
            format: Optional JSON schema for structured output

        Returns:
            Generated response
        """
        raise NotImplementedError

    def supports_structured_output(self) -> bool:
        """Check if provider supports structured output."""
        return bool(self.config.supports_structured)

    def __repr__(self) -> str:
        """String representation of the provider."""
        return f"{self.__class__.__name__}(model_name='{self.model_name}')"
