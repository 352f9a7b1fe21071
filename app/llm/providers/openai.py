"""OpenAI-compatible provider (OpenRouter) with structured output support."""

import json
import re
from typing import Any, cast

from openai import AsyncOpenAI, OpenAIError
from openai.types.chat.chat_completion import ChatCompletion
from openai.types.completion_usage import CompletionUsage

from app.core.config import settings
from app.core.logging import get_logger
from app.llm.config import LLMConfig
from app.llm.providers.base import BaseLLMProvider
from app.llm.providers.types import GenerateConfig, LLMInput, LLMResponse

logger = get_logger().bind(module="openai_provider")

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

_PLACEHOLDER_KEYS = ("your_api_key_here", "", "sk-")


def _extract_error_message(error: Any) -> str:
    """Extract a readable message from an API error payload.

    OpenRouter nests the upstream provider error as a JSON string under
    ``metadata.raw``; plain OpenAI errors carry ``message`` directly.
    """
    if not isinstance(error, dict):
        return str(error)

    metadata = error.get("metadata")
    raw = metadata.get("raw") if isinstance(metadata, dict) else None
    if raw:
        try:
            return str(json.loads(raw)["error"]["message"])
        except (json.JSONDecodeError, KeyError, TypeError):
            pass

    if "message" in error:
        return str(error["message"])
    nested = error.get("error")
    if isinstance(nested, dict) and "message" in nested:
        return str(nested["message"])
    return str(error)


def _extract_json_from_markdown(text: str) -> str:
    """Extract JSON content from markdown code blocks.

    Args:
        text: Text that may contain markdown code blocks

    Returns:
        str: Extracted JSON content or original text if no code blocks found
    """
    json_block_match = re.search(r"```(?:json)?\s*\n(.*?)\n```", text, re.DOTALL)
    if json_block_match:
        return json_block_match.group(1).strip()
    return text


def _validate_usage(usage: CompletionUsage | dict[str, Any] | None) -> dict[str, int]:
    """Normalize usage statistics to the three standard counters."""
    if usage is None:
        usage = {}
    elif isinstance(usage, CompletionUsage):
        usage = usage.model_dump()
    return {
        "prompt_tokens": int(usage.get("prompt_tokens") or 0),
        "completion_tokens": int(usage.get("completion_tokens") or 0),
        "total_tokens": int(usage.get("total_tokens") or 0),
    }


def _validate_json_schema(schema: dict[str, Any]) -> None:
    """Validate the top level of a JSON schema.

    Raises:
        ValueError: If schema is invalid
    """
    valid_types = ["object", "array", "string", "number", "integer", "boolean", "null"]
    if "type" not in schema:
        raise ValueError("Invalid JSON schema: missing 'type' field")
    schema_type = str(schema["type"])
    if schema_type not in valid_types:
        raise ValueError(
            f"Invalid JSON schema: type '{schema_type}' not in {valid_types}"
        )

    properties = schema.get("properties", {})
    if not isinstance(properties, dict):
        raise ValueError("Invalid JSON schema: 'properties' must be a dictionary")
    for prop_name, prop_schema in properties.items():
        if not isinstance(prop_schema, dict) or "type" not in prop_schema:
            raise ValueError(
                f"Invalid JSON schema: property '{prop_name}' missing 'type' field"
            )


def _response_format(schema: dict[str, Any]) -> dict[str, Any]:
    """Build the ``response_format`` parameter for a schema.

    Accepts either a bare JSON schema or one already wrapped as
    ``{"type": "json_schema", "json_schema": {...}}``.
    """
    if schema.get("type") == "json_schema":
        inner = schema.get("json_schema", {})
        body = inner.get("schema", {})
        name = inner.get("name", "response")
        strict = inner.get("strict", True)
    else:
        body, name, strict = schema, "response", True

    _validate_json_schema(body)
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": body, "strict": strict},
    }


class OpenAIConfig(LLMConfig):
    """Configuration for the OpenAI provider."""

    def __init__(
        self,
        model_name: str,
        temperature: float = 0.2,
        max_tokens: int | None = None,
        timeout: int = 30,
        system_prompt: str | None = None,
    ) -> None:
        super().__init__(
            model_name=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            system_prompt=system_prompt,
            supports_structured=True,
        )


class OpenAIProvider(BaseLLMProvider[AsyncOpenAI, OpenAIConfig]):
    """OpenAI chat completions provider, pointed at OpenRouter by default."""

    def __init__(
        self,
        config: OpenAIConfig,
        api_key: str | None = None,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the provider

        Args:
            config: Provider configuration
            api_key: API key for authentication
            base_url: Base URL for API endpoint
            headers: Additional HTTP headers
        """
        self._client: AsyncOpenAI | None = None
        super().__init__(
            config,
            api_key=api_key,
            base_url=base_url or OPENROUTER_BASE_URL,
            headers=headers
            or {
                "X-Title": settings.app_name,
                "X-Provider-Preferences": json.dumps({"require_parameters": True}),
            },
        )

    @property
    def environment_key(self) -> str:
        return "OPENROUTER_API_KEY"

    @property
    def api_key(self) -> str | None:
        """Get the API key from settings, falling back to the environment."""
        if self._api_key is not None:
            return self._api_key

        api_key = settings.OPENROUTER_API_KEY
        if api_key and api_key not in _PLACEHOLDER_KEYS:
            return api_key
        return super().api_key

    @property
    def model(self) -> AsyncOpenAI:
        """Get or create the OpenAI client instance."""
        if self._client is None:
            api_key = self.api_key
            if not api_key:
                raise ValueError("API key is required")

            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self.base_url,
                default_headers=self.headers,
                timeout=self.config.timeout,
            )
        return self._client

    def _format_messages(self, prompt: LLMInput) -> list[dict[str, Any]]:
        """Turn the prompt into a chat message list, prepending the system prompt."""
        if isinstance(prompt, str):
            messages: list[dict[str, Any]] = [{"role": "user", "content": prompt}]
        else:
            messages = list(prompt)

        if self.config.system_prompt and not any(
            msg.get("role") == "system" for msg in messages
        ):
            messages.insert(0, {"role": "system", "content": self.config.system_prompt})
        return messages

    def _build_api_params(
        self,
        messages: list[dict[str, Any]],
        config: GenerateConfig | None = None,
        format: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Build parameters for the chat completions call."""
        params: dict[str, Any] = {
            "model": self.config.model_name,
            "messages": messages,
            "temperature": config.temperature if config else self.config.temperature,
        }
        max_tokens = config.max_tokens if config and config.max_tokens else None
        if max_tokens is None:
            max_tokens = self.config.max_tokens
        if max_tokens is not None:
            params["max_tokens"] = max_tokens

        schema = format or (config.format if config else None)
        if schema:
            params["response_format"] = _response_format(schema)
        return params

    def _process_json_content(
        self, content: str, format: dict[str, Any] | None = None
    ) -> tuple[str, Any | None]:
        """Strip markdown fences and parse JSON when a schema was requested."""
        content = _extract_json_from_markdown(content).strip()
        if not format or not content:
            return content, None
        try:
            return content, json.loads(content)
        except json.JSONDecodeError:
            logger.warning("structured_output_not_json", content=content[:200])
            return content, None

    def _process_api_response(
        self,
        result: ChatCompletion,
        format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Turn a chat completion into an :class:`LLMResponse`.

        Raises:
            ValueError: If the API reported an error or returned no content
        """
        error = getattr(result, "error", None)
        if error:
            raise ValueError(
                f"Error generating completion: {_extract_error_message(error)}"
            )

        if not result.choices or not result.choices[0].message:
            raise ValueError("Empty response from model")

        content = str(result.choices[0].message.content or "")
        text, parsed = self._process_json_content(content, format)
        return LLMResponse(
            text=text,
            model=result.model or self.config.model_name,
            usage=_validate_usage(result.usage),
            parsed=parsed,
        )

    def _handle_api_error(self, error: Exception) -> None:
        """Re-raise any failure as ``ValueError`` with a readable message."""
        if isinstance(error, OpenAIError):
            logger.error("llm_api_error", error=str(error))
            body = getattr(error, "body", None)
            message = _extract_error_message(body) if body else str(error)
            raise ValueError(f"Error generating completion: {message}") from error
        if isinstance(error, ValueError):
            raise error
        logger.error("llm_api_error", error=str(error), error_type=type(error).__name__)
        raise ValueError(f"Error generating completion: {error!s}") from error

    async def generate(
        self,
        prompt: LLMInput,
        config: GenerateConfig | None = None,
        format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Generate text from a prompt

        Args:
            prompt: The prompt to generate from
            config: Generation configuration
            format: JSON schema for structured output

        Returns:
            LLMResponse: The generated response

        Raises:
            ValueError: If there is an error in generation
        """
        if format is None and config is not None and config.format:
            format = config.format

        try:
            params = self._build_api_params(self._format_messages(prompt), config, format)
            logger.info(
                "llm_request",
                base_url=self.base_url,
                model=params["model"],
                structured="response_format" in params,
            )
            result = cast(
                ChatCompletion, await self.model.chat.completions.create(**params)
            )
            response = self._process_api_response(result, format)
        except Exception as e:
            self._handle_api_error(e)
            raise

        logger.info("llm_response", model=response.model, **response.usage)
        return response
