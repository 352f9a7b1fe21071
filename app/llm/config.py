"""LLM configuration."""

from dataclasses import dataclass


@dataclass
class LLMConfig:
    """Configuration shared by LLM providers."""

    model_name: str = "google/gemini-2.0-flash-001"
    temperature: float = 0.2
    max_tokens: int | None = None
    timeout: int = 30
    system_prompt: str | None = None
    supports_structured: bool = False

    def __post_init__(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameters are invalid
        """
        if not self.model_name:
            raise ValueError("model_name is required")
        if not 0 <= self.temperature <= 1:
            raise ValueError("Temperature must be between 0 and 1")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError("Max tokens must be positive")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
