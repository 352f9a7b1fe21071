"""Tests for provider configuration, base class and response types."""

from unittest.mock import patch

import pytest

from app.llm import get_llm_provider
from app.llm.config import LLMConfig
from app.llm.providers.openai import OpenAIProvider
from app.llm.providers.test_mock import MockProvider
from app.llm.providers.types import GenerateConfig, LLMResponse


class TestLLMConfig:
    def test_defaults(self):
        config = LLMConfig()

        assert config.model_name == "google/gemini-2.0-flash-001"
        assert config.supports_structured is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"model_name": ""},
            {"temperature": -0.1},
            {"max_tokens": 0},
            {"timeout": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            LLMConfig(**kwargs)


class TestGenerateConfig:
    def test_invalid_temperature(self):
        with pytest.raises(ValueError, match="Temperature"):
            GenerateConfig(temperature=2)

    def test_invalid_max_tokens(self):
        with pytest.raises(ValueError, match="Max tokens"):
            GenerateConfig(max_tokens=0)


class TestLLMResponse:
    def test_str_is_text(self):
        response = LLMResponse(text="Hola", model="m")

        assert str(response) == "Hola"
        assert response.usage == {}

    def test_usage_counts_are_coerced(self):
        response = LLMResponse(
            text="", model="m", usage={"prompt_tokens": 3.0, "total_tokens": None}
        )

        assert response.usage == {"prompt_tokens": 3}

    @pytest.mark.parametrize("usage", [{"prompt_tokens": -1}, {"prompt_tokens": 1.5}])
    def test_invalid_usage(self, usage):
        with pytest.raises(ValueError):
            LLMResponse(text="", model="m", usage=usage)

    def test_blank_model(self):
        with pytest.raises(ValueError, match="Model name"):
            LLMResponse(text="", model="  ")


class TestBaseProvider:
    def test_api_key_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("TEST_API_KEY", "from-env")

        assert MockProvider().api_key == "from-env"

    def test_structured_support_follows_config(self):
        provider = MockProvider(config=LLMConfig(model_name="plain"))

        assert not provider.supports_structured_output()
        assert repr(provider) == "MockProvider(model_name='plain')"


class TestGetLLMProvider:
    def test_builds_openai_provider_from_settings(self):
        with patch("app.llm.settings") as mock_settings:
            mock_settings.LLM_PROVIDER = "openai"
            mock_settings.LLM_MODEL_NAME = "openai/gpt-4o-mini"
            mock_settings.LLM_TEMPERATURE = 0.1
            mock_settings.LLM_MAX_TOKENS = 256
            mock_settings.LLM_TIMEOUT = 10
            provider = get_llm_provider()

        assert isinstance(provider, OpenAIProvider)
        assert provider.model_name == "openai/gpt-4o-mini"
        assert provider.config.temperature == 0.1
        assert provider.config.max_tokens == 256
        assert provider.config.timeout == 10

    def test_unsupported_provider(self):
        with patch("app.llm.settings") as mock_settings:
            mock_settings.LLM_PROVIDER = "ollama"
            with pytest.raises(ValueError, match="Unsupported LLM provider"):
                get_llm_provider()
