"""Tests for application configuration settings."""

import os
from unittest.mock import patch

import pytest

from app.core.config import Settings


class TestContentSettings:
    """Content and language settings."""

    def test_should_have_spanish_default_language(self):
        settings = Settings()

        assert settings.DEFAULT_LANGUAGE == "es"
        assert settings.SUPPORTED_LANGUAGES == ["es", "en"]
        assert settings.CONTENT_COLLECTION == "content"

    def test_should_normalize_language_case(self):
        settings = Settings(DEFAULT_LANGUAGE="EN", SUPPORTED_LANGUAGES=["ES", "EN"])

        assert settings.DEFAULT_LANGUAGE == "en"
        assert settings.SUPPORTED_LANGUAGES == ["es", "en"]

    def test_should_reject_unsupported_default_language(self):
        with pytest.raises(ValueError, match="DEFAULT_LANGUAGE"):
            Settings(DEFAULT_LANGUAGE="fr")

    def test_should_read_admin_emails_from_environment(self):
        with patch.dict(
            os.environ, {"ADMIN_EMAILS": '["Admin@ArteDeSanar.com", " guide@x.org "]'}
        ):
            settings = Settings()

        assert settings.ADMIN_EMAILS == ["admin@artedesanar.com", "guide@x.org"]

    def test_should_use_memory_backend_when_testing(self):
        with patch.dict(os.environ, {"TESTING": "true", "CONTENT_BACKEND": "firestore"}):
            settings = Settings()

        assert settings.CONTENT_BACKEND == "memory"


class TestCorsSettings:
    def test_wildcard_origins_become_local_origins(self):
        settings = Settings(cors_origins=["*"])

        assert "http://localhost:3000" in settings.cors_origins
        assert "*" not in settings.cors_origins

    def test_explicit_origins_are_kept(self):
        settings = Settings(cors_origins=["https://artedesanar.com"])

        assert settings.cors_origins == ["https://artedesanar.com"]


class TestLLMSettings:
    def test_should_default_to_openrouter_model(self):
        settings = Settings()

        assert settings.LLM_PROVIDER == "openai"
        assert settings.LLM_MODEL_NAME == "google/gemini-2.0-flash-001"

    def test_should_raise_validation_error_for_invalid_temperature(self):
        with patch.dict(os.environ, {"LLM_TEMPERATURE": "warm"}):
            with pytest.raises(ValueError):
                Settings()
