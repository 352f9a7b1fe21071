"""Application configuration."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "El Arte de Sanar"
    version: str = "0.1.0"
    api_prefix: str = "/api/v1"

    # CORS Settings
    cors_origins: list[str] = ["*"]  # Default to allow all in development
    cors_allow_credentials: bool = False

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Content Settings
    CONTENT_BACKEND: str = "firestore"  # "firestore" or "memory"
    CONTENT_COLLECTION: str = "content"
    DEFAULT_LANGUAGE: str = "es"
    SUPPORTED_LANGUAGES: list[str] = Field(default=["es", "en"])

    # Firebase Settings
    FIREBASE_PROJECT_ID: str | None = None
    FIREBASE_CREDENTIALS_PATH: str | None = None

    # Admin Settings
    ADMIN_EMAILS: list[str] = Field(
        default_factory=list,
        description="Emails allowed to edit content in place",
    )

    # LLM Settings
    LLM_PROVIDER: str = "openai"
    LLM_MODEL_NAME: str = "google/gemini-2.0-flash-001"
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int | None = None
    LLM_TIMEOUT: int = 30

    # API Keys
    OPENROUTER_API_KEY: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @model_validator(mode="after")
    def validate_origins(self) -> "Settings":
        """Validate CORS origins."""
        if self.cors_origins == ["*"]:
            self.cors_origins = [
                "http://localhost",
                "http://localhost:8000",
                "http://localhost:3000",
            ]
        return self

    @model_validator(mode="after")
    def validate_languages(self) -> "Settings":
        """Keep the default language inside the supported set."""
        self.SUPPORTED_LANGUAGES = [lang.lower() for lang in self.SUPPORTED_LANGUAGES]
        self.DEFAULT_LANGUAGE = self.DEFAULT_LANGUAGE.lower()
        if self.DEFAULT_LANGUAGE not in self.SUPPORTED_LANGUAGES:
            raise ValueError(
                f"DEFAULT_LANGUAGE '{self.DEFAULT_LANGUAGE}' is not one of "
                f"{self.SUPPORTED_LANGUAGES}"
            )
        self.ADMIN_EMAILS = [email.strip().lower() for email in self.ADMIN_EMAILS]
        return self

    @model_validator(mode="after")
    def use_test_configs_for_testing(self) -> "Settings":
        """Never talk to a real Firestore project from the test suite."""
        import os

        if os.getenv("TESTING") == "true":
            self.CONTENT_BACKEND = "memory"
        return self


# Create settings instance
settings = Settings()
