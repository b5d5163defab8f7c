"""
Gita-Guidance-Service - Application Configuration

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Environment variable prefix GGS_ for Gita-Guidance-Service

Anti-Patterns Avoided:
- Hardcoded API keys: the LLM key is read from GGS_LLM_API_KEY or .env
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.exceptions import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CORPUS_PATH = PROJECT_ROOT / "data" / "gita_verses.json"

DEFAULT_LANGUAGES: tuple[str, ...] = (
    "English",
    "Hindi",
    "Sanskrit",
    "Spanish",
    "French",
    "German",
    "Tamil",
    "Telugu",
    "Bengali",
    "Marathi",
    "Gujarati",
    "Kannada",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables with GGS_ prefix.
    Example: GGS_PORT=8090, GGS_LLM_MODEL=gpt-4o-mini
    """

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8090

    # Application metadata
    service_name: str = "gita-guidance-service"
    version: str = "0.1.0"
    environment: str = "development"

    # Logging configuration
    log_level: str = "INFO"
    log_json: bool = True

    # Tracing configuration
    tracing_enabled: bool = True
    tracing_console_export: bool = False

    # Corpus / retrieval
    corpus_path: Path = DEFAULT_CORPUS_PATH
    max_verses: int = 3

    # Guidance generation (OpenAI-compatible chat completions)
    llm_base_url: str = "https://api.openai.com"
    llm_api_key: str | None = None
    llm_model: str = "gpt-4o-mini"
    llm_timeout: float = 60.0
    llm_max_retries: int = 2

    # Response languages offered to the user
    default_language: str = "English"
    supported_languages: list[str] = list(DEFAULT_LANGUAGES)

    model_config = SettingsConfigDict(
        env_prefix="GGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("max_verses")
    @classmethod
    def validate_max_verses(cls, v: int) -> int:
        """The matcher always returns at least one verse."""
        if v < 1:
            raise ValueError("max_verses must be at least 1")
        return v


def validate_settings(settings: Settings) -> Settings:
    """Check cross-field constraints that a single field validator cannot.

    Called once by the lifespan handler before anything is loaded.

    Raises:
        ConfigurationError: If no response language is offered, or the
            default language is not one of the supported languages
    """
    supported = {language.strip().lower() for language in settings.supported_languages}
    if not supported:
        raise ConfigurationError(
            "GGS_SUPPORTED_LANGUAGES must name at least one language"
        )
    if settings.default_language.strip().lower() not in supported:
        raise ConfigurationError(
            f"GGS_DEFAULT_LANGUAGE {settings.default_language!r} is not in "
            f"GGS_SUPPORTED_LANGUAGES {settings.supported_languages}"
        )
    return settings


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings instance with values from environment
    """
    return Settings()
