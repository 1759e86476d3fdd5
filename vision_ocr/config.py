"""Environment-based configuration for the OCR client, CLI and server."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """OCR settings, loaded from environment variables and an optional .env file."""

    # Provider credentials (empty = not configured, fails at client construction)
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    ANTHROPIC_VERSION: str = "2023-06-01"

    # Model
    OCR_MODEL: str = "claude-3-5-sonnet-20240620"
    OCR_MAX_TOKENS: int = 4096

    # Provider timeouts and retry
    PROVIDER_TIMEOUT_SECONDS: int = 120
    PROVIDER_CONNECT_TIMEOUT: int = 10
    PROVIDER_RETRY_ATTEMPTS: int = 3
    PROVIDER_RETRY_DELAY: float = 1.0
    PROVIDER_RETRY_BACKOFF: float = 2.0

    # Source fetching
    FETCH_TIMEOUT_SECONDS: int = 30
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024  # provider per-image limit

    LOG_LEVEL: str = "WARNING"

    # Server
    PORT: int = 8092

    model_config = {
        "env_prefix": "",
        "case_sensitive": True,
        "env_file": ".env",
        "extra": "ignore",
    }


settings = Settings()
