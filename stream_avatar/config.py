"""
Configuration module for the stream-avatar service.

Uses pydantic-settings for environment-based configuration with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Example: UNITH_API_BASE_URL=https://platform-api.example.test
    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    # Platform connection
    UNITH_API_BASE_URL: str = Field(
        default="https://platform-api.unith.ai",
        description="Base URL of the Digital Human platform REST API"
    )
    UNITH_STREAM_BASE_URL: str = Field(
        default="https://stream.unith.ai",
        description="Base URL used to build playable stream links"
    )
    HTTP_TIMEOUT_S: float = Field(
        default=30.0,
        description="Timeout for each platform request in seconds"
    )

    # Head visual gallery
    VISUALS_FETCH_SIZE: int = Field(
        default=50,
        description="Number of head visuals fetched from the platform in one call"
    )
    VISUALS_PAGE_SIZE: int = Field(
        default=10,
        description="Number of head visuals shown per page"
    )

    # Voices
    VOICE_PROVIDER: str = Field(
        default="elevenlabs",
        description="TTS provider used to list voices and create heads"
    )
    VOICES_FETCH_SIZE: int = Field(
        default=200,
        description="Number of voices fetched from the platform in one call"
    )

    # Head creation defaults
    HEAD_LANGUAGE: str = Field(
        default="en-US",
        description="Speech and speech-recognition language for created heads"
    )
    HEAD_OPERATION_MODE: str = Field(
        default="oc",
        description="Operation mode for created heads"
    )

    # Session management
    SESSION_TTL_SECONDS: int = Field(
        default=60 * 60 * 24 * 7,  # platform tokens are valid 7 days
        description="Time-to-live for creator sessions in seconds"
    )

    # Service security (optional but recommended for production)
    STREAM_AVATAR_API_KEY: str | None = Field(
        default=None,
        description="API key required for this service's endpoints"
    )
    RATE_LIMIT_RPS: float = Field(
        default=3.0,
        description="Rate limit: requests per second per IP"
    )
    RATE_LIMIT_BURST: int = Field(
        default=10,
        description="Rate limit: burst capacity"
    )
    CORS_ALLOW_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level"
    )

    # Service metadata
    SERVICE_NAME: str = Field(
        default="stream-avatar",
        description="Service name for logging and health checks"
    )
    SERVICE_VERSION: str = Field(
        default="1.0.0",
        description="Service version"
    )

    def cors_origins(self) -> list[str]:
        """Parse CORS_ALLOW_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


# Singleton settings instance
settings = Settings()
