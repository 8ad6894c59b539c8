"""
Application Configuration Module

Centralizes all application settings using Pydantic Settings.
Environment variables are loaded from .env file automatically.

Usage:
    from config.settings import settings

    print(settings.REDIS_URL)
    print(settings.DEFAULT_LOCALE)
"""

from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Variable names are case-insensitive.
    """

    # ==========================================================================
    # Redis Configuration (session store and rate limiting)
    # ==========================================================================
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis connection URL; when unset, interview sessions live in memory"
    )
    SESSION_TTL_MINUTES: Optional[int] = Field(
        default=None,
        description="Evict interview sessions after this many idle minutes (unset = keep)"
    )
    SESSION_CLEANUP_INTERVAL_SECONDS: float = Field(
        default=60.0,
        description="How often expired in-memory sessions are swept when a TTL is set"
    )
    REDIS_KEY_PREFIX: str = Field(
        default="roomie",
        description="Namespace for interview session and rate-limit keys in Redis"
    )

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> list:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )
    LOG_LEVEL: Optional[str] = Field(
        default=None,
        description="Root log level (default: DEBUG in debug mode, else INFO)"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit one JSON object per log line instead of colored text"
    )
    APP_NAME: str = Field(
        default="RooMate Voice",
        description="Application name for OpenAPI docs"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # ==========================================================================
    # Voice Interview Configuration
    # ==========================================================================
    DEFAULT_LOCALE: str = Field(
        default="en",
        description="Language tag used for number normalization when the client sends none"
    )
    SPEECH_CAPTURE_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Seconds to wait for a recognized transcript before giving up"
    )
    SPEECH_CAPTURE_RETRIES: int = Field(
        default=1,
        description="Extra capture attempts after a no-speech result"
    )
    MAX_CAPTURE_FAILURES: int = Field(
        default=3,
        description="Consecutive capture failures before the conductor releases a session"
    )
    QUESTION_DELAY_SECONDS: float = Field(
        default=0.0,
        description="Pause between questions when the conductor drives a session"
    )

    # ==========================================================================
    # Rate Limits (slowapi syntax)
    # ==========================================================================
    RATE_LIMIT_STARTS: str = Field(
        default="30/minute",
        description="Interview starts per client address"
    )
    RATE_LIMIT_ANSWERS: str = Field(
        default="20/minute",
        description="Answers per interview session"
    )
    RATE_LIMIT_READS: str = Field(
        default="120/minute",
        description="Status, prompt, profile and normalize calls per client address"
    )

    # ==========================================================================
    # Voice/Speech Configuration
    # ==========================================================================
    ELEVENLABS_API_KEY: Optional[str] = Field(
        default=None,
        description="ElevenLabs API key for text-to-speech"
    )
    ELEVENLABS_VOICE_ID: str = Field(
        default="21m00Tcm4TlvDq8ikWAM",
        description="Default ElevenLabs voice ID (Rachel)"
    )
    ELEVENLABS_MODEL: str = Field(
        default="eleven_turbo_v2_5",
        description="ElevenLabs model for TTS"
    )

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Singleton instance for easy import
settings = get_settings()
