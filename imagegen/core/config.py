"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file and os.getenv("TESTING") != "true":
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_image_settings() -> "ImageSettings":
    """Build image provider settings from environment.

    Static type checkers treat fields without defaults as required constructor
    arguments, which is not how BaseSettings is intended to be used.
    """

    return ImageSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class ImageSettings(BaseSettings):
    """Image generation provider configuration.

    Any OpenAI-compatible images endpoint works; the defaults target
    Nebius AI Studio serving FLUX.1 schnell.
    """

    provider: str = Field(
        "openai",
        description="Provider client to use (OpenAI-compatible images API)",
    )
    model: str = Field(
        "black-forest-labs/flux-schnell",
        description="Image model name",
    )
    api_key: str | None = Field(
        None,
        description="API key for the image provider",
    )
    base_url: str | None = Field(
        "https://api.studio.nebius.com/v1/",
        description="Provider API endpoint",
    )
    timeout_seconds: float = Field(
        60.0,
        description="Request timeout in seconds",
    )
    num_inference_steps: int = Field(
        4,
        description="Diffusion steps requested from the provider",
        ge=1,
    )
    response_extension: str = Field(
        "webp",
        description="Image encoding returned by the provider (webp, png, jpg)",
    )

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    max_prompt_chars: int = Field(
        2000,
        description="Maximum prompt length in characters",
        ge=1,
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client admission control on image generation",
    )
    rate_limit_requests: int = Field(
        3,
        description="Maximum number of generations allowed per client within the window",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        86400,
        description="Trailing window length in seconds",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    client_identifier_header: str = Field(
        "X-Forwarded-For",
        description="Request header used to identify the client for rate limiting",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file at this size (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.
    """

    app_env: str = APP_ENV
    image: ImageSettings = Field(default_factory=_build_image_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
