"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Settings are built once at startup by ``load_settings()`` and handed to the
app factory, which passes the relevant groups into each component.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
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


class LLMSettings(BaseSettings):
    """Generative model provider configuration.

    Provider-specific requirements (API key presence, known provider name)
    are validated by the client factory, not here.
    """

    provider: str = Field(
        "gemini",
        description="LLM provider name (gemini or openai)",
    )
    model: str = Field(
        "gemini-2.5-flash",
        description="Model name (e.g., gemini-2.5-flash, gpt-4o-mini)",
    )
    api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("LLM_API_KEY", "GEMINI_API_KEY"),
        description="API key for the provider",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint (OpenAI-compatible providers only)",
    )
    timeout_seconds: float | None = Field(
        None,
        description="Per-call HTTP timeout in seconds; unset means no client timeout",
    )
    temperature: float = Field(
        0.2,
        description="Sampling temperature used for analysis calls",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
        populate_by_name=True,
    )


class RetrySettings(BaseSettings):
    """Backoff policy for upstream overload."""

    max_attempts: int = Field(
        5,
        ge=1,
        description="Maximum number of model calls per analysis",
    )
    initial_delay_ms: float = Field(
        3000.0,
        ge=0,
        description="Delay before the second attempt, in milliseconds",
    )
    backoff_multiplier: float = Field(
        1.5,
        ge=1.0,
        description="Factor applied to the delay after every retry (no upper bound)",
    )

    model_config = SettingsConfigDict(
        env_prefix="RETRY_",
        case_sensitive=False,
    )


class DatabaseSettings(BaseSettings):
    """Storage configuration.

    When ``url`` is unset analyses are kept in process memory, which is only
    suitable for local runs and tests.
    """

    url: str | None = Field(
        None,
        validation_alias=AliasChoices("DB_URL", "DATABASE_URL"),
        description="PostgreSQL connection string",
    )
    ssl: bool = Field(
        True,
        description="Use TLS without certificate verification (hosted Postgres)",
    )
    min_pool_size: int = Field(
        0,
        ge=0,
        description="Connections opened eagerly; 0 keeps startup independent of database reachability",
    )
    max_pool_size: int = Field(10, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        case_sensitive=False,
        populate_by_name=True,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    host: str = Field(
        "0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        3000,
        validation_alias=AliasChoices("APP_PORT", "PORT"),
        description="Listening port",
    )
    max_upload_size_mb: int = Field(
        10,
        description="Maximum résumé upload size in megabytes",
    )
    max_resume_chars: int = Field(
        25000,
        ge=1,
        description="Résumé characters embedded in the prompt; the rest is dropped",
    )
    max_pdf_pages: int = Field(
        50,
        ge=1,
        description="Reject PDFs with more pages than this",
    )
    default_job_title: str = Field(
        "Unknown Role",
        description="Job title stored when the caller does not send one",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )
    index_file: str = Field(
        "index.html",
        description="Document served for GET / (relative to the working directory)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        populate_by_name=True,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="json or plain")
    output: str = Field("stdout", description="stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept and return the correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Raises validation errors on startup if settings are malformed.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=LLMSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


def _resolve_env_file(app_env: str) -> Path | None:
    env_path = PROJECT_ROOT / ENV_FILE_MAP.get(app_env, ".env.development")
    if env_path.is_file():
        return env_path
    # Plain .env is honoured as a fallback for single-environment deployments
    fallback = PROJECT_ROOT / ".env"
    return fallback if fallback.is_file() else None


def load_settings() -> Settings:
    """Read configuration from the environment (and .env file) once.

    The .env file is loaded into ``os.environ`` first because nested
    BaseSettings groups do not inherit ``env_file`` from the container.
    Variables already present in the process environment win.

    Returns:
        Fully populated Settings instance.
    """
    env_file = _resolve_env_file(os.getenv("APP_ENV", APP_ENV))
    if env_file is not None:
        from dotenv import load_dotenv

        load_dotenv(env_file, override=False)

    return Settings()
