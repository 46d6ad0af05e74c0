from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app_name: str = Field(
        default="chat-backend",
        validation_alias=AliasChoices("APP_NAME", "app_name"),
    )
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    # HTTP listener
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
        description="Interface the API server binds to.",
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="Port the API server listens on.",
    )

    # Bundled frontend
    frontend_url: str = Field(
        default="http://localhost:5173",
        validation_alias=AliasChoices("FRONTEND_URL", "REACT_APP_FRONTEND_URL", "frontend_url"),
        description="Single origin allowed by CORS (credentials enabled).",
    )
    frontend_dist_dir: str = Field(
        default="../frontend/dist",
        validation_alias=AliasChoices("FRONTEND_DIST_DIR", "frontend_dist_dir"),
        description="Prebuilt frontend bundle served in production (relative or absolute).",
    )

    # Completion API (Groq, OpenAI-compatible)
    # The key is a secret: never log it or echo it back in responses.
    groq_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GROQ_API_KEY", "groq_api_key"),
        description="Groq API key. Required: the server refuses to start without it.",
    )
    groq_api_url: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        validation_alias=AliasChoices("GROQ_API_URL", "groq_api_url"),
        description="Full chat-completions endpoint URL.",
    )
    groq_model: str = Field(
        default="llama3-70b-8192",
        validation_alias=AliasChoices("GROQ_MODEL", "groq_model"),
        description="Model identifier sent with every completion request.",
    )
    groq_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("GROQ_TIMEOUT_SECONDS", "groq_timeout_seconds"),
        description="Optional timeout for completion requests. Unset means wait indefinitely.",
    )
    groq_max_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        validation_alias=AliasChoices("GROQ_MAX_ATTEMPTS", "groq_max_attempts"),
        description="Attempts per completion call. 1 disables retries.",
    )

    # Database collaborator (messages/auth). Schema lives with its owners.
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
        description="SQLAlchemy async DB URL. When unset, no database connection is made.",
    )

    @property
    def is_production(self) -> bool:
        return str(self.app_env).strip().lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def validate_startup_settings(settings: Settings) -> list[str]:
    """Return the configuration problems that must prevent startup.

    An empty list means the process may start. This never exits on its own;
    the entry point decides what to do with the result.
    """

    problems: list[str] = []
    if not (settings.groq_api_key or "").strip():
        problems.append("GROQ_API_KEY is missing in environment variables!")
    return problems
