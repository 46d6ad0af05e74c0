from __future__ import annotations

from typing import cast

from fastapi import Request

from chat_backend.core.llm.groq_client import GroqClient, GroqConfig
from chat_backend.core.settings import Settings


def build_groq_client(settings: Settings) -> GroqClient:
    """Create the completion client from settings that passed `validate_startup_settings`."""

    config = GroqConfig(
        # Presence of the key is checked at startup.
        api_key=cast(str, settings.groq_api_key),
        api_url=settings.groq_api_url,
        model=settings.groq_model,
        timeout_seconds=settings.groq_timeout_seconds,
        max_attempts=settings.groq_max_attempts,
    )
    return GroqClient(config=config)


def get_groq_client(request: Request) -> GroqClient:
    """
    Dependency provider for the completion client.

    The client is created once during application startup and shared by all
    requests; it holds no per-request state.
    """

    return request.app.state.groq_client
