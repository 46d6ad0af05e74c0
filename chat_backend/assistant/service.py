from __future__ import annotations

from typing import Protocol

from chat_backend.assistant.prompts import (
    build_reply_suggestion_prompt,
    build_summary_prompt,
    build_translation_prompt,
)


class CompletionClient(Protocol):
    async def complete(self, prompt: str) -> str: ...


class AssistantService:
    """Builds prompts for the chat assistant features and delegates to the completion client."""

    def __init__(self, *, client: CompletionClient):
        self._client = client

    async def summarize(self, *, messages: list[str]) -> str:
        return await self._client.complete(build_summary_prompt(messages=messages))

    async def translate(self, *, message: str, target_lang: str) -> str:
        prompt = build_translation_prompt(message=message, target_lang=target_lang)
        return await self._client.complete(prompt)

    async def suggest_reply(self, *, message: str) -> str:
        return await self._client.complete(build_reply_suggestion_prompt(message=message))
