from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from chat_backend.core.metrics import groq_upstream_requests_total

logger = logging.getLogger("chat_backend.llm")

GENERIC_UPSTREAM_MESSAGE = "Groq API error"
_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class UpstreamError(Exception):
    """Raised when the completion API fails or returns an unusable response.

    `message` may carry the upstream's own error text. It is meant for server
    logs only and must not be relayed to API callers.
    """

    def __init__(self, message: str, *, status_code: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retryable = retryable


@dataclass(frozen=True)
class GroqConfig:
    api_key: str
    api_url: str
    model: str
    timeout_seconds: float | None = None
    max_attempts: int = 1
    retry_backoff_seconds: float = 0.5


def _upstream_error_message(data: Any) -> str:
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
    return GENERIC_UPSTREAM_MESSAGE


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, UpstreamError) and exc.retryable


class GroqClient:
    """
    Chat-completion client for the Groq (OpenAI-compatible) API.

    One prompt in, the first choice's text out. By default a call is a single
    attempt with no timeout; `GroqConfig.timeout_seconds` and
    `GroqConfig.max_attempts` opt into a bounded call with jittered retries.
    """

    def __init__(self, *, config: GroqConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport

    @property
    def config(self) -> GroqConfig:
        return self._config

    @property
    def model(self) -> str:
        return self._config.model

    async def complete(self, prompt: str) -> str:
        backoff = self._config.retry_backoff_seconds
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self._config.max_attempts)),
            wait=wait_exponential(multiplier=backoff, max=backoff * 16) + wait_random(0, backoff),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._complete_once(prompt)
        except UpstreamError as exc:
            logger.error(
                "Groq API Full Error",
                exc_info=True,
                extra={"upstream_status_code": exc.status_code, "upstream_error": exc.message},
            )
            raise
        raise UpstreamError(GENERIC_UPSTREAM_MESSAGE)  # pragma: no cover

    async def _complete_once(self, prompt: str) -> str:
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.post(self._config.api_url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            groq_upstream_requests_total.labels(outcome="transport_error").inc()
            raise UpstreamError("Groq API request timed out", retryable=True) from exc
        except httpx.HTTPError as exc:
            groq_upstream_requests_total.labels(outcome="transport_error").inc()
            raise UpstreamError("Groq API request failed", retryable=True) from exc

        retryable = resp.status_code in _RETRYABLE_STATUS_CODES

        try:
            data = resp.json()
        except ValueError as exc:
            logger.info(
                "Groq API response",
                extra={"upstream_status_code": resp.status_code, "upstream_body": resp.text},
            )
            groq_upstream_requests_total.labels(outcome="invalid_body").inc()
            raise UpstreamError(
                "Groq API returned a non-JSON body",
                status_code=resp.status_code,
                retryable=retryable,
            ) from exc

        logger.info(
            "Groq API response",
            extra={"upstream_status_code": resp.status_code, "upstream_body": data},
        )

        choices = data.get("choices") if isinstance(data, dict) else None
        if not resp.is_success or not isinstance(choices, list) or not choices:
            outcome = "http_error" if not resp.is_success else "empty_choices"
            groq_upstream_requests_total.labels(outcome=outcome).inc()
            raise UpstreamError(
                _upstream_error_message(data),
                status_code=resp.status_code,
                retryable=retryable,
            )

        try:
            content = choices[0]["message"]["content"]
        except (KeyError, TypeError) as exc:
            groq_upstream_requests_total.labels(outcome="invalid_body").inc()
            raise UpstreamError(
                "Groq API response has no message content", status_code=resp.status_code
            ) from exc

        if not isinstance(content, str):
            groq_upstream_requests_total.labels(outcome="invalid_body").inc()
            raise UpstreamError(
                "Groq API response has no message content", status_code=resp.status_code
            )

        groq_upstream_requests_total.labels(outcome="success").inc()
        return content
