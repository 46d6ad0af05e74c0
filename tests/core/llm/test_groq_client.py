"""Unit tests for the chat-completion client against a stubbed upstream."""

from __future__ import annotations

import asyncio
import json
import logging
import warnings

import httpx
import pytest

from chat_backend.core.llm.groq_client import GroqClient, GroqConfig, UpstreamError

API_URL = "https://groq.test/openai/v1/chat/completions"


def _client(handler, **overrides) -> GroqClient:
    config = GroqConfig(
        api_key=overrides.pop("api_key", "secret-key"),
        api_url=API_URL,
        model=overrides.pop("model", "llama3-70b-8192"),
        retry_backoff_seconds=0,
        **overrides,
    )
    return GroqClient(config=config, transport=httpx.MockTransport(handler))


def _ok(content: str) -> httpx.Response:
    return httpx.Response(
        200, json={"choices": [{"message": {"role": "assistant", "content": content}}]}
    )


def test_complete_posts_single_user_message_and_returns_first_choice() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "choices": [
                    {"message": {"content": "first"}},
                    {"message": {"content": "second"}},
                ]
            },
        )

    result = asyncio.run(_client(handler).complete("Say hi"))

    assert result == "first"
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == API_URL
    assert request.headers["Authorization"] == "Bearer secret-key"
    assert request.headers["Content-Type"].startswith("application/json")
    assert json.loads(request.content) == {
        "model": "llama3-70b-8192",
        "messages": [{"role": "user", "content": "Say hi"}],
    }


def test_error_status_uses_upstream_error_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "rate limited"}})

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_client(handler).complete("hi"))

    assert exc_info.value.message == "rate limited"
    assert exc_info.value.status_code == 429


def test_error_status_without_error_object_uses_generic_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"detail": "maintenance"})

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_client(handler).complete("hi"))

    assert exc_info.value.message == "Groq API error"


def test_empty_choices_is_a_failure_not_empty_content() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_client(handler).complete("hi"))

    assert exc_info.value.message == "Groq API error"
    assert exc_info.value.status_code == 200


@pytest.mark.parametrize(
    "body",
    [
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": ["not-an-object"]},
    ],
)
def test_first_choice_without_text_content_is_a_failure(body: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(UpstreamError):
        asyncio.run(_client(handler).complete("hi"))


def test_non_json_body_is_a_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_client(handler).complete("hi"))

    assert exc_info.value.status_code == 502


def test_transport_error_is_reported_as_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_client(handler).complete("hi"))

    assert exc_info.value.message == "Groq API request failed"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_every_call_logs_status_and_body(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="chat_backend.llm")
    responses = iter([_ok("hello"), httpx.Response(429, json={"error": {"message": "slow down"}})])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    client = _client(handler)
    asyncio.run(client.complete("one"))
    with pytest.raises(UpstreamError):
        asyncio.run(client.complete("two"))

    response_logs = [r for r in caplog.records if r.getMessage() == "Groq API response"]
    assert [r.__dict__["upstream_status_code"] for r in response_logs] == [200, 429]
    assert response_logs[0].__dict__["upstream_body"]["choices"][0]["message"]["content"] == "hello"
    assert response_logs[1].__dict__["upstream_body"] == {"error": {"message": "slow down"}}

    error_logs = [r for r in caplog.records if r.getMessage() == "Groq API Full Error"]
    assert len(error_logs) == 1
    assert error_logs[0].levelno == logging.ERROR
    assert error_logs[0].__dict__["upstream_error"] == "slow down"

    # The key is a secret and must never show up in logs.
    assert all("secret-key" not in r.getMessage() for r in caplog.records)


def test_single_attempt_by_default() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, json={"error": {"message": "overloaded"}})

    with pytest.raises(UpstreamError):
        asyncio.run(_client(handler).complete("hi"))

    assert calls == 1


def test_retries_transient_failures_when_enabled() -> None:
    responses = iter(
        [
            httpx.Response(503, json={"error": {"message": "overloaded"}}),
            httpx.Response(429, json={"error": {"message": "rate limited"}}),
            _ok("finally"),
        ]
    )
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return next(responses)

    result = asyncio.run(_client(handler, max_attempts=3).complete("hi"))

    assert result == "finally"
    assert calls == 3


def test_retry_gives_up_after_max_attempts_with_last_error() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500, json={"error": {"message": f"failure {calls}"}})

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_client(handler, max_attempts=2).complete("hi"))

    assert calls == 2
    assert exc_info.value.message == "failure 2"


def test_client_errors_are_not_retried() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(401, json={"error": {"message": "Invalid API Key"}})

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(_client(handler, max_attempts=3).complete("hi"))

    assert calls == 1
    assert exc_info.value.message == "Invalid API Key"


def test_retry_schedule_emits_no_deprecation_warnings() -> None:
    responses = iter([httpx.Response(503, json={"error": {"message": "overloaded"}}), _ok("ok")])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = asyncio.run(_client(handler, max_attempts=2).complete("hi"))

    assert result == "ok"
    deprecations = [
        w
        for w in caught
        if issubclass(w.category, DeprecationWarning)
        and ("groq_client" in w.filename or "tenacity" in w.filename)
    ]
    assert deprecations == []
