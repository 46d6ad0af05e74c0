from __future__ import annotations

import logging
from typing import TypeVar

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from chat_backend.assistant.schemas import (
    MessageOut,
    SuggestReplyIn,
    SuggestReplyOut,
    SummarizeIn,
    SummarizeOut,
    TranslateIn,
    TranslateOut,
)
from chat_backend.assistant.service import AssistantService, CompletionClient
from chat_backend.core.llm.deps import get_groq_client
from chat_backend.core.middleware.http_logging import request_id_of
from chat_backend.domain.exceptions import BadRequestError

router = APIRouter(tags=["groq"])
logger = logging.getLogger("chat_backend.assistant")

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_ERROR_RESPONSES: dict[int | str, dict] = {
    status.HTTP_400_BAD_REQUEST: {"model": MessageOut, "description": "Missing or invalid field."},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": MessageOut,
        "description": "Completion failed. Upstream details are logged, never returned.",
    },
}


async def _parse_body(request: Request, model: type[_ModelT], *, error_message: str) -> _ModelT:
    """Validate the JSON body against `model`, mapping any failure to a 400."""

    try:
        raw = await request.json()
    except ValueError:
        raise BadRequestError(error_message) from None

    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise BadRequestError(error_message) from exc


def _failure_response(*, request: Request, operation: str, message: str) -> JSONResponse:
    # Called from an except block: the upstream detail goes to the log, not the caller.
    logger.warning(
        "Assistant request failed",
        exc_info=True,
        extra={"request_id": request_id_of(request), "operation": operation, "success": False},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": message}
    )


def _log_success(*, request: Request, operation: str) -> None:
    logger.info(
        "Assistant request completed",
        extra={"request_id": request_id_of(request), "operation": operation, "success": True},
    )


@router.post(
    "/summarize",
    response_model=SummarizeOut,
    responses=_ERROR_RESPONSES,
    summary="Summarize a conversation",
)
async def summarize_messages(
    request: Request,
    client: CompletionClient = Depends(get_groq_client),
) -> SummarizeOut | JSONResponse:
    payload = await _parse_body(
        request, SummarizeIn, error_message="Messages array is required for summarization"
    )

    svc = AssistantService(client=client)
    try:
        summary = await svc.summarize(messages=payload.messages)
    except Exception:  # noqa: BLE001 - every failure maps to the same generic response
        return _failure_response(
            request=request, operation="summarize", message="Failed to summarize message"
        )

    _log_success(request=request, operation="summarize")
    return SummarizeOut(summary=summary)


@router.post(
    "/translate",
    response_model=TranslateOut,
    responses=_ERROR_RESPONSES,
    summary="Translate a message",
)
async def translate_message(
    request: Request,
    client: CompletionClient = Depends(get_groq_client),
) -> TranslateOut | JSONResponse:
    payload = await _parse_body(
        request, TranslateIn, error_message="Message and targetLang are required"
    )

    svc = AssistantService(client=client)
    try:
        translated = await svc.translate(message=payload.message, target_lang=payload.target_lang)
    except Exception:  # noqa: BLE001
        return _failure_response(
            request=request, operation="translate", message="Failed to translate message"
        )

    _log_success(request=request, operation="translate")
    return TranslateOut(translated=translated)


@router.post(
    "/suggest-reply",
    response_model=SuggestReplyOut,
    responses=_ERROR_RESPONSES,
    summary="Suggest three replies to a message",
)
async def suggest_reply(
    request: Request,
    client: CompletionClient = Depends(get_groq_client),
) -> SuggestReplyOut | JSONResponse:
    payload = await _parse_body(
        request, SuggestReplyIn, error_message="Message is required to suggest a reply"
    )

    svc = AssistantService(client=client)
    try:
        suggestion = await svc.suggest_reply(message=payload.message)
    except Exception:  # noqa: BLE001
        return _failure_response(
            request=request,
            operation="suggest-reply",
            message="Failed to generate reply suggestion",
        )

    _log_success(request=request, operation="suggest-reply")
    return SuggestReplyOut(suggestion=suggestion)
