from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chat_backend.core.middleware.http_logging import INTERNAL_ERROR_MESSAGE, request_id_of
from chat_backend.domain.exceptions import BadRequestError

logger = logging.getLogger("chat_backend.errors")


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError) -> JSONResponse:
        # Request bodies hold chat content; log metadata only.
        logger.info(
            "Request validation failed",
            extra={
                "request_id": request_id_of(request),
                "http_method": request.method,
                "request_path": request.url.path,
                "status_code": 400,
                "error": "bad_request",
            },
        )
        return JSONResponse(status_code=400, content={"message": exc.message})

    # Fallback for failures outside HttpLoggingMiddleware, which answers route errors itself.
    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Server Error",
            exc_info=exc,
            extra={
                "request_id": request_id_of(request),
                "http_method": request.method,
                "request_path": request.url.path,
                "status_code": 500,
            },
        )
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})
