from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_backend.api.exception_handlers import register_exception_handlers
from chat_backend.api.schemas import HealthOut
from chat_backend.assistant.router import router as assistant_router
from chat_backend.core.db import close_db, connect_db
from chat_backend.core.frontend import mount_frontend
from chat_backend.core.llm.deps import build_groq_client
from chat_backend.core.logging import setup_logging
from chat_backend.core.metrics import PrometheusMetricsMiddleware, metrics_router
from chat_backend.core.middleware.http_logging import HttpLoggingMiddleware
from chat_backend.core.settings import Settings, get_settings, validate_startup_settings
from chat_backend.domain.exceptions import ConfigurationError

setup_logging(get_settings().log_level)

logger = logging.getLogger("chat_backend.startup")

AUTH_PREFIX = "/api/auth"
MESSAGES_PREFIX = "/api/messages"
GROQ_PREFIX = "/api/groq"


def create_app(
    settings: Settings | None = None,
    *,
    auth_router: APIRouter | None = None,
    messages_router: APIRouter | None = None,
) -> FastAPI:
    """Build the API gateway.

    `auth_router` and `messages_router` come from the services that own those
    route groups; each is mounted under its fixed prefix (empty when absent).
    """

    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Refuse to start (and so never bind a socket) without required configuration.
        problems = validate_startup_settings(settings)
        if problems:
            for problem in problems:
                logger.critical(problem)
            raise ConfigurationError(problems)

        app.state.settings = settings
        app.state.groq_client = build_groq_client(settings)
        if settings.database_url:
            await connect_db(app=app, database_url=settings.database_url)
        else:
            logger.info("DATABASE_URL not set; skipping database connection")
        yield
        await close_db(app=app)

    app = FastAPI(
        title="Chat Backend API",
        description=(
            "Messaging backend: authentication, message persistence and an AI assistant "
            "proxy (summarize, translate, suggest replies) backed by a chat-completion API.\n\n"
            "Assistant failures are returned as generic messages; upstream details are "
            "logged server-side only."
        ),
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {"name": "auth", "description": "Authentication (provided by the auth service)."},
            {"name": "messages", "description": "Message persistence and delivery."},
            {
                "name": "groq",
                "description": "Conversation summaries, translations and reply suggestions.",
            },
            {"name": "monitoring", "description": "Prometheus-compatible metrics endpoint."},
        ],
    )

    # Starlette applies the last-added middleware outermost; CORS must wrap every
    # response, including the 500s produced by HttpLoggingMiddleware.
    app.add_middleware(HttpLoggingMiddleware)
    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running. It does not call the "
            "completion API or the database."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(
        auth_router if auth_router is not None else APIRouter(), prefix=AUTH_PREFIX, tags=["auth"]
    )
    app.include_router(
        messages_router if messages_router is not None else APIRouter(),
        prefix=MESSAGES_PREFIX,
        tags=["messages"],
    )
    app.include_router(assistant_router, prefix=GROQ_PREFIX)

    if settings.is_production:
        mount_frontend(app=app, dist_dir=settings.frontend_dist_dir)

    return app


app = create_app()
