from __future__ import annotations

import pytest

# Import once at collection time: the module configures logging, and doing that
# inside a test would detach pytest's caplog handler from the root logger.
import chat_backend.main  # noqa: F401
from chat_backend.core.settings import get_settings

_ENV_VARS = (
    "APP_NAME",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "APP_ENV",
    "NODE_ENV",
    "DATABASE_URL",
    "FRONTEND_URL",
    "REACT_APP_FRONTEND_URL",
    "FRONTEND_DIST_DIR",
    "GROQ_API_URL",
    "GROQ_MODEL",
    "GROQ_TIMEOUT_SECONDS",
    "GROQ_MAX_ATTEMPTS",
)


@pytest.fixture(autouse=True)
def _test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from chat_backend.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
