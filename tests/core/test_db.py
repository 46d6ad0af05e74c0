"""Unit tests: database connection lifecycle used by the messages/auth collaborators."""

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace

from chat_backend.core.db import close_db, connect_db


def _fake_app() -> SimpleNamespace:
    return SimpleNamespace(state=SimpleNamespace())


def test_connect_db_creates_engine_and_checks_connectivity(tmp_path: Path) -> None:
    app = _fake_app()

    async def run() -> bool:
        url = f"sqlite+aiosqlite:///{tmp_path / 'db.sqlite3'}"
        ok = await connect_db(app=app, database_url=url)
        await close_db(app=app)
        return ok

    assert asyncio.run(run()) is True
    assert app.state.db_engine is not None
    assert app.state.db_sessionmaker is not None


def test_connect_db_reports_failure_without_raising(tmp_path: Path) -> None:
    app = _fake_app()
    unreachable = tmp_path / "missing-dir" / "db.sqlite3"

    async def run() -> bool:
        ok = await connect_db(app=app, database_url=f"sqlite+aiosqlite:///{unreachable}")
        await close_db(app=app)
        return ok

    assert asyncio.run(run()) is False


def test_close_db_without_engine_is_a_no_op() -> None:
    asyncio.run(close_db(app=_fake_app()))
