"""Serving the prebuilt single-page frontend in production."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger("chat_backend.startup")

INDEX_FILE = "index.html"


class SinglePageAppFiles(StaticFiles):
    """Static files whose unknown paths fall back to `index.html` for client-side routing.

    Only GET and HEAD are served; any other method on an unmatched path is a 404.
    """

    async def get_response(self, path: str, scope: Scope) -> Response:
        if scope["method"] not in ("GET", "HEAD"):
            raise HTTPException(status_code=404)
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response(INDEX_FILE, scope)


def mount_frontend(*, app: FastAPI, dist_dir: str) -> bool:
    """Mount the bundle at `/`. Must run after every API route is registered."""

    directory = Path(dist_dir).resolve()
    if not (directory / INDEX_FILE).is_file():
        logger.warning(
            "Frontend bundle not found; static serving disabled",
            extra={"dist_dir": str(directory)},
        )
        return False

    app.mount("/", SinglePageAppFiles(directory=str(directory), html=True), name="frontend")
    return True
