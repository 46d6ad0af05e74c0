"""Process entry point: validate configuration, then serve the API with uvicorn."""

from __future__ import annotations

import logging
import sys

import uvicorn

from chat_backend.core.logging import setup_logging
from chat_backend.core.settings import get_settings, validate_startup_settings

logger = logging.getLogger("chat_backend.startup")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    problems = validate_startup_settings(settings)
    if problems:
        for problem in problems:
            logger.critical(problem)
        sys.exit(1)

    # Imported late so a misconfigured process exits before the app is built.
    from chat_backend.main import create_app

    app = create_app(settings)
    logger.info("Starting server", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
