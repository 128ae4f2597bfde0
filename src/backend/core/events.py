"""
Application lifecycle event handlers.

Manages startup and shutdown of the database owned by app.state.
"""

from typing import Callable

import structlog
from fastapi import FastAPI

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        settings = app.state.settings
        logger.info("api_starting", app=settings.APP_NAME, env=settings.APP_ENV)

        await app.state.database.create_all()

        logger.info(
            "api_started",
            auth_strategy=app.state.verifier.strategy.value,
            allow_anonymous_proposals=settings.ALLOW_ANONYMOUS_PROPOSALS,
        )

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        logger.info("api_stopping")
        await app.state.database.dispose()
        logger.info("api_stopped")

    return stop_app
