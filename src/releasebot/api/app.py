"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from releasebot import __version__
from releasebot.api.models import APIResponse
from releasebot.api.routes import status as status_routes
from releasebot.api.routes import webhooks
from releasebot.api.signature import InvalidSignatureError
from releasebot.config import ReleaseBotConfig
from releasebot.events import DispatcherBusyError, EventDispatcher, EventPayloadError
from releasebot.tracker import TrackerClient

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger("releasebot.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the tracker client and dispatcher unless the app was created with
    a dispatcher already, and drains the worker pool on shutdown.
    """
    config: ReleaseBotConfig = app.state.config
    tracker: TrackerClient | None = None

    if app.state.dispatcher is None:
        if not config.webhook_secret:
            logger.warning("No webhook secret configured; signatures will not be checked")
        tracker = TrackerClient(token=config.github_token, base_url=config.api_url)
        app.state.dispatcher = EventDispatcher(
            tracker,
            max_workers=config.max_workers,
            timeout=config.event_timeout,
            max_pending=config.max_pending,
        )

    logger.info("release-bot %s ready", __version__)
    yield

    if tracker is not None:
        app.state.dispatcher.shutdown(wait=True)
        app.state.dispatcher = None
        tracker.close()


def create_app(
    config: ReleaseBotConfig | None = None,
    dispatcher: EventDispatcher | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings; read from the environment when omitted.
        dispatcher: Pre-built dispatcher (tests); built at startup when omitted.
    """
    app = FastAPI(
        title="release-bot",
        description="Keeps release project boards and stage labels in sync",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.config = config if config is not None else ReleaseBotConfig.from_env()
    app.state.dispatcher = dispatcher

    @app.exception_handler(InvalidSignatureError)
    async def invalid_signature_handler(
        request: Request, exc: InvalidSignatureError
    ) -> JSONResponse:
        logger.error("%s Failed to validate secret, %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=APIResponse[None](data=None, error="Secret did not match").model_dump(),
        )

    @app.exception_handler(EventPayloadError)
    async def bad_payload_handler(request: Request, exc: EventPayloadError) -> JSONResponse:
        logger.error("%s Failed to parse webhook, %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=APIResponse[None](data=None, error="Bad webhook payload").model_dump(),
        )

    @app.exception_handler(DispatcherBusyError)
    async def busy_handler(request: Request, exc: DispatcherBusyError) -> JSONResponse:
        logger.error("%s Dropping webhook, %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=APIResponse[None](data=None, error="Too many pending events").model_dump(),
            headers={"Retry-After": "60"},
        )

    app.include_router(status_routes.router, prefix="/api/v1")
    app.include_router(webhooks.router)

    return app
