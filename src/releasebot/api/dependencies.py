"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from releasebot.config import ReleaseBotConfig
from releasebot.events import EventDispatcher


def get_config(request: Request) -> ReleaseBotConfig:
    """Dependency that provides the application's configuration."""
    config: ReleaseBotConfig = request.app.state.config
    return config


def get_dispatcher(request: Request) -> EventDispatcher:
    """Dependency that provides the EventDispatcher instance."""
    dispatcher: EventDispatcher | None = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("EventDispatcher not initialized. Is the app lifespan running?")
    return dispatcher


# Type aliases for dependency injection
ConfigDep = Annotated[ReleaseBotConfig, Depends(get_config)]
DispatcherDep = Annotated[EventDispatcher, Depends(get_dispatcher)]
