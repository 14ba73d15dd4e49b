"""Dependency injection configuration for the FastAPI app.

Uses FastAPI's app.state pattern for storing handler instances.

Pattern:
    - Backends built (or handed in) and probed during lifespan startup
    - Services and handlers stored in app.state
    - Dependency functions retrieve them from request.app.state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from multikind_app.backends import Backends, build_backends, close_backends, probe_backends
from multikind_app.config import Settings, settings
from multikind_app.exceptions import StartupError
from multikind_app.handlers import ItemHandler, ProbeHandler
from multikind_app.services import ItemService, ProbeService

logger = logging.getLogger(__name__)


def get_probe_handler(request: Request) -> ProbeHandler:
    """Dependency injection for ProbeHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "probe_handler", None)
    if handler is None:
        raise RuntimeError("ProbeHandler not initialized. Check lifespan setup.")
    return handler


def get_item_handler(request: Request) -> ItemHandler:
    """Dependency injection for ItemHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "item_handler", None)
    if handler is None:
        raise RuntimeError("ItemHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(backends: Backends | None = None, config: Settings = settings):
    """Create the lifespan context manager for the app.

    Args:
        backends: Pre-built backends. When None, they are built from
            ``config`` on startup and closed on shutdown; handed-in
            backends are left open for the caller.
        config: Settings used for building backends and services.

    Returns:
        An async context manager factory for ``FastAPI(lifespan=...)``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = backends is None
        container = build_backends(config) if owned else backends

        try:
            await probe_backends(container, mongo_required=config.mongo_required)
        except StartupError:
            logger.critical("Startup aborted: MongoDB is required but not reachable")
            if owned:
                await close_backends(container)
            raise

        probe_service = ProbeService(backends=container, cache_ttl=config.cache_ttl)
        item_service = ItemService(
            documents=container.documents,
            cache=container.cache,
            item_ttl=config.item_cache_ttl,
        )

        app.state.backends = container
        app.state.probe_handler = ProbeHandler(probe_service=probe_service)
        app.state.item_handler = ItemHandler(item_service=item_service)
        logger.info("Handlers initialized")

        yield

        del app.state.item_handler
        del app.state.probe_handler
        del app.state.backends
        if owned:
            await close_backends(container)
        logger.info("Backends shut down")

    return lifespan


# Type aliases for cleaner dependency injection
ProbeHandlerDep = Annotated[ProbeHandler, Depends(get_probe_handler)]
ItemHandlerDep = Annotated[ItemHandler, Depends(get_item_handler)]
