import logging
import time
from typing import Any

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from multikind_app.api.dependencies import ItemHandlerDep, ProbeHandlerDep, build_lifespan
from multikind_app.backends import Backends
from multikind_app.config import Settings, settings
from multikind_app.dto import (
    CreateItemRequest,
    ErrorResponse,
    HealthResponse,
    ItemCreatedResponse,
    ItemLookupResponse,
)
from multikind_app.exceptions import MultiKindError
from multikind_app.logging_config import configure_logging
from multikind_app.services import BACKEND_ORDER, COMBOS

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("multikind_app.access")

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    500: {"model": ErrorResponse, "description": "Backend failure"},
}

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "multi-kind-app",
        "version": "0.1.0",
        "endpoints": {
            "health": "/healthz",
            "single": [f"/{backend}/{{val}}" for backend in BACKEND_ORDER],
            "legacy": [f"/{backend}-only" for backend in BACKEND_ORDER],
            "aggregate": [f"/{name}" for name in COMBOS],
            "items": ["/api/item", "/api/item/{id}"],
        },
    }


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    """Liveness check; never touches a backend."""
    return HealthResponse()


def _single_endpoint(backend: str):
    async def endpoint(val: str, handler: ProbeHandlerDep) -> dict[str, Any]:
        return await handler.single(backend, val)

    endpoint.__doc__ = f"Write ``val`` to {backend} and read it back. Fails fast."
    return endpoint


def _legacy_endpoint(backend: str):
    async def endpoint(handler: ProbeHandlerDep) -> dict[str, Any]:
        return await handler.legacy(backend)

    endpoint.__doc__ = f"Probe {backend} with its fixed legacy value. Fails fast."
    return endpoint


def _aggregate_endpoint(combo_name: str):
    async def endpoint(handler: ProbeHandlerDep, val: str | None = None) -> dict[str, Any]:
        return await handler.aggregate(combo_name, val)

    backends = ", ".join(COMBOS[combo_name].backends)
    endpoint.__doc__ = f"Probe {backends} in order. Failures are reported inline."
    return endpoint


for _backend in BACKEND_ORDER:
    router.add_api_route(
        f"/{_backend}/{{val}}",
        _single_endpoint(_backend),
        methods=["GET"],
        name=f"{_backend}_probe",
        responses=ERROR_RESPONSES,
    )
    router.add_api_route(
        f"/{_backend}-only",
        _legacy_endpoint(_backend),
        methods=["GET"],
        name=f"{_backend}_only",
        responses=ERROR_RESPONSES,
    )

for _combo in COMBOS:
    router.add_api_route(
        f"/{_combo}",
        _aggregate_endpoint(_combo),
        methods=["GET"],
        name=_combo.replace("-", "_"),
    )


@router.post(
    "/api/item",
    response_model=ItemCreatedResponse,
    responses={400: {"model": ErrorResponse}, **ERROR_RESPONSES},
)
async def create_item(request: CreateItemRequest, handler: ItemHandlerDep) -> ItemCreatedResponse:
    """Upsert an item into MongoDB and write its value through to Redis."""
    return await handler.create_item(request)


@router.get(
    "/api/item/{item_id:path}",
    response_model=ItemLookupResponse,
    responses={404: {"model": ErrorResponse}, **ERROR_RESPONSES},
)
async def get_item(item_id: str, handler: ItemHandlerDep) -> ItemLookupResponse:
    """Read an item from MongoDB plus its cached value from Redis.

    Ids may contain slashes, so the parameter takes the rest of the path.
    """
    return await handler.get_item(item_id)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON and missing fields are client errors: 400, not 422."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "invalid request"},
    )


async def app_exception_handler(request: Request, exc: MultiKindError) -> JSONResponse:
    logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


def create_app(backends: Backends | None = None, config: Settings = settings) -> FastAPI:
    """Build the FastAPI application.

    Args:
        backends: Pre-built backend handles. When None they are built from
            settings during startup.
        config: Application settings.

    Returns:
        Configured FastAPI instance
    """
    configure_logging(config.log_level)

    app = FastAPI(
        title="multi-kind-app",
        description="Exercises Redis, MongoDB, PostgreSQL, MySQL and outbound HTTP per request",
        version="0.1.0",
        lifespan=build_lifespan(backends, config),
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(MultiKindError, app_exception_handler)

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        access_logger.info(
            "%s %s -> %d (%.2fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    """Console entry point: serve the app on HOST:PORT."""
    import uvicorn

    logger.info("Starting multi-kind-app on :%d", settings.port)
    uvicorn.run(
        "multikind_app.api.app:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
