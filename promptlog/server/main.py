"""
Main FastAPI application creation and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings, configure_logging, get_settings
from ..utils.logging import log_event, set_correlation_id, set_operation_context
from .api.dependencies import attach_services, get_services
from .api.error_formatting import internal_error_response
from .api.router import get_api_router
from .service_container import ServiceContainer


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service container on startup and tear it down on shutdown."""
    settings: Settings = app.state.settings
    configure_logging(level=settings.log_level)

    async with ServiceContainer(settings) as services:
        attach_services(app, services)
        log_event("service_ready", {"service": "promptlog", "status": "ready"})
        yield

    log_event("service_stopped", {"service": "promptlog"})


@asynccontextmanager
async def _injected_lifespan(app: FastAPI):
    # The caller owns the lifecycle of an injected container
    yield


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings to use (defaults to the global settings)
        services: Pre-built service container; when given, the lifespan
            does not construct one
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="promptlog API",
        description="Prompt completion with durable conversation logging",
        version=__version__,
        lifespan=_injected_lifespan if services is not None else lifespan,
    )
    app.state.settings = settings
    if services is not None:
        attach_services(app, services)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get("X-Request-ID"))
        set_operation_context(method=request.method, path=request.url.path)
        response = await call_next(request)
        response.headers["X-Request-ID"] = correlation_id
        log_event(
            "http_request",
            {"status_code": response.status_code},
            level=logging.DEBUG,
        )
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log_event(
            "unhandled_exception",
            {
                "path": request.url.path,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
            level=logging.ERROR,
        )
        return internal_error_response()

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        services = get_services(request)
        completion_client = services.completion_client
        return {
            "status": "healthy",
            "version": __version__,
            "database": services.db_pool is not None,
            "completion": bool(
                completion_client is not None and completion_client.is_initialized
            ),
        }

    app.include_router(get_api_router())

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "promptlog.server.main:create_app",
        host=settings.host,
        port=settings.port,
        factory=True,
    )
