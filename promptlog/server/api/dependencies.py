"""
Dependency injection for API routes.

The service container lives on ``app.state``; it is attached before the
application starts serving, so handlers never observe a missing container.
"""

from fastapi import Depends, FastAPI, HTTPException, Request

from ...chat import ConversationPipeline
from ...export import ExportJob
from ...storage import ConversationStore
from ..service_container import ServiceContainer


def attach_services(app: FastAPI, services: ServiceContainer) -> None:
    """Bind the service container to the application."""
    app.state.services = services


def get_services(request: Request) -> ServiceContainer:
    """
    Get the service container of the running application.

    Raises:
        HTTPException: 503 if no container has been attached
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Services not available")
    return services


def get_pipeline(
    services: ServiceContainer = Depends(get_services),  # noqa: B008
) -> ConversationPipeline:
    return services.pipeline


def get_store(
    services: ServiceContainer = Depends(get_services),  # noqa: B008
) -> ConversationStore:
    return services.store


def get_export_job(
    services: ServiceContainer = Depends(get_services),  # noqa: B008
) -> ExportJob:
    return services.export_job
