"""
Main API router that aggregates all route modules.
"""

from fastapi import APIRouter

from .routes import chat, conversations, export


def get_api_router() -> APIRouter:
    """Get the API router with every route module included."""
    api_router = APIRouter()

    api_router.include_router(chat.router)
    api_router.include_router(conversations.router)
    api_router.include_router(export.router)

    return api_router
