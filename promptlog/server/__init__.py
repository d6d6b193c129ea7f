"""
HTTP server for promptlog.
"""

from .main import create_app
from .service_container import ServiceContainer, ServiceInitializationError

__all__ = ["create_app", "ServiceContainer", "ServiceInitializationError"]
