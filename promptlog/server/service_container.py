"""
Service container for dependency injection and lifecycle management.

Builds every collaborator of the HTTP layer in dependency order (database
pool → store → completion client → pipeline and export job) and tears them
down in reverse order. Routes only ever see a fully initialized container.
"""

import logging
import ssl
from typing import Optional

import asyncpg

from ..chat import ConversationPipeline, RequestValidator
from ..config.settings import Settings
from ..export import ExportJob
from ..llm import CompletionClient, CompletionConfig
from ..storage import ConversationStore
from ..storage.database import mask_database_url
from ..utils.logging import log_event


class ServiceInitializationError(Exception):
    """Raised when service initialization fails."""

    pass


class ServiceContainer:
    """
    Container for the application's services.

    Manages the lifecycle of:
    - PostgreSQL connection pool
    - Conversation store
    - Completion client (HTTP session)
    - Chat pipeline and export job

    All services are guaranteed to be initialized (never None) after
    calling initialize().

    Usage:
        async with ServiceContainer(settings) as container:
            result = await container.pipeline.handle({"message": "..."})
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._initialized = False

        self.db_pool: Optional[asyncpg.Pool] = None
        self.store: Optional[ConversationStore] = None
        self.completion_client: Optional[CompletionClient] = None
        self.pipeline: Optional[ConversationPipeline] = None
        self.export_job: Optional[ExportJob] = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in dependency order.

        Raises:
            ServiceInitializationError: If any service fails to initialize
        """
        if self._initialized:
            log_event("service_container_already_initialized", level=logging.WARNING)
            return

        try:
            log_event(
                "service_container_init_start",
                {"database_url": mask_database_url(self.settings.database_url)},
            )

            await self._init_database()
            await self._init_store()
            await self._init_completion_client()
            self._init_pipeline()
            self._init_export_job()

            self._initialized = True

            log_event(
                "service_container_initialized",
                {
                    "services": [
                        "database",
                        "store",
                        "completion_client",
                        "pipeline",
                        "export_job",
                    ],
                    "status": "ready",
                },
            )

        except Exception as e:
            log_event(
                "service_container_init_failed",
                {"error": str(e), "error_type": type(e).__name__},
                level=logging.ERROR,
            )
            await self.cleanup()
            raise ServiceInitializationError(
                f"Failed to initialize services: {str(e)}"
            ) from e

    async def cleanup(self) -> None:
        """Cleanup all services in reverse initialization order."""
        log_event("service_container_cleanup_start")

        if self.completion_client:
            try:
                await self.completion_client.cleanup()
            except Exception as e:
                log_event(
                    "completion_client_cleanup_error",
                    {"error": str(e)},
                    level=logging.WARNING,
                )

        if self.db_pool:
            try:
                await self.db_pool.close()
                log_event("database_pool_cleaned_up")
            except Exception as e:
                log_event(
                    "database_cleanup_error",
                    {"error": str(e)},
                    level=logging.WARNING,
                )

        self.db_pool = None
        self._initialized = False
        log_event("service_container_cleanup_complete")

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()
        return False

    # Private initialization methods

    def _ssl_context(self) -> Optional[ssl.SSLContext]:
        if not self.settings.database_ssl:
            return None
        # Hosted databases commonly present certificates we cannot verify
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    async def _init_database(self) -> None:
        """Initialize the PostgreSQL connection pool."""
        try:
            self.db_pool = await asyncpg.create_pool(
                self.settings.database_url,
                min_size=self.settings.database_pool_min_size,
                max_size=self.settings.database_pool_max_size,
                command_timeout=60.0,
                ssl=self._ssl_context(),
                server_settings={
                    "application_name": "promptlog",
                    "timezone": "UTC",
                },
            )

            async with self.db_pool.acquire() as conn:
                version = await conn.fetchval("SELECT version()")

            log_event(
                "database_initialized",
                {
                    "url": mask_database_url(self.settings.database_url),
                    "pool_max_size": self.settings.database_pool_max_size,
                    "postgres_version": version.split(",")[0] if version else "unknown",
                },
            )

        except asyncpg.InvalidCatalogNameError:
            raise ServiceInitializationError(
                "Database does not exist. Please ensure PostgreSQL is running "
                "and the database has been created."
            ) from None
        except asyncpg.InvalidPasswordError:
            raise ServiceInitializationError(
                "Invalid database credentials. Check DATABASE_URL."
            ) from None

    async def _init_store(self) -> None:
        if not self.db_pool:
            raise ServiceInitializationError(
                "Database pool must be initialized before the conversation store"
            )
        self.store = ConversationStore(db_pool=self.db_pool)
        await self.store.initialize()

    async def _init_completion_client(self) -> None:
        settings = self.settings
        if not settings.openai_api_key:
            log_event("completion_credential_missing", level=logging.WARNING)

        self.completion_client = CompletionClient(
            CompletionConfig(
                api_key=settings.openai_api_key,
                system_prompt=settings.system_prompt,
                base_url=settings.openai_base_url,
                model=settings.completion_model,
                max_tokens=settings.completion_max_tokens,
                timeout_seconds=settings.completion_timeout_seconds,
            )
        )
        await self.completion_client.initialize()

    def _init_pipeline(self) -> None:
        self.pipeline = ConversationPipeline(
            validator=RequestValidator(require_email=self.settings.require_user_email),
            completion_client=self.completion_client,
            store=self.store,
        )

    def _init_export_job(self) -> None:
        self.export_job = ExportJob(
            store=self.store,
            export_dir=self.settings.export_dir,
            grace_seconds=self.settings.export_grace_seconds,
        )
