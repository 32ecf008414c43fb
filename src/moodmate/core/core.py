from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from moodmate.config import Config

logger = structlog.get_logger(__name__)


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from moodmate.core.modules.access.service import AccessService  # noqa: PLC0415
    from moodmate.core.modules.auth.service import AuthService  # noqa: PLC0415
    from moodmate.core.modules.journal.service import JournalService  # noqa: PLC0415
    from moodmate.core.modules.mood.service import MoodService  # noqa: PLC0415
    from moodmate.core.modules.session.service import SessionService  # noqa: PLC0415
    from moodmate.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    session: SessionService
    access: AccessService
    auth: AuthService
    journal: JournalService
    mood: MoodService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters: stores first, use cases after, collaborators last
        service_configs = [
            ("user", "moodmate.core.modules.user.service", "UserService"),
            ("session", "moodmate.core.modules.session.service", "SessionService"),
            ("access", "moodmate.core.modules.access.service", "AccessService"),
            ("auth", "moodmate.core.modules.auth.service", "AuthService"),
            ("journal", "moodmate.core.modules.journal.service", "JournalService"),
            ("mood", "moodmate.core.modules.mood.service", "MoodService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services in reverse order; one failing service does not block the rest."""
        for service in reversed(self._services):
            try:
                await service.on_stop()
            except Exception:
                logger.exception("service_stop_failed", service=type(service).__name__)


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        if mongo_client is None:
            mongo_client = AsyncMongoClient(config.database_url, tz_aware=True)
        self.mongo_client = mongo_client
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()
        logger.info("core_started")

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        logger.info("core_stopping")
        await self.services.stop_all()
        await self.mongo_client.aclose()
        logger.info("core_stopped")
