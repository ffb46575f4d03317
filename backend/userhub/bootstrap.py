"""
UserHub Backend — Composition Root
====================================

What:  Builds the concrete repository and services from Settings.
How:   build_services() picks the repository variant named by
       settings.storage_backend, constructs the business services on top of
       it, and returns them with async startup/shutdown hooks for the
       storage resources they own.
Who:   Called once by create_app(). This is the only module, apart from
       main.py, that imports every layer.

Wiring:
    storage_backend=sql                      storage_backend=memory
    ───────────────────                      ──────────────────────
    build_engine(database_url)               InMemoryUserRepository()
      └─ build_session_factory(engine)
           └─ SqlAlchemyUserRepository
                    │                                  │
                    └──────────────┬───────────────────┘
                                   ▼
              DefaultUserService(repo), HealthService(repo)
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from userhub.business import DefaultUserService, HealthService, UserService
from userhub.config import Settings
from userhub.data_access.database import (
    build_engine,
    build_session_factory,
    create_schema,
    dispose_engine,
)
from userhub.data_access.repositories import (
    InMemoryUserRepository,
    SqlAlchemyUserRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

LifecycleHook = Callable[[], Awaitable[None]]


async def _noop() -> None:
    return None


@dataclass(frozen=True)
class Services:
    """Everything the api layer needs, plus storage lifecycle hooks."""
    user_service: UserService
    health_service: HealthService
    startup: LifecycleHook = _noop
    shutdown: LifecycleHook = _noop


def services_for_repository(repository: UserRepository) -> Services:
    """Wire the business services on top of an already-built repository."""
    return Services(
        user_service=DefaultUserService(repository),
        health_service=HealthService(repository),
    )


def build_services(settings: Settings) -> Services:
    """
    Compose the application from configuration.

    Returns:
        Services with startup (optional schema creation) and shutdown
        (engine disposal) hooks for the SQL variant; no-op hooks otherwise.
    """
    if settings.storage_backend == "memory":
        logger.info("Storage backend: in-memory")
        return services_for_repository(InMemoryUserRepository())

    engine = build_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        echo=settings.log_level == "DEBUG",
    )
    repository = SqlAlchemyUserRepository(
        build_session_factory(engine),
        retry_attempts=settings.db_retry_attempts,
        retry_initial_wait=settings.db_retry_initial_wait,
        retry_max_wait=settings.db_retry_max_wait,
    )

    async def startup() -> None:
        if settings.db_auto_create_schema:
            await create_schema(engine)

    async def shutdown() -> None:
        await dispose_engine(engine)

    logger.info("Storage backend: sql")
    base = services_for_repository(repository)
    return Services(
        user_service=base.user_service,
        health_service=base.health_service,
        startup=startup,
        shutdown=shutdown,
    )
