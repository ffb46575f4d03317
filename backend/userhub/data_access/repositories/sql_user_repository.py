"""
UserHub Backend — SQLAlchemy User Repository
==============================================

What:  UserRepository backed by async SQLAlchemy (PostgreSQL in production,
       SQLite in development and tests).
How:   Holds only the session factory it was constructed with. Every
       operation opens its own session through session_scope(), so one
       instance serves all concurrent requests.

Resilience:
    Read operations retry transient connectivity failures (OperationalError,
    InterfaceError) with tenacity: exponential backoff with jitter, bounded
    attempts, each retry logged at WARNING. Writes are never retried.
    A write that loses the optimistic-lock race on `version` (StaleDataError)
    becomes ConflictError.
    Anything still failing is logged and wrapped in DatabaseError so driver
    details never reach the client.

    Flow for a read:
        parse identifier ──▶ [attempt 1] ──fail──▶ sleep ──▶ [attempt 2] ... ──▶ DatabaseError
             │                   │
             ▼                   ▼
    InvalidIdentifierError   entity / None
    (no session opened)
"""

import logging
from typing import Awaitable, Callable, List, Mapping, Optional, TypeVar

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from userhub.data_access.database import session_scope
from userhub.data_access.entities import User
from userhub.data_access.repositories.base import UserRepository
from userhub.shared.exceptions import ConflictError, DatabaseError
from userhub.shared.identifiers import Identifier, new_identifier, parse_identifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (OperationalError, InterfaceError)
UPDATABLE_FIELDS = frozenset({"name", "email"})


class SqlAlchemyUserRepository(UserRepository):
    """
    User persistence over an async SQLAlchemy session factory.

    Args:
        session_factory: Factory from build_session_factory()
        retry_attempts: Total attempts for read queries (1 disables retrying)
        retry_initial_wait: First backoff delay in seconds (also the jitter bound)
        retry_max_wait: Upper bound for a single backoff delay in seconds
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        retry_attempts: int = 3,
        retry_initial_wait: float = 0.2,
        retry_max_wait: float = 2.0,
    ):
        self._session_factory = session_factory
        self._retry_attempts = retry_attempts
        self._retry_initial_wait = retry_initial_wait
        self._retry_max_wait = retry_max_wait

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_by_id(self, user_id: Identifier) -> Optional[User]:
        uid = parse_identifier(user_id)
        return await self._read("get_by_id", lambda session: session.get(User, uid))

    async def get_by_email(self, email: str) -> Optional[User]:
        async def query(session: AsyncSession) -> Optional[User]:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

        return await self._read("get_by_email", query)

    async def list(self, limit: int, offset: int) -> List[User]:
        async def query(session: AsyncSession) -> List[User]:
            result = await session.execute(
                select(User)
                .order_by(User.created_at.desc(), User.id)
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars().all())

        return await self._read("list", query)

    async def count(self) -> int:
        async def query(session: AsyncSession) -> int:
            return await session.scalar(select(func.count()).select_from(User)) or 0

        return await self._read("count", query)

    # ── Writes ────────────────────────────────────────────────────────────

    async def add(self, name: str, email: str) -> User:
        user = User(id=new_identifier(), name=name, email=email)
        try:
            async with session_scope(self._session_factory) as session:
                session.add(user)
                await session.flush()
        except IntegrityError as e:
            raise ConflictError(
                message=f"A user with email '{email}' already exists",
                field="email",
            ) from e
        except SQLAlchemyError as e:
            raise self._wrap("add", e) from e

        logger.info("User created: %s", user.id)
        return user

    async def update(self, user_id: Identifier, changes: Mapping[str, str]) -> Optional[User]:
        uid = parse_identifier(user_id)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        try:
            async with session_scope(self._session_factory) as session:
                user = await session.get(User, uid)
                if user is None:
                    return None
                for field, value in changes.items():
                    setattr(user, field, value)
                await session.flush()
        except IntegrityError as e:
            raise ConflictError(
                message=f"A user with email '{changes.get('email')}' already exists",
                field="email",
            ) from e
        except StaleDataError as e:
            raise self._concurrent_write(uid) from e
        except SQLAlchemyError as e:
            raise self._wrap("update", e) from e

        logger.info("User updated: %s (fields=%s)", uid, sorted(changes))
        return user

    async def delete(self, user_id: Identifier) -> bool:
        uid = parse_identifier(user_id)
        try:
            async with session_scope(self._session_factory) as session:
                user = await session.get(User, uid)
                if user is None:
                    return False
                await session.delete(user)
        except StaleDataError as e:
            raise self._concurrent_write(uid) from e
        except SQLAlchemyError as e:
            raise self._wrap("delete", e) from e

        logger.info("User deleted: %s", uid)
        return True

    async def ping(self) -> bool:
        try:
            async with session_scope(self._session_factory) as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Storage ping failed: %s", str(e))
            return False

    # ── Internals ─────────────────────────────────────────────────────────

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=(
                wait_exponential(multiplier=self._retry_initial_wait, max=self._retry_max_wait)
                + wait_random(0, self._retry_initial_wait)
            ),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _read(
        self,
        operation: str,
        query: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """Run a read-only query in its own session, retrying transient failures."""
        try:
            async for attempt in self._retrying():
                with attempt:
                    async with session_scope(self._session_factory) as session:
                        return await query(session)
        except SQLAlchemyError as e:
            raise self._wrap(operation, e) from e

    @staticmethod
    def _concurrent_write(uid) -> ConflictError:
        logger.warning("Concurrent write lost for user %s", uid)
        return ConflictError(
            message="The user was modified by another request; reload and retry",
            field="version",
            context={"id": str(uid)},
        )

    @staticmethod
    def _wrap(operation: str, error: SQLAlchemyError) -> DatabaseError:
        logger.error("Database error during %s: %s", operation, str(error))
        return DatabaseError(
            context={"operation": operation, "error_type": type(error).__name__},
        )
