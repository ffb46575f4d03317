"""
UserHub Backend — In-Memory User Repository
=============================================

What:  Dict-backed UserRepository for local development and tests.
How:   Entities live in a process-local dict keyed by UUID. Reads and writes
       hand out copies, so a caller mutating a returned entity never changes
       what is stored. The dict is the storage backend itself; the lifetime
       of the data is the lifetime of the instance.

Selected with STORAGE_BACKEND=memory.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional

from userhub.data_access.entities import User
from userhub.data_access.repositories.base import UserRepository
from userhub.shared.exceptions import ConflictError
from userhub.shared.identifiers import Identifier, new_identifier, parse_identifier

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "email"})


def _copy(user: User) -> User:
    return User(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
        version=user.version,
    )


class InMemoryUserRepository(UserRepository):
    """
    Process-local user store.

    Args:
        users: Optional entities to seed the store with (copied on the way in).
    """

    def __init__(self, users: Optional[Iterable[User]] = None):
        self._users: Dict[uuid.UUID, User] = {}
        for user in users or ():
            self._users[user.id] = _copy(user)

    async def get_by_id(self, user_id: Identifier) -> Optional[User]:
        uid = parse_identifier(user_id)
        user = self._users.get(uid)
        return _copy(user) if user is not None else None

    async def get_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return _copy(user)
        return None

    async def list(self, limit: int, offset: int) -> List[User]:
        ordered = sorted(self._users.values(), key=lambda u: u.id)
        ordered.sort(key=lambda u: u.created_at, reverse=True)
        return [_copy(u) for u in ordered[offset:offset + limit]]

    async def count(self) -> int:
        return len(self._users)

    async def add(self, name: str, email: str) -> User:
        self._ensure_email_free(email)
        now = datetime.now(timezone.utc)
        user = User(
            id=new_identifier(),
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            version=1,
        )
        self._users[user.id] = user
        logger.info("User created: %s", user.id)
        return _copy(user)

    async def update(self, user_id: Identifier, changes: Mapping[str, str]) -> Optional[User]:
        uid = parse_identifier(user_id)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        current = self._users.get(uid)
        if current is None:
            return None
        if "email" in changes:
            self._ensure_email_free(changes["email"], except_id=uid)

        updated = _copy(current)
        for field, value in changes.items():
            setattr(updated, field, value)
        updated.updated_at = datetime.now(timezone.utc)
        updated.version = current.version + 1
        self._users[uid] = updated
        logger.info("User updated: %s (fields=%s)", uid, sorted(changes))
        return _copy(updated)

    async def delete(self, user_id: Identifier) -> bool:
        uid = parse_identifier(user_id)
        if self._users.pop(uid, None) is None:
            return False
        logger.info("User deleted: %s", uid)
        return True

    async def ping(self) -> bool:
        return True

    def _ensure_email_free(self, email: str, except_id: Optional[uuid.UUID] = None) -> None:
        for user in self._users.values():
            if user.email == email and user.id != except_id:
                raise ConflictError(
                    message=f"A user with email '{email}' already exists",
                    field="email",
                )
