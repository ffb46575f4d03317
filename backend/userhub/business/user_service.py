"""
UserHub Backend — User Service (Business Logic)
=================================================

What:  The user capability: lookup, listing and the minimal CRUD workflow.
Why:   Keeps validation and Entity → DTO conversion out of HTTP handlers and
       out of storage code.
How:   UserService is the abstract contract the api layer depends on.
       DefaultUserService implements it on top of a UserRepository that is
       passed in at construction.
Who:   Built once by the composition root; called by route handlers.

Lookup Flow (GET /api/users/{id}):
    ┌──────────┐    ┌──────────────────┐    ┌──────────────────┐
    │  Route   │───▶│  UserService     │───▶│  UserRepository  │
    │          │◀───│  get_user_by_id  │◀───│  get_by_id       │
    └──────────┘    └──────────────────┘    └──────────────────┘
      UserDto / None     entity → DTO          entity / None

    Absent records stay absent (None); InvalidIdentifierError from the
    repository propagates unchanged.

Design Decision:
    DefaultUserService is stateless apart from its injected repository, so a
    single instance is shared by all concurrent requests.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, Optional

from userhub.business.mappers import to_user_dto
from userhub.data_access.repositories.base import UserRepository
from userhub.shared.dtos import UserCreate, UserDto, UserListResponse, UserUpdate
from userhub.shared.exceptions import ConflictError, ValidationError
from userhub.shared.identifiers import Identifier

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

MAX_PAGE_SIZE = 100


class UserService(ABC):
    """
    Contract for the user capability.

    Implementations:
        - DefaultUserService: repository-backed implementation
    """

    @abstractmethod
    async def get_user_by_id(self, user_id: Identifier) -> Optional[UserDto]:
        """
        Look up one user.

        Returns:
            UserDto when the user exists, None when it does not.

        Raises:
            InvalidIdentifierError: user_id is malformed.
        """
        ...

    @abstractmethod
    async def list_users(self, limit: int = 20, offset: int = 0) -> UserListResponse:
        ...

    @abstractmethod
    async def create_user(self, data: UserCreate) -> UserDto:
        ...

    @abstractmethod
    async def update_user(self, user_id: Identifier, data: UserUpdate) -> Optional[UserDto]:
        ...

    @abstractmethod
    async def delete_user(self, user_id: Identifier) -> bool:
        ...


class DefaultUserService(UserService):
    """
    Repository-backed user service.

    Validation rules (create and update):
        - name: surrounding whitespace stripped; must not be blank
        - email: stripped and lower-cased; must look like local@domain.tld;
          must not belong to another user
    """

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def get_user_by_id(self, user_id: Identifier) -> Optional[UserDto]:
        user = await self._repository.get_by_id(user_id)
        if user is None:
            logger.debug("User %s not found", user_id)
            return None
        return to_user_dto(user)

    async def list_users(self, limit: int = 20, offset: int = 0) -> UserListResponse:
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(
                message=f"limit must be between 1 and {MAX_PAGE_SIZE}",
                field="limit",
            )
        if offset < 0:
            raise ValidationError(message="offset must not be negative", field="offset")

        users = await self._repository.list(limit=limit, offset=offset)
        total = await self._repository.count()
        return UserListResponse(
            items=[to_user_dto(user) for user in users],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def create_user(self, data: UserCreate) -> UserDto:
        name = self._clean_name(data.name)
        email = self._clean_email(data.email)

        if await self._repository.get_by_email(email) is not None:
            raise ConflictError(
                message=f"A user with email '{email}' already exists",
                field="email",
            )

        user = await self._repository.add(name=name, email=email)
        return to_user_dto(user)

    async def update_user(self, user_id: Identifier, data: UserUpdate) -> Optional[UserDto]:
        changes: Dict[str, str] = {}
        if data.name is not None:
            changes["name"] = self._clean_name(data.name)
        if data.email is not None:
            changes["email"] = self._clean_email(data.email)
        if not changes:
            raise ValidationError(message="Provide at least one of: name, email")

        user = await self._repository.update(user_id, changes)
        if user is None:
            return None
        return to_user_dto(user)

    async def delete_user(self, user_id: Identifier) -> bool:
        return await self._repository.delete(user_id)

    # ── Validation Helpers ────────────────────────────────────────────────

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError(message="Name must not be blank", field="name")
        return cleaned

    @staticmethod
    def _clean_email(email: str) -> str:
        cleaned = email.strip().lower()
        if not _EMAIL_PATTERN.fullmatch(cleaned):
            raise ValidationError(
                message=f"'{email}' is not a valid email address",
                field="email",
            )
        return cleaned
