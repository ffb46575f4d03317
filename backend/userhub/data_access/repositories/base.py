"""
UserHub Backend — Abstract User Repository
============================================

What:  The contract business logic uses to reach user storage.
How:   Concrete variants inherit from UserRepository and implement every
       operation. The composition root picks one at startup.

Implementations:
    - SqlAlchemyUserRepository: async SQLAlchemy (PostgreSQL / SQLite)
    - InMemoryUserRepository:   dict-backed, for development and tests

Contract shared by all implementations:
    - Operations that take an identifier parse it first and raise
      InvalidIdentifierError before touching storage.
    - A missing record is reported as None / False, never as an exception.
    - A duplicate email raises ConflictError.
    - Storage failures surface as DatabaseError.
"""

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional

from userhub.data_access.entities import User
from userhub.shared.identifiers import Identifier


class UserRepository(ABC):
    """Persistence operations for User entities."""

    @abstractmethod
    async def get_by_id(self, user_id: Identifier) -> Optional[User]:
        """
        Fetch one user by identifier.

        Returns:
            The matching User, or None when no record matches.

        Raises:
            InvalidIdentifierError: user_id is malformed (no storage access happens).
            DatabaseError: storage failed after read retries.
        """
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Fetch one user by exact (already normalized) email, or None."""
        ...

    @abstractmethod
    async def list(self, limit: int, offset: int) -> List[User]:
        """Newest users first; ties ordered by id for stable pages."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def add(self, name: str, email: str) -> User:
        """
        Create a user and assign it a fresh identifier.

        Raises:
            ConflictError: email already in use.
        """
        ...

    @abstractmethod
    async def update(self, user_id: Identifier, changes: Mapping[str, str]) -> Optional[User]:
        """
        Apply field changes ("name", "email") to an existing user.

        Returns:
            The updated User, or None when no record matches.

        Raises:
            InvalidIdentifierError: user_id is malformed.
            ConflictError: new email already in use by another user.
        """
        ...

    @abstractmethod
    async def delete(self, user_id: Identifier) -> bool:
        """Delete a user. Returns False when no record matches."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight connectivity probe. Never raises."""
        ...
