"""
UserHub Backend — User ORM Entity
===================================

What:  ORM entity representing the `users` table.
Who:   Created, read, mutated and deleted only by repositories in this package.
       Business logic receives it from repository calls and maps it to a
       UserDto; it never crosses into the api layer.

Table Design:
    - id:         UUID primary key, assigned at creation, never changes
    - name:       Display name
    - email:      Unique (lower-cased by the business layer before storage)
    - created_at: UTC timestamp of creation
    - updated_at: UTC timestamp of the last write (internal)
    - version:    Optimistic-lock counter managed by SQLAlchemy (internal)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from userhub.data_access.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetimes on every backend.

    PostgreSQL keeps the offset; SQLite stores naive text and hands back a
    naive value. Writes are converted to UTC and loaded values are tagged
    with UTC, so a freshly written entity and a re-read one compare equal.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("Naive datetime values are not accepted; use UTC")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class User(Base):
    """
    A user record.

    Query Patterns:
        - Get by id:    primary key lookup
        - Get by email: unique index uq_users_email
        - List:         ORDER BY created_at DESC, id
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=_utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("uq_users_email", "email", unique=True),
        Index("idx_users_created_at", "created_at"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', version={self.version})>"
