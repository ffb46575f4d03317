from userhub.data_access.repositories.base import UserRepository
from userhub.data_access.repositories.memory_user_repository import InMemoryUserRepository
from userhub.data_access.repositories.sql_user_repository import SqlAlchemyUserRepository

__all__ = [
    "UserRepository",
    "InMemoryUserRepository",
    "SqlAlchemyUserRepository",
]
