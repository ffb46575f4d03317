"""
UserHub Backend — Entity → DTO Mapping
========================================

What:  Pure conversion from the User entity to the UserDto transfer shape.
How:   Field-by-field copy of the externally visible fields only. No I/O,
       no clock, no randomness: the same entity always maps to an equal DTO.
"""

from userhub.data_access.entities import User
from userhub.shared.dtos import UserDto


def to_user_dto(user: User) -> UserDto:
    return UserDto(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
    )
