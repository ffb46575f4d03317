"""
UserHub Backend — User Route Handlers
=======================================

What:  HTTP endpoints for the user resource.
How:   Extracts path/query/body data, calls the UserService contract, maps
       the result to a response. No storage access happens here.

Route Inventory:
    GET    /api/users/{user_id}   → 200 UserDto | 404 (empty body)
    GET    /api/users             → 200 UserListResponse (+ X-Total-Count)
    POST   /api/users             → 201 UserDto (+ Location)
    PATCH  /api/users/{user_id}   → 200 UserDto | 404 (empty body)
    DELETE /api/users/{user_id}   → 204 | 404 (empty body)

Identifier handling:
    user_id is taken as a plain string and passed through unchanged. The
    data access layer validates it; a malformed value comes back as
    InvalidIdentifierError, answered with 400 by the global handler in main.py.
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from userhub.api.dependencies import get_user_service
from userhub.business import UserService
from userhub.shared.dtos import (
    ErrorResponse,
    UserCreate,
    UserDto,
    UserListResponse,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])

_NOT_FOUND = {"description": "User not found (empty body)"}
_INVALID_ID = {"description": "Malformed user identifier", "model": ErrorResponse}


def _not_found() -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@router.get(
    "/users/{user_id}",
    response_model=UserDto,
    responses={404: _NOT_FOUND, 400: _INVALID_ID},
    summary="Get a single user by ID",
)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """
    Fetch one user.

    Present → 200 with the UserDto. Absent → 404 with no body.
    """
    user = await service.get_user_by_id(user_id)
    if user is None:
        return _not_found()
    return user


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List users with offset pagination",
)
async def list_users(
    response: Response,
    limit: int = Query(default=20, ge=1, le=100, description="Items per page (max 100)"),
    offset: int = Query(default=0, ge=0, description="Number of users to skip"),
    service: UserService = Depends(get_user_service),
) -> UserListResponse:
    result = await service.list_users(limit=limit, offset=offset)
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.post(
    "/users",
    status_code=status.HTTP_201_CREATED,
    response_model=UserDto,
    responses={
        400: {"description": "Business validation failed", "model": ErrorResponse},
        409: {"description": "Email already in use", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: UserCreate,
    response: Response,
    service: UserService = Depends(get_user_service),
) -> UserDto:
    user = await service.create_user(payload)
    response.headers["Location"] = f"/api/users/{user.id}"
    return user


@router.patch(
    "/users/{user_id}",
    response_model=UserDto,
    responses={
        404: _NOT_FOUND,
        400: {"description": "Malformed identifier or invalid fields", "model": ErrorResponse},
        409: {"description": "Email already in use", "model": ErrorResponse},
    },
    summary="Update a user's name and/or email",
)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    user = await service.update_user(user_id, payload)
    if user is None:
        return _not_found()
    return user


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: _NOT_FOUND, 400: _INVALID_ID},
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    deleted = await service.delete_user(user_id)
    if not deleted:
        return _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
