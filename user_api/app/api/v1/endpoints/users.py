"""
User endpoints for API v1.

Five routes mapping one to one onto ``UserService`` operations.  Domain
errors raised by the service are translated into ``ErrorResponse``
bodies by the exception handlers registered in ``main.create_app``.
Pagination defaults and bounds are applied here, never in the service.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from user_api.app.api.deps import get_user_service
from user_api.app.core.config import settings
from user_api.app.schemas.user import (
    ErrorResponse,
    UserCreate,
    UserList,
    UserRead,
    UserUpdate,
)
from user_api.app.services.user_service import UserService
from user_api.app.stores.user_store import SQLITE_MAX_INTEGER


router = APIRouter()

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
_CONFLICT = {status.HTTP_409_CONFLICT: {"model": ErrorResponse}}
_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


@router.get("", response_model=UserList)
async def list_users(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0, le=SQLITE_MAX_INTEGER),
    service: UserService = Depends(get_user_service),
) -> UserList:
    """Return a page of users ordered by id together with the total count."""
    users, total = await service.list_users(limit, offset)
    return UserList(
        users=[UserRead.model_validate(user) for user in users],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD_REQUEST, **_CONFLICT},
)
async def create_user(
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Create a user.  Answers 409 if the email is already taken."""
    user = await service.create_user(payload.name, payload.email)
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead, responses=_NOT_FOUND)
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    user = await service.get_user_by_id(user_id)
    return UserRead.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserRead,
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_CONFLICT},
)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Update a user's name and/or email.

    Fields omitted from the body keep their current value.
    """
    user = await service.update_user(user_id, name=payload.name, email=payload.email)
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_NOT_FOUND,
)
async def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> Response:
    await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
