"""Profile routes for the authenticated user."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.application.services import UserService
from iam.application.value_objects import CurrentUser
from iam.dependencies.user import get_current_user, get_user_service
from iam.presentation.users.models import UpdateUserRequest, UserResponse
from shared_kernel.exceptions import BadRequestError, InternalError, NotFoundError

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current user",
    description="""
Return the profile of the authenticated user.

The user is identified by the access token only.
""",
    responses={
        200: {"description": "Profile returned"},
        401: {"description": "Authentication required"},
        404: {"description": "User no longer exists"},
        500: {"description": "Internal server error"},
    },
)
async def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Get the caller's profile."""
    try:
        user = await service.get_me(current_user)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="user not found",
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get user",
        )

    return UserResponse.from_domain(user)


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Update the current user",
    description="""
Update the profile of the authenticated user. Only the fields present in the
request body are changed.
""",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "Invalid profile data"},
        401: {"description": "Authentication required"},
        404: {"description": "User no longer exists"},
        500: {"description": "Internal server error"},
    },
)
async def update_me(
    request: UpdateUserRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Update the caller's profile."""
    try:
        user = await service.update_me(current_user, name=request.name)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="user not found",
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user",
        )

    return UserResponse.from_domain(user)
