"""Authentication routes.

All routes here are public. They are the only entry points that resolve a
tenant without an access token, either from a tenant slug or from an email
verification token.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.application.services import AuthService
from iam.dependencies.auth import get_auth_service
from iam.presentation.auth.models import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    VerifyEmailRequest,
)
from shared_kernel.exceptions import (
    BadRequestError,
    ConflictError,
    InternalError,
    UnauthorizedError,
)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description="""
Register a new member of a tenant and return a token pair.

If no tenant has the given slug yet, it is created and named after the slug.
The same email may be registered independently in different tenants.
""",
    responses={
        201: {"description": "User registered"},
        400: {"description": "Missing or invalid input"},
        409: {"description": "Email already registered in this tenant"},
        500: {"description": "Internal server error"},
    },
)
async def register(
    request: RegisterRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Register a user."""
    try:
        result = await service.register(
            email=request.email,
            password=request.password,
            tenant_slug=request.tenant_slug,
            name=request.name,
        )
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message,
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user",
        )

    return AuthResponse.from_result(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    description="""
Authenticate with email, password and tenant slug.

An unknown tenant, an unknown email and a wrong password produce the same
response.
""",
    responses={
        200: {"description": "Logged in"},
        400: {"description": "Missing input"},
        401: {"description": "Invalid credentials"},
        500: {"description": "Internal server error"},
    },
)
async def login(
    request: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Log in."""
    try:
        result = await service.login(
            email=request.email,
            password=request.password,
            tenant_slug=request.tenant_slug,
        )
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log in",
        )

    return AuthResponse.from_result(result)


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    summary="Verify an email address",
    description="Consume a verification token and mark the user's email verified.",
    responses={
        200: {"description": "Email verified"},
        400: {"description": "Unknown or expired token"},
        500: {"description": "Internal server error"},
    },
)
async def verify_email(
    request: VerifyEmailRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Verify an email address."""
    try:
        await service.verify_email(request.token)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify email",
        )

    return MessageResponse(message="Email verified successfully")


@router.post(
    "/refresh",
    response_model=AuthResponse,
    summary="Refresh tokens",
    description="""
Exchange a refresh token for a new token pair. Access tokens are rejected.
""",
    responses={
        200: {"description": "Tokens refreshed"},
        400: {"description": "Missing refresh token"},
        401: {"description": "Invalid refresh token or user no longer exists"},
        500: {"description": "Internal server error"},
    },
)
async def refresh(
    request: RefreshTokenRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Refresh a token pair."""
    try:
        result = await service.refresh(request.refresh_token)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InternalError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to refresh tokens",
        )

    return AuthResponse.from_result(result)
