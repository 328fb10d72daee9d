"""
Authentication endpoints.

Provides:
- Register (approved investor → account + session token)
- Login (email/password → session token)
- Verify (token → current user, checked against the database)
- Change password
- Logout (client-side; no server-side revocation)
- Current user
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from app.auth.dependencies import (
    Identity,
    get_auth_service,
    get_current_identity,
    get_optional_identity,
    security,
)
from app.auth.service import AuthResult, AuthService
from app.core.errors import MissingFieldsError, UserNotFoundError, ValidationError
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PasswordChangeRequest,
    PublicUser,
    RegisterRequest,
    VerifyRequest,
    VerifyResponse,
    public_user,
)
from app.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(message: str, result: AuthResult, service: AuthService) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=result.token,
        expires_in=int(service.tokens.ttl.total_seconds()),
        user=public_user(result.user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account for an approved investor.

    Requires the approval token issued when the investor application was
    approved.
    """
    result = await service.register(
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        approval_token=data.approval_token,
    )
    return _auth_response("Account created successfully", result, service)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Authenticate user and return a session token."""
    result = await service.login(data.email, data.password)
    return _auth_response("Login successful", result, service)


@router.post("/verify", response_model=VerifyResponse)
async def verify(
    data: VerifyRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Verify a token and return the current user.

    Re-reads the account, so deactivated users are rejected even while
    their token is still within its lifetime.
    """
    if not data.token:
        raise ValidationError("Token is required", error="Missing token")

    user = await service.verify_token(data.token)
    return VerifyResponse(valid=True, user=public_user(user))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: PasswordChangeRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    service: AuthService = Depends(get_auth_service),
):
    """Change the password of the token's owner."""
    token = data.token or (credentials.credentials if credentials else None)
    if not token:
        raise MissingFieldsError("Token, current password and new password are required")

    await service.change_password(token, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    """
    Logout.

    Session tokens cannot be invalidated server-side; the client discards
    its token and it expires naturally.
    """
    if identity:
        logger.info("User %s logged out", identity.user_id)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=PublicUser)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
):
    """Get the signed-in user's account."""
    user = await service.users.find_by_id(identity.user_id)
    if user is None:
        raise UserNotFoundError()
    return public_user(user)
