"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from starlette.requests import Request

from src.marketplace_auth.api.dependencies import AuthServiceDep, CurrentAccount
from src.marketplace_auth.core.exceptions import ValidationError
from src.marketplace_auth.core.rate_limit import limiter
from src.marketplace_auth.models import UserRole
from src.marketplace_auth.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    RoleInfo,
    VerifyEmailResponse,
)
from src.marketplace_auth.schemas.user import ProfileUpdate, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])

FORGOT_PASSWORD_MESSAGE = "If the email exists, a password reset link has been sent"
RESEND_VERIFICATION_MESSAGE = (
    "If the email exists and is not yet verified, a new verification link has been sent"
)

_ROLE_CATALOGUE = [
    RoleInfo(
        value=UserRole.PRODUCER.value,
        label="Producer",
        description="Music creators who sell beats",
    ),
    RoleInfo(
        value=UserRole.ARTIST.value,
        label="Artist",
        description="Music creators who buy beats",
    ),
    RoleInfo(
        value=UserRole.FAN.value,
        label="Fan",
        description="General users who participate in auctions",
    ),
    RoleInfo(value=UserRole.MODERATOR.value, label="Moderator", description="Platform moderators"),
    RoleInfo(value=UserRole.ADMIN.value, label="Admin", description="Platform administrators"),
]

_AUTH_RESPONSE_EXAMPLE = {
    "user": {
        "id": 1,
        "email": "alice@example.com",
        "username": "alice",
        "first_name": "Alice",
        "last_name": "Smith",
        "role": "fan",
        "status": "active",
        "email_verified": False,
        "last_login_at": None,
        "created_at": "2026-01-01T12:00:00",
        "updated_at": "2026-01-01T12:00:00",
    },
    "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
    "refresh_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
    "expires_at": "2026-01-02T12:00:00",
    "token_type": "bearer",
}


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {
            "description": "Account created, verification email sent",
            "content": {"application/json": {"example": _AUTH_RESPONSE_EXAMPLE}},
        },
        400: {"description": "Invalid role or weak password"},
        409: {"description": "Email or username already taken"},
    },
)
@limiter.limit("5/minute")
async def register(
    request: Request, register_data: RegisterRequest, service: AuthServiceDep
) -> AuthResponse:
    """Register a new account.

    The account starts unverified; login is refused until the emailed
    verification link is used. Tokens are issued immediately.
    """
    return await service.register(register_data)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {"application/json": {"example": _AUTH_RESPONSE_EXAMPLE}},
        },
        401: {"description": "Invalid credentials"},
        403: {"description": "Email not verified or account inactive"},
    },
)
@limiter.limit("5/minute")
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> AuthResponse:
    """Authenticate with email and password and return a token pair."""
    return await service.login(login_data.email, login_data.password)


@router.get(
    "/verify",
    response_model=VerifyEmailResponse,
    responses={400: {"description": "Missing, invalid, used or expired token"}},
)
async def verify_email(
    service: AuthServiceDep,
    token: Annotated[str | None, Query(max_length=128)] = None,
) -> VerifyEmailResponse:
    """Verify email address using the token from the verification email."""
    if not token:
        raise ValidationError("Verification token is required", code="MISSING_TOKEN")
    user = await service.verify_email(token)
    return VerifyEmailResponse(message="Email verified successfully", user=user)


@router.post("/resend-verification", response_model=MessageResponse)
@limiter.limit("3/minute")
async def resend_verification(
    request: Request, data: ResendVerificationRequest, service: AuthServiceDep
) -> MessageResponse:
    """Send a new verification link.

    Always returns the same message so the response does not reveal whether
    the email is registered.
    """
    await service.resend_verification(data.email)
    return MessageResponse(message=RESEND_VERIFICATION_MESSAGE)


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    responses={500: {"description": "Reset email could not be sent"}},
)
@limiter.limit("3/minute")
async def forgot_password(
    request: Request, data: ForgotPasswordRequest, service: AuthServiceDep
) -> MessageResponse:
    """Email a password reset link. Unknown emails get the same response."""
    await service.forgot_password(data.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid, used or expired token, or weak password"}},
)
@limiter.limit("5/minute")
async def reset_password(
    request: Request, data: ResetPasswordRequest, service: AuthServiceDep
) -> MessageResponse:
    await service.reset_password(data.token, data.new_password)
    return MessageResponse(message="Password has been reset successfully")


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={
        200: {
            "description": "New access token; the refresh token is returned unchanged",
            "content": {
                "application/json": {
                    "example": {
                        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "refresh_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "expires_at": "2026-01-02T12:00:00",
                        "token_type": "bearer",
                    }
                }
            },
        },
        401: {"description": "Invalid, expired or wrong-type refresh token"},
        403: {"description": "Account inactive"},
    },
)
@limiter.limit("10/minute")
async def refresh(
    request: Request, refresh_data: RefreshRequest, service: AuthServiceDep
) -> RefreshResponse:
    return await service.refresh_token(refresh_data.refresh_token)


@router.get("/profile", response_model=UserRead)
async def get_profile(user: CurrentAccount) -> UserRead:
    """Get the authenticated account."""
    return UserRead.model_validate(user)


@router.put(
    "/profile",
    response_model=UserRead,
    responses={409: {"description": "Email or username already taken"}},
)
async def update_profile(
    data: ProfileUpdate, user: CurrentAccount, service: AuthServiceDep
) -> UserRead:
    """Update email, username or name of the authenticated account."""
    updated = await service.update_profile(user.id, data)  # type: ignore[arg-type]
    return UserRead.model_validate(updated)


@router.post("/logout", response_model=MessageResponse)
async def logout() -> MessageResponse:
    """Tokens are stateless; clients discard them to log out."""
    return MessageResponse(message="Logged out successfully")


@router.get("/roles", response_model=list[RoleInfo])
async def list_roles() -> list[RoleInfo]:
    """Roles that can be chosen at registration."""
    return _ROLE_CATALOGUE
