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
from src.marketplace_auth.schemas.user import (
    AccountCreate,
    AccountPatch,
    ProfileUpdate,
    UserList,
    UserRead,
)

__all__ = [
    # Auth
    "AuthResponse",
    "ForgotPasswordRequest",
    "LoginRequest",
    "MessageResponse",
    "RefreshRequest",
    "RefreshResponse",
    "RegisterRequest",
    "ResendVerificationRequest",
    "ResetPasswordRequest",
    "RoleInfo",
    "VerifyEmailResponse",
    # User
    "AccountCreate",
    "AccountPatch",
    "ProfileUpdate",
    "UserList",
    "UserRead",
]
