"""FastAPI dependency injection definitions."""

from src.marketplace_auth.api.dependencies.auth import (
    AdminAccount,
    BearerClaims,
    CurrentAccount,
    get_bearer_claims,
    get_current_account,
    require_admin,
)
from src.marketplace_auth.api.dependencies.db import DBSession, get_db_session
from src.marketplace_auth.api.dependencies.repositories import (
    EmailVerificationRepo,
    PasswordResetRepo,
    UserRepo,
)
from src.marketplace_auth.api.dependencies.services import (
    AccountServiceDep,
    AuthServiceDep,
    EphemeralTokenServiceDep,
    Hasher,
    Issuer,
    Notifier,
    UserServiceDep,
    get_notification_sender,
    get_password_hasher,
    get_token_issuer,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "AdminAccount",
    "BearerClaims",
    "CurrentAccount",
    "get_bearer_claims",
    "get_current_account",
    "require_admin",
    # Repositories
    "EmailVerificationRepo",
    "PasswordResetRepo",
    "UserRepo",
    # Services
    "AccountServiceDep",
    "AuthServiceDep",
    "EphemeralTokenServiceDep",
    "Hasher",
    "Issuer",
    "Notifier",
    "UserServiceDep",
    "get_notification_sender",
    "get_password_hasher",
    "get_token_issuer",
]
