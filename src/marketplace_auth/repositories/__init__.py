"""Repository exports."""

from src.marketplace_auth.repositories.base import BaseRepository
from src.marketplace_auth.repositories.ephemeral_token import (
    EmailVerificationRepository,
    EphemeralTokenRepository,
    PasswordResetRepository,
)
from src.marketplace_auth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "EmailVerificationRepository",
    "EphemeralTokenRepository",
    "PasswordResetRepository",
    "UserRepository",
]
