"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.marketplace_auth.api.dependencies.db import DBSession
from src.marketplace_auth.repositories import (
    EmailVerificationRepository,
    PasswordResetRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_email_verification_repository(session: DBSession) -> EmailVerificationRepository:
    return EmailVerificationRepository(session)


def get_password_reset_repository(session: DBSession) -> PasswordResetRepository:
    return PasswordResetRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
EmailVerificationRepo = Annotated[
    EmailVerificationRepository, Depends(get_email_verification_repository)
]
PasswordResetRepo = Annotated[PasswordResetRepository, Depends(get_password_reset_repository)]
