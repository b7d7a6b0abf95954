"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, PasswordResetFactory, ...
"""

from tests.factories.base import BaseFactory, utc_now
from tests.factories.tokens import (
    EmailVerificationFactory,
    PasswordResetFactory,
    generate_token_hash,
)
from tests.factories.user import DEFAULT_TEST_PASSWORD, TEST_HASHER, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "utc_now",
    # User
    "DEFAULT_TEST_PASSWORD",
    "TEST_HASHER",
    "UserFactory",
    # Tokens
    "EmailVerificationFactory",
    "PasswordResetFactory",
    "generate_token_hash",
]
