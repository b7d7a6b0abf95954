"""Security utilities - password hashing, JWT tokens, single-use tokens.

Re-exports all security-related names for convenience.
"""

from src.marketplace_auth.core.security.jwt import (
    SigningKey,
    TokenClaims,
    TokenIssuer,
    TokenPair,
    TokenType,
)
from src.marketplace_auth.core.security.password import (
    COMMON_PASSWORDS,
    DEFAULT_PASSWORD_POLICY,
    PasswordHasher,
    PasswordPolicy,
    PasswordRule,
)
from src.marketplace_auth.core.security.tokens import generate_token, hash_token

__all__ = [
    # JWT
    "SigningKey",
    "TokenClaims",
    "TokenIssuer",
    "TokenPair",
    "TokenType",
    # Passwords
    "COMMON_PASSWORDS",
    "DEFAULT_PASSWORD_POLICY",
    "PasswordHasher",
    "PasswordPolicy",
    "PasswordRule",
    # Single-use tokens
    "generate_token",
    "hash_token",
]
