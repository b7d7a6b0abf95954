"""Password strength policy and Argon2 password hashing."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

import argon2

from src.marketplace_auth.core.exceptions import WeakPasswordError

COMMON_PASSWORDS: Final[frozenset[str]] = frozenset(
    {
        "password",
        "123456",
        "123456789",
        "qwerty",
        "abc123",
        "password123",
        "admin",
        "letmein",
        "welcome",
        "monkey",
        "1234567890",
        "password1",
        "qwerty123",
        "dragon",
        "master",
        "hello",
        "freedom",
        "whatever",
        "qazwsx",
        "trustno1",
    }
)

_UPPER: Final[re.Pattern[str]] = re.compile(r"[A-Z]")
_LOWER: Final[re.Pattern[str]] = re.compile(r"[a-z]")
_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9]")
_SPECIAL: Final[re.Pattern[str]] = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


class PasswordRule(str, Enum):
    """Individual password policy rules, reported on rejection."""

    COMMON = "common"
    MIN_LENGTH = "min_length"
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    DIGIT = "digit"
    SPECIAL = "special"


@dataclass(frozen=True)
class PasswordPolicy:
    """Password strength requirements.

    The denylist is compared case-insensitively against the whole password.
    """

    min_length: int = 8
    require_upper: bool = True
    require_lower: bool = True
    require_digit: bool = True
    require_special: bool = False
    denylist: frozenset[str] = field(default=COMMON_PASSWORDS)

    def check(self, password: str) -> None:
        """Raise WeakPasswordError for the first rule the password violates."""
        if password.lower() in self.denylist:
            raise WeakPasswordError(
                "Password is too common, please choose a stronger password",
                rule=PasswordRule.COMMON,
            )
        if len(password) < self.min_length:
            raise WeakPasswordError(
                f"Password must be at least {self.min_length} characters long",
                rule=PasswordRule.MIN_LENGTH,
            )
        if self.require_upper and not _UPPER.search(password):
            raise WeakPasswordError(
                "Password must contain at least one uppercase letter",
                rule=PasswordRule.UPPERCASE,
            )
        if self.require_lower and not _LOWER.search(password):
            raise WeakPasswordError(
                "Password must contain at least one lowercase letter",
                rule=PasswordRule.LOWERCASE,
            )
        if self.require_digit and not _DIGIT.search(password):
            raise WeakPasswordError(
                "Password must contain at least one digit",
                rule=PasswordRule.DIGIT,
            )
        if self.require_special and not _SPECIAL.search(password):
            raise WeakPasswordError(
                "Password must contain at least one special character",
                rule=PasswordRule.SPECIAL,
            )


DEFAULT_PASSWORD_POLICY: Final[PasswordPolicy] = PasswordPolicy()


class PasswordHasher:
    """Validates passwords against a policy and hashes them with Argon2id.

    Cost parameters are fixed at construction.
    """

    def __init__(
        self,
        policy: PasswordPolicy = DEFAULT_PASSWORD_POLICY,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 1,
    ):
        self.policy = policy
        self._hasher = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        # Verified against when an account does not exist, so that login
        # timing does not reveal which emails are registered.
        self.dummy_hash = self._hasher.hash("dummy-password-for-timing")

    def hash(self, password: str) -> str:
        """Hash password using Argon2id. Raises WeakPasswordError on policy failure."""
        self.policy.check(password)
        return self._hasher.hash(password)

    def verify(self, hashed: str, password: str) -> bool:
        """Verify password against hash. Returns False on any mismatch or bad hash."""
        try:
            return self._hasher.verify(hashed, password)
        except argon2.exceptions.VerificationError:
            return False
        except argon2.exceptions.InvalidHashError:
            return False
