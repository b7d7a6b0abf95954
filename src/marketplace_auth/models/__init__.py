"""Model exports.

Import from here: `from src.marketplace_auth.models import User, PasswordReset`
"""

from src.marketplace_auth.models.base import utc_now
from src.marketplace_auth.models.enums import REGISTRABLE_ROLES, UserRole, UserStatus
from src.marketplace_auth.models.tokens import EmailVerification, PasswordReset
from src.marketplace_auth.models.user import User

__all__ = [
    # Enums
    "REGISTRABLE_ROLES",
    "UserRole",
    "UserStatus",
    # Tables
    "EmailVerification",
    "PasswordReset",
    "User",
    # Helpers
    "utc_now",
]
