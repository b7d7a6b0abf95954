"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Marketplace account role."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    PRODUCER = "producer"
    ARTIST = "artist"
    FAN = "fan"
    # Legacy role: may exist on stored accounts but cannot be chosen at registration
    BUYER = "buyer"


REGISTRABLE_ROLES: frozenset[UserRole] = frozenset(
    {
        UserRole.ADMIN,
        UserRole.MODERATOR,
        UserRole.PRODUCER,
        UserRole.ARTIST,
        UserRole.FAN,
    }
)


class UserStatus(str, Enum):
    """Account status. Only active accounts may log in."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
