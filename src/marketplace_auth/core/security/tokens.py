"""Opaque single-use token generation and hashing."""

import secrets
from hashlib import sha256

# 32 bytes of CSPRNG output, ~43 url-safe characters
TOKEN_NBYTES = 32


def generate_token() -> str:
    """Generate a cryptographically secure url-safe token."""
    return secrets.token_urlsafe(TOKEN_NBYTES)


def hash_token(token: str) -> str:
    """Hash a token using SHA256 for secure storage."""
    return sha256(token.encode()).hexdigest()
