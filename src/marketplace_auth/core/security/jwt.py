"""JWT access/refresh token issuance and validation.

Access and refresh tokens are signed with independent keys and carry a
``type`` discriminator. A token is only accepted by the validator for its
own type, so a refresh token can never be used as an access token even if
the two keys were configured identically.

Keys are modelled as a signing/verification pair so that switching to an
asymmetric algorithm (RS256, ES256) only changes configuration.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any
from uuid import uuid4

from jose import ExpiredSignatureError, JWTError, jwt

from src.marketplace_auth.core.exceptions import TokenError, TokenErrorReason


class TokenType(str, Enum):
    """Token type discriminator carried in the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class SigningKey:
    """Key material for one token type.

    For HMAC algorithms the verification key is the signing secret.
    """

    signing_key: str
    verification_key: str | None = None

    @property
    def verifier(self) -> str:
        return self.verification_key or self.signing_key


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims extracted from a validated token."""

    user_id: int
    email: str
    role: str
    token_type: TokenType
    expires_at: datetime
    jti: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    access_expires_at: datetime


class TokenIssuer:
    """Mints and validates typed, expiring JWTs bound to an account identity."""

    def __init__(
        self,
        access_key: SigningKey,
        refresh_key: SigningKey,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=24),
        refresh_ttl: timedelta = timedelta(days=7),
        issuer: str = "marketplace-auth",
    ):
        self.access_key = access_key
        self.refresh_key = refresh_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.issuer = issuer

    def _key_for(self, token_type: TokenType) -> SigningKey:
        return self.access_key if token_type is TokenType.ACCESS else self.refresh_key

    def _ttl_for(self, token_type: TokenType) -> timedelta:
        return self.access_ttl if token_type is TokenType.ACCESS else self.refresh_ttl

    def _encode(
        self, user_id: int, email: str, role: str, token_type: TokenType
    ) -> tuple[str, datetime]:
        now = datetime.now(UTC)
        expire = now + self._ttl_for(token_type)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "type": token_type.value,
            "iss": self.issuer,
            "iat": now,
            "nbf": now,
            "exp": expire,
            "jti": str(uuid4()),
        }
        token: str = jwt.encode(  # type: ignore[assignment]
            to_encode,
            self._key_for(token_type).signing_key,
            algorithm=self.algorithm,
        )
        # Naive UTC, matching the storage convention
        return token, expire.replace(tzinfo=None)

    def issue_pair(self, user_id: int, email: str, role: str) -> TokenPair:
        """Create an access token and a refresh token for the account."""
        access_token, access_expires_at = self._encode(user_id, email, role, TokenType.ACCESS)
        refresh_token, _ = self._encode(user_id, email, role, TokenType.REFRESH)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=access_expires_at,
        )

    def validate_access(self, token: str) -> TokenClaims:
        return self._validate(token, TokenType.ACCESS)

    def validate_refresh(self, token: str) -> TokenClaims:
        return self._validate(token, TokenType.REFRESH)

    def refresh_access(self, refresh_token: str) -> tuple[str, datetime]:
        """Mint a new access token from a valid refresh token.

        The refresh token is not rotated and stays usable until its own expiry.
        """
        claims = self.validate_refresh(refresh_token)
        return self._encode(claims.user_id, claims.email, claims.role, TokenType.ACCESS)

    def _validate(self, token: str, expected: TokenType) -> TokenClaims:
        try:
            unverified = jwt.get_unverified_claims(token)
        except JWTError as e:
            raise TokenError("Invalid token", TokenErrorReason.INVALID) from e

        if unverified.get("type") != expected.value:
            raise TokenError(
                f"Invalid token type: expected {expected.value}",
                TokenErrorReason.WRONG_TYPE,
            )

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._key_for(expected).verifier,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except ExpiredSignatureError as e:
            raise TokenError(
                "Token has expired", TokenErrorReason.EXPIRED, code="TOKEN_EXPIRED"
            ) from e
        except JWTError as e:
            raise TokenError("Invalid token", TokenErrorReason.INVALID) from e

        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                email=payload["email"],
                role=payload["role"],
                token_type=expected,
                expires_at=datetime.fromtimestamp(payload["exp"], UTC).replace(tzinfo=None),
                jti=payload.get("jti", ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TokenError("Invalid token payload", TokenErrorReason.INVALID) from e
