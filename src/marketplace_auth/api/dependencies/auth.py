"""Authentication and authorization dependencies."""

from typing import Annotated

from fastapi import Depends, Header

from src.marketplace_auth.api.dependencies.services import AccountServiceDep, Issuer
from src.marketplace_auth.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    TokenError,
    TokenErrorReason,
)
from src.marketplace_auth.core.logging import bind_user_context
from src.marketplace_auth.core.security import TokenClaims
from src.marketplace_auth.models import User, UserRole


def get_bearer_claims(
    issuer: Issuer,
    authorization: Annotated[str | None, Header()] = None,
) -> TokenClaims:
    """Validate the ``Authorization: Bearer`` access token and return its claims."""
    if not authorization or not authorization.startswith("Bearer "):
        raise TokenError("Missing or invalid authorization header", TokenErrorReason.INVALID)
    return issuer.validate_access(authorization[7:])


BearerClaims = Annotated[TokenClaims, Depends(get_bearer_claims)]


async def get_current_account(claims: BearerClaims, accounts: AccountServiceDep) -> User:
    """Resolve the bearer token to an existing, active account."""
    try:
        user = await accounts.find_by_id(claims.user_id)
    except NotFoundError as e:
        raise TokenError("User not found or inactive", TokenErrorReason.INVALID) from e
    if not user.is_active:
        raise TokenError("User not found or inactive", TokenErrorReason.INVALID)

    bind_user_context(
        user.id,  # type: ignore[arg-type]
        user.role,
        token_id=claims.jti,
        email=user.email,
    )
    return user


CurrentAccount = Annotated[User, Depends(get_current_account)]


async def require_admin(user: CurrentAccount) -> User:
    if user.role != UserRole.ADMIN.value:
        raise AuthorizationError("Admin role required")
    return user


AdminAccount = Annotated[User, Depends(require_admin)]
