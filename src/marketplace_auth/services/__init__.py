from src.marketplace_auth.services.account_service import AccountDraft, AccountService
from src.marketplace_auth.services.auth_service import AuthService
from src.marketplace_auth.services.ephemeral_token_service import EphemeralTokenService, TokenKind
from src.marketplace_auth.services.user_service import UserService

__all__ = [
    "AccountDraft",
    "AccountService",
    "AuthService",
    "EphemeralTokenService",
    "TokenKind",
    "UserService",
]
