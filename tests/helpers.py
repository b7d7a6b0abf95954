"""Test helpers for common data creation patterns."""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace_auth.core.security import TokenIssuer
from src.marketplace_auth.models import User
from tests.factories import UserFactory


@dataclass
class SentNotification:
    kind: str
    email: str
    username: str
    token: str | None = None
    role: str | None = None


@dataclass
class RecordingNotificationSender:
    """NotificationSender that records messages instead of delivering them.

    Set ``fail`` to simulate a transport failure; failed sends are still recorded.
    """

    fail: bool = False
    sent: list[SentNotification] = field(default_factory=list)

    async def send_verification(self, email: str, username: str, token: str) -> bool:
        self.sent.append(SentNotification("verification", email, username, token=token))
        return not self.fail

    async def send_password_reset(self, email: str, username: str, token: str) -> bool:
        self.sent.append(SentNotification("password_reset", email, username, token=token))
        return not self.fail

    async def send_welcome(self, email: str, username: str, role: str) -> bool:
        self.sent.append(SentNotification("welcome", email, username, role=role))
        return not self.fail

    def of_kind(self, kind: str) -> list[SentNotification]:
        return [n for n in self.sent if n.kind == kind]

    def last_token(self, kind: str) -> str:
        """Plaintext token from the most recent notification of this kind."""
        token = self.of_kind(kind)[-1].token
        assert token is not None
        return token


async def create_user(session: AsyncSession, **user_kwargs) -> User:
    """Persist a user built by UserFactory (verified and active unless overridden)."""
    user = UserFactory.build(**user_kwargs)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def auth_headers(issuer: TokenIssuer, user: User) -> dict[str, str]:
    """Bearer header carrying a fresh access token for ``user``."""
    pair = issuer.issue_pair(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {pair.access_token}"}
