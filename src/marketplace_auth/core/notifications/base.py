"""Notification sender contract used by the auth services."""

from typing import Protocol


class NotificationSender(Protocol):
    """Delivers account notifications out-of-band.

    Each method returns True when the message was delivered (or logged in
    test mode) and False on any delivery failure. Implementations must not
    raise for transport errors.
    """

    async def send_verification(self, email: str, username: str, token: str) -> bool: ...

    async def send_password_reset(self, email: str, username: str, token: str) -> bool: ...

    async def send_welcome(self, email: str, username: str, role: str) -> bool: ...
