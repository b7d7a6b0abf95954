"""Email notifications using the Resend API."""

import asyncio
import html
from typing import Any

import resend
import structlog

from src.marketplace_auth.core.config import Settings
from src.marketplace_auth.core.logging import get_logger

# Shared email styles
_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #7c3aed; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_LINK_STYLE = "color: #7c3aed; word-break: break-all;"
_MUTED_STYLE = "color: #666; font-size: 14px;"


class ResendNotificationSender:
    """NotificationSender backed by Resend.

    When no API key is configured the message is logged instead of sent and
    the call reports success, so local development works without credentials.
    Sends run in a worker thread bounded by ``email_send_timeout_seconds``.
    """

    def __init__(self, settings: Settings, logger: structlog.stdlib.BoundLogger | None = None):
        self.settings = settings
        self.logger = logger or get_logger(__name__)

    async def send_verification(self, email: str, username: str, token: str) -> bool:
        verify_url = f"{self.settings.verification_url}?token={token}"
        return await self._send(
            to=email,
            subject=f"Verify your email - {self.settings.app_name}",
            body=_get_verification_email_html(
                username, verify_url, self.settings.email_verification_expire_hours
            ),
            email_type="verification",
        )

    async def send_password_reset(self, email: str, username: str, token: str) -> bool:
        reset_url = f"{self.settings.password_reset_url}?token={token}"
        return await self._send(
            to=email,
            subject=f"Reset your password - {self.settings.app_name}",
            body=_get_password_reset_email_html(
                username, reset_url, self.settings.password_reset_expire_hours
            ),
            email_type="password_reset",
        )

    async def send_welcome(self, email: str, username: str, role: str) -> bool:
        return await self._send(
            to=email,
            subject=f"Welcome to {self.settings.app_name}!",
            body=_get_welcome_email_html(username, role, self.settings.app_name),
            email_type="welcome",
        )

    async def _send(self, to: str, subject: str, body: str, email_type: str) -> bool:
        if not self.settings.resend_api_key:
            # Dev mode: log instead of sending
            self.logger.warning(
                "RESEND_API_KEY not set - email not sent",
                to=to,
                email_type=email_type,
            )
            return True

        resend.api_key = self.settings.resend_api_key
        params: dict[str, Any] = {
            "from": self.settings.email_from,
            "to": [to],
            "subject": subject,
            "html": body,
        }

        timeout = self.settings.email_send_timeout_seconds
        try:
            await asyncio.wait_for(asyncio.to_thread(resend.Emails.send, params), timeout=timeout)
            self.logger.info("Email sent", to=to, email_type=email_type)
            return True
        except TimeoutError:
            self.logger.error("Email send timed out", to=to, email_type=email_type, timeout=timeout)
            return False
        except Exception as e:
            self.logger.error("Failed to send email", to=to, email_type=email_type, error=str(e))
            return False


def _get_verification_email_html(username: str, verify_url: str, expire_hours: int) -> str:
    """Generate HTML content for verification email."""
    safe_username = html.escape(username)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #7c3aed; margin-bottom: 24px;">Verify your email</h1>
    <p>Hi {safe_username},</p>
    <p>Thanks for joining! Please confirm your email address by clicking below:</p>
    <p style="margin: 32px 0;">
        <a href="{verify_url}" style="{_BUTTON_STYLE}">Verify Email</a>
    </p>
    <p style="{_MUTED_STYLE}">
        Or copy and paste this link into your browser:<br>
        <a href="{verify_url}" style="{_LINK_STYLE}">{verify_url}</a>
    </p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        This link will expire in {expire_hours} hours. If you didn't create an account,
        you can safely ignore this email.
    </p>
</body>
</html>"""


def _get_password_reset_email_html(username: str, reset_url: str, expire_hours: int) -> str:
    """Generate HTML content for password reset email."""
    safe_username = html.escape(username)
    unit = "hour" if expire_hours == 1 else "hours"
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #7c3aed; margin-bottom: 24px;">Reset your password</h1>
    <p>Hi {safe_username},</p>
    <p>We received a request to reset your password. Click below to choose a new one:</p>
    <p style="margin: 32px 0;">
        <a href="{reset_url}" style="{_BUTTON_STYLE}">Reset Password</a>
    </p>
    <p style="{_MUTED_STYLE}">
        Or copy and paste this link into your browser:<br>
        <a href="{reset_url}" style="{_LINK_STYLE}">{reset_url}</a>
    </p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        This link will expire in {expire_hours} {unit}. If you didn't request a reset,
        you can safely ignore this email.
    </p>
</body>
</html>"""


def _get_welcome_email_html(username: str, role: str, app_name: str) -> str:
    """Generate HTML content for welcome email."""
    safe_username = html.escape(username)
    safe_role = html.escape(role)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #7c3aed; margin-bottom: 24px;">Welcome to {app_name}!</h1>
    <p>Hi {safe_username},</p>
    <p>Your email has been verified and your {safe_role} account is ready.</p>
    <p>You can now log in and start using {app_name}.</p>
    <p style="margin-top: 32px;">
        Best regards,<br>
        The {app_name} Team
    </p>
</body>
</html>"""
