"""Logging configuration using structlog.

Every request carries a correlation ID. Authenticated requests additionally
carry the account ID, its role and the ``jti`` of the access token that was
presented, so that a single token's activity can be traced across log lines.
"""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Library loggers that are chatty at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "urllib3", "uvicorn.access")


def setup_logging(debug: bool = False) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: If True, use colored console output. If False, use JSON for production.
    """
    # Set up standard library logging
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        # Human-readable colored output for development
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        # JSON output; exceptions become structured tracebacks
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Set library log levels to reduce noise
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Bind the correlation ID for the current request, if there is one."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(
    user_id: int,
    role: str,
    token_id: str | None = None,
    email: str | None = None,
) -> None:
    """Bind the authenticated account to all subsequent log calls.

    Args:
        user_id: The authenticated account's ID.
        role: The role carried by the access token.
        token_id: The access token's ``jti`` claim.
        email: Account email. Only logged if settings.log_user_emails is True.
    """
    from src.marketplace_auth.core.config import get_settings

    bind_contextvars(user_id=user_id, role=role)
    if token_id:
        bind_contextvars(token_id=token_id)
    # Emails are personal data (GDPR)
    if email and get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    clear_contextvars()
