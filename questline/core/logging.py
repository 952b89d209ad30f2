"""Logfire setup and the small logging helpers the engine uses.

Modules log through ``logging.getLogger(__name__)``; Logfire picks the records
up once ``configure_logfire`` has run in the host application. Reducers wrap
their work in ``span`` so one player action shows up as one trace.
"""

import logging

import logfire

from questline import __version__
from questline.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire; nothing is sent without a token."""
    logfire.configure(
        token=settings.logfire_token,
        service_name="questline",
        service_version=__version__,
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Trace span named after the reducer, e.g. ``quest_service.toggle_quest_task``."""
    return logfire.span(name, **attributes)


def log_user_event(
    logger: logging.Logger,
    message: str,
    *,
    user_id: str,
    level: int = logging.INFO,
    **fields: object,
) -> None:
    """Log a per-player event from a multi-user pass such as the habit sync."""
    logger.log(level, message, extra={"user_id": user_id, **fields})
