"""Fire-and-forget notification dispatch.

Callers hand over a notification type and its context and carry on; a
failed or unreachable push channel is logged and never propagates.
"""

import structlog

from notifications.channel import get_push_channel
from notifications.templates import get_template

logger = structlog.get_logger(__name__)


def notify(notification_type: str, context: dict) -> dict | None:
    """Render ``notification_type`` with ``context`` and push it.

    Returns the channel's result dict, or None when dispatch raised.
    """
    try:
        content = get_template(notification_type).render(context)
        result = get_push_channel().send(
            title=content["title"],
            body=content["body"],
            data=content.get("data"),
        )
    except Exception as exc:
        logger.error(
            "Notification dispatch failed",
            notification_type=notification_type,
            error=str(exc),
        )
        return None

    if result.get("status") != "sent":
        logger.warning(
            "Notification was not delivered",
            notification_type=notification_type,
            error=result.get("error"),
        )
    return result
