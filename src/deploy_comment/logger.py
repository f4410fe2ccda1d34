import logging
from typing import List, Optional

import notifiers.logging

from deploy_comment import config

NOTIFICATION_FORMAT = "deploy-comment %(levelname)s: %(message)s"


def get_log_handlers(
    logger: logging.Logger,
    token: Optional[str] = None,
    chat_id: Optional[str] = None,
) -> List[logging.Handler]:
    """Forward warnings and errors of ``logger`` to Telegram, if configured."""
    token = token or config.TELEGRAM_TOKEN
    chat_id = chat_id or config.TELEGRAM_CHAT_ID
    if token is None or chat_id is None:
        return []
    handler = notifiers.logging.NotificationHandler(
        "telegram",
        defaults={
            "token": token,
            "chat_id": chat_id,
        },
    )
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter(NOTIFICATION_FORMAT))
    logger.addHandler(handler)
    return [handler]
