# notifications/dispatch.py

"""
NOTIFICATION DISPATCH

Events are sent only after the surrounding transaction commits, and a
failing notifier never affects the ledger: errors are logged, not raised.
"""

from __future__ import annotations

import logging
from functools import partial

from django.db import transaction

from notifications.backends import get_notifier

logger = logging.getLogger(__name__)


def send_now(event: dict) -> bool:
    try:
        get_notifier().notify(event)
    except Exception:
        logger.exception(
            "Notification delivery failed",
            extra={"event_type": event.get("type")},
        )
        return False
    return True


def notify_after_commit(event: dict) -> None:
    transaction.on_commit(partial(send_now, event))
