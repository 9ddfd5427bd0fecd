# notifications/backends.py

"""
NOTIFIER BACKENDS

The ledger emits business events (supplier payment, purchase recorded);
delivering them (WhatsApp, SMS, email) belongs to an outside collaborator.

A backend is any class with notify(event: dict). The active backend is
settings.LEDGER_NOTIFIER (dotted path), default LoggingNotifier.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

DEFAULT_NOTIFIER = "notifications.backends.LoggingNotifier"


class BaseNotifier:
    def __init__(self, *, recipient: str = ""):
        self.recipient = recipient

    def notify(self, event: dict) -> None:
        raise NotImplementedError


class LoggingNotifier(BaseNotifier):
    """Writes events to the log. Used in development and tests."""

    def notify(self, event: dict) -> None:
        logger.info(
            "Notification: %s",
            event.get("type", "EVENT"),
            extra={"event": event, "recipient": self.recipient},
        )


class MemoryNotifier(BaseNotifier):
    """Keeps events in a class-level outbox (test helper backend)."""

    outbox: list[dict] = []

    def notify(self, event: dict) -> None:
        type(self).outbox.append({**event, "recipient": self.recipient})


def get_notifier() -> BaseNotifier:
    path = getattr(settings, "LEDGER_NOTIFIER", "") or DEFAULT_NOTIFIER
    recipient = getattr(settings, "LEDGER_NOTIFY_RECIPIENT", "") or ""
    return import_string(path)(recipient=recipient)
