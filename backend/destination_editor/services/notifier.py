"""
User notification collaborator.

The form reports submission outcomes through a ``Notifier``; the page layer
decides how to show them.
"""

import logging
from collections import deque
from typing import Protocol

from destination_editor.schemas.form_state import Notification

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Receives user-visible success and error messages."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class NotificationLog:
    """
    Notifier that keeps the most recent notifications in memory.

    Older entries are dropped once ``history`` entries are held.
    """

    def __init__(self, history: int = 50):
        self._entries: deque[Notification] = deque(maxlen=history)

    def success(self, message: str) -> None:
        logger.info(f"Notify success: {message}")
        self._entries.append(Notification(level="success", message=message))

    def error(self, message: str) -> None:
        logger.info(f"Notify error: {message}")
        self._entries.append(Notification(level="error", message=message))

    @property
    def entries(self) -> list[Notification]:
        return list(self._entries)

    def drain(self) -> list[Notification]:
        """Return and forget all pending notifications."""
        entries = list(self._entries)
        self._entries.clear()
        return entries
