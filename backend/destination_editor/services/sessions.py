"""
Registry of open form sessions.

Each session pairs a form controller with the notification log it reports
to. The registry is bounded; opening a session beyond the limit disposes the
oldest one.
"""

import logging
import uuid
from collections import OrderedDict

from destination_editor.clients.base import DestinationAPI
from destination_editor.exceptions import SessionNotFoundError
from destination_editor.services.controller import FormController
from destination_editor.services.notifier import NotificationLog
from destination_editor.services.validation import FormSchema

logger = logging.getLogger(__name__)


class FormSession:
    """A registered form controller and its notifications."""

    def __init__(self, session_id: str, controller: FormController, notifications: NotificationLog):
        self.session_id = session_id
        self.controller = controller
        self.notifications = notifications


class FormSessionRegistry:
    """In-memory store of form sessions keyed by a random id."""

    def __init__(
        self,
        api: DestinationAPI,
        schema: FormSchema,
        max_sessions: int = 1000,
        notification_history: int = 50,
    ):
        self.api = api
        self.schema = schema
        self.max_sessions = max_sessions
        self.notification_history = notification_history
        self._sessions: OrderedDict[str, FormSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, record_id: str | None = None) -> FormSession:
        """
        Create a session without initializing it.

        Callers await ``session.controller.initialize()`` afterwards.
        """
        notifications = NotificationLog(history=self.notification_history)
        controller = FormController(
            api=self.api,
            schema=self.schema,
            notifier=notifications,
            record_id=record_id,
        )
        session = FormSession(uuid.uuid4().hex, controller, notifications)
        self._sessions[session.session_id] = session

        while len(self._sessions) > self.max_sessions:
            evicted_id, evicted = self._sessions.popitem(last=False)
            evicted.controller.dispose()
            logger.info(f"Evicted form session {evicted_id}")

        logger.debug(f"Opened form session {session.session_id} (record_id={record_id!r})")
        return session

    def get(self, session_id: str) -> FormSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def close(self, session_id: str) -> None:
        """Dispose and forget a session."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.controller.dispose()
        logger.debug(f"Closed form session {session_id}")

    def close_all(self) -> None:
        for session in self._sessions.values():
            session.controller.dispose()
        self._sessions.clear()
