"""
Submission coordinator.

Serializes create/update calls to the remote API and turns their outcome
into a single success or failure result.
"""

import logging
from typing import Awaitable, Callable

from pydantic import BaseModel

from destination_editor.clients.base import DestinationAPI
from destination_editor.exceptions import DestinationAPIError, SubmissionInProgressError
from destination_editor.schemas.record import (
    DestinationPayload,
    DestinationUpdatePayload,
    Record,
)

logger = logging.getLogger(__name__)


class SubmissionOutcome(BaseModel):
    """Result of one accepted submission attempt."""

    ok: bool
    record: Record | None = None
    message: str | None = None


class SubmissionCoordinator:
    """
    Runs at most one create or update at a time.

    A second call made while one is in flight raises
    ``SubmissionInProgressError`` before touching the API.
    """

    def __init__(self, api: DestinationAPI):
        self.api = api
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def create(self, payload: DestinationPayload) -> SubmissionOutcome:
        """Create a new destination from validated form values."""
        return await self._run("create", self.api.create_record, payload)

    async def update(self, payload: DestinationUpdatePayload) -> SubmissionOutcome:
        """Update the destination identified by ``payload.id``."""
        return await self._run("update", self.api.update_record, payload)

    async def _run(
        self,
        operation: str,
        call: Callable[..., Awaitable[Record]],
        payload: DestinationPayload,
    ) -> SubmissionOutcome:
        if self._in_flight:
            raise SubmissionInProgressError("A submission is already in progress")

        self._in_flight = True
        try:
            record = await call(payload)
        except DestinationAPIError as e:
            logger.warning(f"Destination {operation} failed: {e.message}")
            return SubmissionOutcome(ok=False, message=e.message)
        except Exception as e:
            logger.exception(f"Unexpected error during destination {operation}")
            return SubmissionOutcome(ok=False, message=str(e) or type(e).__name__)
        finally:
            self._in_flight = False

        logger.info(f"Destination {operation} succeeded (id={record.id})")
        return SubmissionOutcome(ok=True, record=record)
