"""
Contract for the remote destination API the form depends on.
"""

from typing import Protocol, Sequence

from destination_editor.schemas.record import (
    DestinationPayload,
    DestinationUpdatePayload,
    Record,
)


class DestinationAPI(Protocol):
    """
    Remote store of destination records.

    Implementations raise ``DestinationAPIError`` with a human readable
    message on failure.
    """

    async def fetch_all_records(self) -> Sequence[Record]: ...

    async def create_record(self, payload: DestinationPayload) -> Record: ...

    async def update_record(self, payload: DestinationUpdatePayload) -> Record: ...
