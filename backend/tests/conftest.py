"""
Shared fixtures for the destination editor tests.
"""

import asyncio

import pytest

from destination_editor.config import Settings
from destination_editor.schemas.record import (
    DestinationPayload,
    DestinationUpdatePayload,
    Record,
)
from destination_editor.schemas.values import FileRef, FileValue, NumberValue, TextValue
from destination_editor.services.validation import build_destination_schema


class FakeDestinationAPI:
    """
    In-memory stand-in for the remote destination API.

    ``fetch_gate`` and ``submit_gate`` hold the corresponding calls until the
    event is set, to exercise in-flight behaviour.
    """

    def __init__(self, records: list[Record] | None = None):
        self.records = list(records or [])
        self.fetch_calls = 0
        self.fetch_error: Exception | None = None
        self.submit_error: Exception | None = None
        self.fetch_gate: asyncio.Event | None = None
        self.submit_gate: asyncio.Event | None = None
        self.created: list[DestinationPayload] = []
        self.updated: list[DestinationUpdatePayload] = []

    async def fetch_all_records(self) -> list[Record]:
        self.fetch_calls += 1
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.records)

    async def create_record(self, payload: DestinationPayload) -> Record:
        self.created.append(payload)
        if self.submit_gate is not None:
            await self.submit_gate.wait()
        if self.submit_error is not None:
            raise self.submit_error
        record = self._to_record(str(len(self.records) + 1), payload)
        self.records.append(record)
        return record

    async def update_record(self, payload: DestinationUpdatePayload) -> Record:
        self.updated.append(payload)
        if self.submit_gate is not None:
            await self.submit_gate.wait()
        if self.submit_error is not None:
            raise self.submit_error
        record = self._to_record(payload.id, payload)
        self.records = [record if r.id == payload.id else r for r in self.records]
        return record

    @staticmethod
    def _to_record(record_id: str, payload: DestinationPayload) -> Record:
        return Record(
            id=record_id,
            destination=payload.destination,
            image=payload.image.url or payload.image.filename or "",
            description=payload.description,
            price=payload.price,
            rating=int(payload.rating),
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def schema(settings):
    return build_destination_schema(settings)


@pytest.fixture
def bali() -> Record:
    return Record(
        id="abc",
        destination="Bali",
        image="https://cdn.example.com/bali.png",
        description="Island of the gods",
        price="1500000",
        rating=4,
    )


@pytest.fixture
def lombok() -> Record:
    return Record(
        id="def",
        destination="Lombok",
        image="https://cdn.example.com/lombok.png",
        description="Quieter neighbour",
        price="900000",
        rating=5,
    )


@pytest.fixture
def api(bali, lombok) -> FakeDestinationAPI:
    return FakeDestinationAPI([lombok, bali])


@pytest.fixture
def png() -> FileRef:
    return FileRef(
        filename="beach.png",
        size=120_000,
        content_type="image/png",
        content=b"\x89PNG fake",
    )


@pytest.fixture
def valid_values(png) -> dict:
    return {
        "destination": TextValue(value="Raja Ampat"),
        "image": FileValue(files=(png,)),
        "description": "Coral reefs and islands",
        "price": "Rp. 2.000.000",
        "rating": 5,
    }


@pytest.fixture
def valid_tagged_values(png) -> dict:
    return {
        "destination": TextValue(value="Raja Ampat"),
        "image": FileValue(files=(png,)),
        "description": TextValue(value="Coral reefs and islands"),
        "price": TextValue(value="Rp. 2.000.000"),
        "rating": NumberValue(value=5),
    }
