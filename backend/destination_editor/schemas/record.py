"""
Pydantic models for destination records and submission payloads.

Records are owned by the remote destination API; the form only ever holds
copies of them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from destination_editor.schemas.values import FileRef


class Record(BaseModel):
    """
    A destination as returned by the remote API.

    ``id`` is assigned remotely on creation; empty or missing means the
    record has not been created yet.
    """

    id: str | None = None
    destination: str = ""
    image: str = ""
    description: str = ""
    price: str = ""
    rating: int = 0

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("destination", "image", "description", "price", mode="before")
    @classmethod
    def coerce_text(cls, v: Any):
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("rating", mode="before")
    @classmethod
    def missing_rating_is_zero(cls, v: Any):
        return 0 if v in (None, "") else v

    @field_validator("id")
    @classmethod
    def empty_id_is_missing(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class DestinationPayload(BaseModel):
    """Validated form values submitted to create a destination."""

    destination: str
    image: FileRef
    description: str
    price: str
    rating: int | float


class DestinationUpdatePayload(DestinationPayload):
    """Validated form values plus the identifier of the record being edited."""

    id: str
