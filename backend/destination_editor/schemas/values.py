"""
Tagged field values held by the form value store.

Every value carries a ``kind`` discriminator so validation can dispatch on
the field type without inspecting the payload.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class FileRef(BaseModel):
    """
    Opaque reference to an uploaded or remote file.

    Uploads carry ``size``, ``content_type`` and ``content``; files known only
    by their remote location carry ``url``.
    """

    model_config = ConfigDict(frozen=True)

    filename: str | None = None
    size: int | None = None
    content_type: str | None = None
    content: bytes | None = Field(default=None, exclude=True, repr=False)
    url: str | None = None


class TextValue(BaseModel):
    """Free text value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    value: str = ""


class NumberValue(BaseModel):
    """Numeric value; ``None`` when nothing usable was entered."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: int | float | None = None


class FileValue(BaseModel):
    """File input value: the selected files, first one wins."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    files: tuple[FileRef, ...] = ()

    @property
    def first(self) -> FileRef | None:
        return self.files[0] if self.files else None


FieldValue = Annotated[
    Union[TextValue, NumberValue, FileValue],
    Field(discriminator="kind"),
]
