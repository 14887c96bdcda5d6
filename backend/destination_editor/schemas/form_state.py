"""
Pydantic models describing form session state and outcomes.

These are returned by the controller and serialized by the forms router.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from destination_editor.schemas.record import Record
from destination_editor.schemas.values import FieldValue


class SessionMode(str, Enum):
    """Whether the form creates a new record or edits an existing one."""

    CREATE = "create"
    EDIT = "edit"


class FormState(str, Enum):
    """Lifecycle state of a form controller."""

    INITIALIZING = "initializing"
    READY = "ready"
    SUBMITTING = "submitting"
    DISPOSED = "disposed"


class ErrorCode(str, Enum):
    """Reason a field failed validation."""

    EMPTY = "empty"
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"
    SIZE = "size"
    TYPE = "type"
    INVALID_TYPE = "invalid_type"


class FieldValidationError(BaseModel):
    """Validation error detail."""

    field: str
    message: str
    code: ErrorCode


class ValidationResult(BaseModel):
    """
    Result of form validation.

    ``errors`` holds the first failing constraint per field, ``issues`` every
    failing constraint. ``values`` is only set when the form is valid.
    """

    valid: bool
    values: dict[str, Any] | None = None
    errors: list[FieldValidationError] = Field(default_factory=list)
    issues: list[FieldValidationError] = Field(default_factory=list)

    @property
    def messages(self) -> dict[str, str]:
        return {error.field: error.message for error in self.errors}


class SubmitStatus(str, Enum):
    """Outcome of a submit request."""

    SUCCEEDED = "succeeded"
    INVALID = "invalid"
    FAILED = "failed"
    REJECTED = "rejected"
    DISCARDED = "discarded"


class SubmitResult(BaseModel):
    """What happened when the form was submitted."""

    status: SubmitStatus
    mode: SessionMode
    errors: dict[str, str] = Field(default_factory=dict)
    issues: list[FieldValidationError] = Field(default_factory=list)
    message: str | None = None
    record: Record | None = None

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.SUCCEEDED


class Notification(BaseModel):
    """A user-visible message raised by the form."""

    level: Literal["success", "error"]
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class FormSnapshot(BaseModel):
    """Everything the page layer needs to render a form session."""

    state: FormState
    mode: SessionMode
    is_submitting: bool
    selected_record_id: str | None = None
    values: dict[str, FieldValue]
    errors: dict[str, str] = Field(default_factory=dict)
    issues: list[FieldValidationError] = Field(default_factory=list)
    is_dirty: bool = False
    dirty_fields: list[str] = Field(default_factory=list)


class FormSessionResponse(FormSnapshot):
    """Form snapshot plus session bookkeeping returned by the HTTP API."""

    session_id: str
    notifications: list[Notification] = Field(default_factory=list)


class FieldUpdateRequest(BaseModel):
    """Request body for setting a single field."""

    value: Any = None


class OpenSessionRequest(BaseModel):
    """Request body for opening a form session."""

    record_id: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str
    details: dict[str, Any] | None = None
