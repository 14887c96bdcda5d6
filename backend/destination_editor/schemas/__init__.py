"""
Pydantic schemas for form values, records and session state.
"""

from destination_editor.schemas.form_state import (
    ErrorCode,
    FieldValidationError,
    FormSnapshot,
    FormState,
    Notification,
    SessionMode,
    SubmitResult,
    SubmitStatus,
    ValidationResult,
)
from destination_editor.schemas.record import (
    DestinationPayload,
    DestinationUpdatePayload,
    Record,
)
from destination_editor.schemas.values import (
    FieldValue,
    FileRef,
    FileValue,
    NumberValue,
    TextValue,
)

__all__ = [
    "Record",
    "DestinationPayload",
    "DestinationUpdatePayload",
    "FieldValue",
    "FileRef",
    "FileValue",
    "NumberValue",
    "TextValue",
    "ErrorCode",
    "FieldValidationError",
    "ValidationResult",
    "FormState",
    "SessionMode",
    "SubmitStatus",
    "SubmitResult",
    "Notification",
    "FormSnapshot",
]
