"""
Form core for the destination editor.

- Validation: declarative field rules
- Value store: tagged values with defaults, dirty tracking and hydration
- Mode resolver: create or edit, from the loaded collection
- Submission coordinator: one create/update at a time
- Controller: the form session state machine
"""

from destination_editor.services.controller import FormController
from destination_editor.services.mode_resolver import resolve_record
from destination_editor.services.notifier import NotificationLog, Notifier
from destination_editor.services.sessions import FormSession, FormSessionRegistry
from destination_editor.services.submission import SubmissionCoordinator, SubmissionOutcome
from destination_editor.services.validation import (
    FieldRule,
    FieldType,
    FormSchema,
    build_destination_schema,
)
from destination_editor.services.value_store import FieldValueStore

__all__ = [
    "FormController",
    "FieldValueStore",
    "FormSchema",
    "FieldRule",
    "FieldType",
    "build_destination_schema",
    "resolve_record",
    "Notifier",
    "NotificationLog",
    "SubmissionCoordinator",
    "SubmissionOutcome",
    "FormSession",
    "FormSessionRegistry",
]
