"""
Form controller for creating or editing a destination.

The controller owns the value store and decides between create and edit
mode:

1. ``initialize`` loads the record collection and hydrates the form when the
   requested identifier matches a record (edit mode)
2. ``set_field`` stages user input without validating it
3. ``submit`` validates, then creates or updates through the submission
   coordinator and reports the outcome to the notifier

The only suspension points are the remote API calls. Hydration is last
response wins: a fetch that resolves after the user started typing
overwrites those edits. After ``dispose`` late completions are ignored.
"""

import logging
from typing import Any

from destination_editor.clients.base import DestinationAPI
from destination_editor.exceptions import (
    DestinationAPIError,
    FormClosedError,
    HydrationError,
)
from destination_editor.schemas.form_state import (
    FieldValidationError,
    FormSnapshot,
    FormState,
    SessionMode,
    SubmitResult,
    SubmitStatus,
)
from destination_editor.schemas.record import (
    DestinationPayload,
    DestinationUpdatePayload,
    Record,
)
from destination_editor.schemas.values import FieldValue
from destination_editor.services.mode_resolver import resolve_record
from destination_editor.services.notifier import NotificationLog, Notifier
from destination_editor.services.submission import SubmissionCoordinator
from destination_editor.services.validation import FormSchema
from destination_editor.services.value_store import FieldValueStore

logger = logging.getLogger(__name__)

CREATE_SUCCESS_MESSAGE = "Successfully added new destination"
EDIT_SUCCESS_MESSAGE = "Successfully edited destination"
IN_FLIGHT_MESSAGE = "A submission is already in progress"


class FormController:
    """
    State machine behind a single destination form session.

    States: INITIALIZING -> READY -> SUBMITTING -> READY, and DISPOSED after
    teardown. The session mode is derived from whether a record identifier
    has been resolved.
    """

    def __init__(
        self,
        api: DestinationAPI,
        schema: FormSchema,
        notifier: Notifier | None = None,
        record_id: str | None = None,
    ):
        self.api = api
        self.schema = schema
        self.notifier = notifier if notifier is not None else NotificationLog()
        self.record_id = record_id
        self.store = FieldValueStore(schema)
        self.coordinator = SubmissionCoordinator(api)

        self._state = FormState.INITIALIZING
        self._initialized = False
        self._selected_record_id: str | None = None
        self._records: tuple[Record, ...] = ()
        self._errors: dict[str, str] = {}
        self._issues: list[FieldValidationError] = []

    # State exposed to the page layer

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def mode(self) -> SessionMode:
        if self._selected_record_id is None:
            return SessionMode.CREATE
        return SessionMode.EDIT

    @property
    def selected_record_id(self) -> str | None:
        return self._selected_record_id

    @property
    def records(self) -> tuple[Record, ...]:
        return self._records

    @property
    def values(self) -> dict[str, FieldValue]:
        return self.store.snapshot()

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def issues(self) -> list[FieldValidationError]:
        return list(self._issues)

    @property
    def is_submitting(self) -> bool:
        return self._state is FormState.SUBMITTING

    @property
    def is_disposed(self) -> bool:
        return self._state is FormState.DISPOSED

    def snapshot(self) -> FormSnapshot:
        """Capture the current form state for rendering."""
        return FormSnapshot(
            state=self._state,
            mode=self.mode,
            is_submitting=self.is_submitting,
            selected_record_id=self._selected_record_id,
            values=self.store.snapshot(),
            errors=self.errors,
            issues=self.issues,
            is_dirty=self.store.is_dirty,
            dirty_fields=self.store.dirty_fields,
        )

    # Lifecycle

    async def initialize(self, record_id: str | None = None) -> None:
        """
        Load the record collection and enter create or edit mode.

        A failed fetch is logged and leaves the form in create mode with
        default values.
        """
        self._ensure_open()
        if record_id is not None:
            self.record_id = record_id

        await self.refresh()

        if self.is_disposed:
            return
        self._initialized = True
        if self._state is FormState.INITIALIZING:
            self._state = FormState.READY
        logger.info(
            f"Form initialized in {self.mode.value} mode (record_id={self.record_id!r})"
        )

    async def refresh(self) -> bool:
        """
        Fetch all records and hydrate the form if the target record is found.

        Returns:
            True when the form was hydrated from a record
        """
        self._ensure_open()
        try:
            records = await self.api.fetch_all_records()
        except DestinationAPIError as e:
            logger.warning(f"Failed to load destinations: {e.message}")
            return False
        except Exception:
            logger.exception("Failed to load destinations")
            return False

        if self.is_disposed:
            logger.debug("Ignoring destination listing for disposed form")
            return False

        self._records = tuple(records)
        record = resolve_record(self._records, self.record_id)
        if record is None:
            return False

        try:
            self.store.hydrate(self._record_values(record))
        except HydrationError as e:
            logger.warning(f"Could not hydrate form from record {record.id}: {e}")
            return False

        self._selected_record_id = record.id
        logger.info(f"Hydrated form from destination {record.id}")
        return True

    def dispose(self) -> None:
        """Tear the form down; pending completions become no-ops."""
        if not self.is_disposed:
            logger.debug(f"Disposing form (record_id={self.record_id!r})")
        self._state = FormState.DISPOSED

    # User input

    def set_field(self, name: str, value: Any) -> FieldValue:
        """
        Stage a value for ``name``. Validation only runs on submit.

        Raises:
            UnknownFieldError: If the schema does not declare ``name``
            FormClosedError: If the form has been disposed
        """
        self._ensure_open()
        return self.store.set(name, value)

    async def submit(self) -> SubmitResult:
        """
        Validate and submit the form.

        Returns REJECTED without side effects while another submission is in
        flight and INVALID when validation fails. Remote failures are
        reported to the notifier and leave the entered values untouched.
        """
        self._ensure_open()
        mode = self.mode

        if self.coordinator.in_flight:
            logger.debug("Ignoring submit while a submission is in flight")
            return SubmitResult(
                status=SubmitStatus.REJECTED, mode=mode, message=IN_FLIGHT_MESSAGE
            )

        result = self.schema.validate(self.store.snapshot())
        self._errors = result.messages
        self._issues = list(result.issues)
        if not result.valid:
            return SubmitResult(
                status=SubmitStatus.INVALID,
                mode=mode,
                errors=result.messages,
                issues=result.issues,
            )

        self._state = FormState.SUBMITTING
        if mode is SessionMode.EDIT:
            outcome = await self.coordinator.update(
                DestinationUpdatePayload(**result.values, id=self._selected_record_id)
            )
        else:
            outcome = await self.coordinator.create(DestinationPayload(**result.values))

        if self.is_disposed:
            logger.info("Discarding submission result for disposed form")
            return SubmitResult(
                status=SubmitStatus.DISCARDED,
                mode=mode,
                message=outcome.message,
                record=outcome.record,
            )

        self._state = FormState.READY if self._initialized else FormState.INITIALIZING

        if not outcome.ok:
            self.notifier.error(outcome.message)
            return SubmitResult(
                status=SubmitStatus.FAILED, mode=mode, message=outcome.message
            )

        self._errors = {}
        self._issues = []
        self.store.reset()
        if mode is SessionMode.EDIT:
            # Editing ends the edit session; the next submit creates a new record
            self._selected_record_id = None
            self.notifier.success(EDIT_SUCCESS_MESSAGE)
            message = EDIT_SUCCESS_MESSAGE
        else:
            self.notifier.success(CREATE_SUCCESS_MESSAGE)
            message = CREATE_SUCCESS_MESSAGE
            await self.refresh()

        return SubmitResult(
            status=SubmitStatus.SUCCEEDED,
            mode=mode,
            message=message,
            record=outcome.record,
        )

    # Helpers

    def _record_values(self, record: Record) -> dict[str, Any]:
        data = record.model_dump()
        return {name: data[name] for name in self.schema.field_names if name in data}

    def _ensure_open(self) -> None:
        if self.is_disposed:
            raise FormClosedError("Form has been disposed")

