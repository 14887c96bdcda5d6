"""
Exceptions raised by the destination form core and its collaborators.
"""


class DestinationEditorError(Exception):
    """Base class for all destination editor errors."""


class UnknownFieldError(DestinationEditorError, KeyError):
    """Raised when a field name is not declared by the form schema."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(field)

    def __str__(self) -> str:
        return f"Unknown form field: {self.field}"


class HydrationError(DestinationEditorError, ValueError):
    """Raised when a hydration source does not cover the schema exactly."""


class FormClosedError(DestinationEditorError):
    """Raised when a disposed form controller is used."""


class SubmissionInProgressError(DestinationEditorError):
    """Raised when a submission is attempted while another is in flight."""


class SessionNotFoundError(DestinationEditorError, KeyError):
    """Raised when a form session id is not registered."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"Form session not found: {self.session_id}"


class DestinationAPIError(DestinationEditorError):
    """
    Failure reported by the remote destination API.

    The message is human readable and is shown to the user verbatim.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
