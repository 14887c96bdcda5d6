"""
Destination form session endpoints.

Lets a front end drive a server-side form: open a session (create or edit),
stage field values, upload the image, and submit.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from destination_editor.config import get_settings
from destination_editor.dependencies import get_session_registry
from destination_editor.exceptions import (
    FormClosedError,
    SessionNotFoundError,
    UnknownFieldError,
)
from destination_editor.schemas.form_state import (
    FieldUpdateRequest,
    FormSessionResponse,
    OpenSessionRequest,
    SubmitResult,
    SubmitStatus,
)
from destination_editor.schemas.values import FileRef
from destination_editor.services.sessions import FormSession, FormSessionRegistry
from destination_editor.services.validation import FieldType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forms/destinations", tags=["forms"])

SUBMIT_STATUS_CODES = {
    SubmitStatus.SUCCEEDED: 200,
    SubmitStatus.INVALID: 422,
    SubmitStatus.REJECTED: 409,
    SubmitStatus.FAILED: 502,
    SubmitStatus.DISCARDED: 410,
}


def _session_response(session: FormSession) -> FormSessionResponse:
    snapshot = session.controller.snapshot()
    return FormSessionResponse(
        **snapshot.model_dump(),
        session_id=session.session_id,
        notifications=session.notifications.drain(),
    )


def _get_session(registry: FormSessionRegistry, session_id: str) -> FormSession:
    try:
        return registry.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=FormSessionResponse, status_code=status.HTTP_201_CREATED)
async def open_session(
    registry: Annotated[FormSessionRegistry, Depends(get_session_registry)],
    request: OpenSessionRequest | None = None,
) -> FormSessionResponse:
    """
    Open a destination form.

    When ``record_id`` matches an existing destination the form is hydrated
    from it and submits as an update; otherwise it creates a new one.
    """
    record_id = request.record_id if request else None
    session = registry.open(record_id=record_id)
    await session.controller.initialize()
    return _session_response(session)


@router.get("/{session_id}", response_model=FormSessionResponse)
async def get_session(
    session_id: str,
    registry: Annotated[FormSessionRegistry, Depends(get_session_registry)],
) -> FormSessionResponse:
    """Get current values, errors and pending notifications."""
    return _session_response(_get_session(registry, session_id))


@router.put("/{session_id}/fields/{field_name}", response_model=FormSessionResponse)
async def set_field(
    session_id: str,
    field_name: str,
    update: FieldUpdateRequest,
    registry: Annotated[FormSessionRegistry, Depends(get_session_registry)],
) -> FormSessionResponse:
    """Stage a value for one field. Nothing is validated until submit."""
    session = _get_session(registry, session_id)
    try:
        session.controller.set_field(field_name, update.value)
    except UnknownFieldError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _session_response(session)


@router.post("/{session_id}/fields/{field_name}/upload", response_model=FormSessionResponse)
async def upload_field_file(
    session_id: str,
    field_name: str,
    file: Annotated[UploadFile, File(...)],
    registry: Annotated[FormSessionRegistry, Depends(get_session_registry)],
) -> FormSessionResponse:
    """
    Stage an uploaded file for a file field.

    Size and type are checked against the field's rules on submit; only the
    global upload cap is enforced here.
    """
    settings = get_settings()
    session = _get_session(registry, session_id)
    rule = session.controller.schema.rule(field_name)
    if rule is None:
        raise HTTPException(status_code=404, detail=f"Unknown field: {field_name}")
    if rule.field_type is not FieldType.FILE:
        raise HTTPException(
            status_code=400, detail=f"Field '{field_name}' is not a file field"
        )

    contents = await file.read()
    max_size = settings.max_upload_size_mb * 1024 * 1024
    if len(contents) > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {settings.max_upload_size_mb}MB",
        )

    file_ref = FileRef(
        filename=file.filename,
        size=len(contents),
        content_type=file.content_type,
        content=contents,
    )
    try:
        session.controller.set_field(field_name, file_ref)
    except UnknownFieldError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_response(session)


@router.post("/{session_id}/submit", response_model=SubmitResult)
async def submit_form(
    session_id: str,
    response: Response,
    registry: Annotated[FormSessionRegistry, Depends(get_session_registry)],
) -> SubmitResult:
    """
    Validate and submit the form.

    Responds 422 with field errors when invalid, 409 while another submit
    is in flight and 502 with the remote message when the API fails.
    """
    session = _get_session(registry, session_id)
    try:
        result = await session.controller.submit()
    except FormClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception(f"Failed to submit form session {session_id}")
        raise HTTPException(status_code=500, detail=str(e))

    response.status_code = SUBMIT_STATUS_CODES[result.status]
    return result


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str,
    registry: Annotated[FormSessionRegistry, Depends(get_session_registry)],
) -> Response:
    """Dispose a form session; late API responses for it are ignored."""
    try:
        registry.close(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
