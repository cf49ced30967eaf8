"""JSON response writers and the error envelope.

Every failure leaves the service as::

    {"errors": [{"id": ..., "code": ..., "status": ..., "title": ...,
                 "detail": ..., "source": {"field": ..., "message": ...}}]}

with one entry per field error when there are any, a single entry otherwise.
"""
import uuid
from typing import Any, Optional

from fastapi import status
from fastapi.responses import JSONResponse, Response

from tasks_api.schemas import ErrorDescription, ErrorResponse, FieldError

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# Error codes
INTERNAL_ERROR = "internal_error"
VALIDATION_ERROR = "validation_error"
BAD_REQUEST = "bad_request"
NOT_FOUND = "not_found"

DEFAULT_ERROR_TITLE = "an error occurred"


class UTF8JSONResponse(JSONResponse):
    media_type = JSON_CONTENT_TYPE


def write_json(status_code: int, data: Any = None) -> Response:
    """Encode ``data`` as the response body; 204 responses carry no body"""
    if status_code == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status_code, headers={"Content-Type": JSON_CONTENT_TYPE})
    return UTF8JSONResponse(status_code=status_code, content=data)


def _configure_error(desc: ErrorDescription, source: Optional[FieldError]) -> ErrorDescription:
    return desc.model_copy(update={
        "id": desc.id or str(uuid.uuid4()),
        "source": source,
    })


def write_json_error(
    status_code: int,
    desc: ErrorDescription,
    *sources: FieldError,
) -> Response:
    """Write the error envelope, one entry per field error in ``sources``"""
    if not desc.title:
        desc = desc.model_copy(update={"title": DEFAULT_ERROR_TITLE})

    if sources:
        errors = [_configure_error(desc, source) for source in sources]
    else:
        errors = [_configure_error(desc, None)]

    body = ErrorResponse(errors=errors).model_dump(mode="json", exclude_none=True)
    return write_json(status_code, body)


def internal_error(title: str, detail: str) -> Response:
    return write_json_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorDescription(
            code=INTERNAL_ERROR,
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            title=title,
            detail=detail,
        ),
    )


def not_found(title: str, detail: str) -> Response:
    return write_json_error(
        status.HTTP_404_NOT_FOUND,
        ErrorDescription(
            code=NOT_FOUND,
            status=status.HTTP_404_NOT_FOUND,
            title=title,
            detail=detail,
        ),
    )


def validation_failed(title: str, errors: list[FieldError]) -> Response:
    return write_json_error(
        status.HTTP_400_BAD_REQUEST,
        ErrorDescription(
            code=VALIDATION_ERROR,
            status=status.HTTP_400_BAD_REQUEST,
            title=title,
            detail="failed to validate request body",
        ),
        *errors,
    )
