"""Field-level validation of task request bodies.

Validators never stop at the first problem: every violation is collected so
the client gets them all in one response. An empty list means the payload
is valid.
"""
from tasks_api.enums import StatusType
from tasks_api.schemas import FieldError

FIELD_REQUIRED = "field is required"


def trim(value: str) -> str:
    """Strip leading and trailing spaces"""
    return value.strip(" ")


def _validate_title(title: str) -> list[FieldError]:
    if not trim(title):
        return [FieldError(field="title", message=FIELD_REQUIRED)]
    return []


def validate_create(title: str, description: str) -> list[FieldError]:
    """Validate the fields of a create request"""
    return _validate_title(title)


def validate_update(title: str, description: str, status: str) -> list[FieldError]:
    """Validate the fields of an update request.

    Title problems are reported before status problems.
    """
    errors = _validate_title(title)
    try:
        StatusType.parse(status)
    except ValueError as e:
        errors.append(FieldError(field="status", message=f"invalid status value: {e}"))
    return errors
