from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from tasks_api.enums import StatusType


class TaskCreateRequest(BaseModel):
    """Request body of POST /tasks"""
    title: str = ""
    description: str = ""

    @field_validator("title", "description", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        """Missing and null strings decode to an empty string"""
        return "" if v is None else v


class TaskUpdateRequest(BaseModel):
    """Request body of PUT /tasks/{id}: a full replacement, not a patch"""
    title: str = ""
    description: str = ""
    status: str = ""

    @field_validator("title", "description", "status", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Task(BaseModel):
    """A task as stored and as returned by the API"""
    id: UUID
    title: str
    status: StatusType = StatusType.TODO
    description: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_json(self) -> dict:
        """JSON-ready representation; ``updated_at`` is omitted when unset"""
        return self.model_dump(mode="json", exclude_none=True)


class FieldError(BaseModel):
    """An error for a specific field of the request body"""
    field: str
    message: str


class ErrorDescription(BaseModel):
    id: str = ""
    code: str
    status: int
    title: str = ""
    detail: str = ""
    source: Optional[FieldError] = None


class ErrorResponse(BaseModel):
    errors: list[ErrorDescription] = Field(default_factory=list)
