from datetime import datetime, timezone
import uuid

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from tasks_api.database import get_db
from tasks_api.enums import StatusType
from tasks_api.logger import logger
from tasks_api.repository import NotFoundError, SQLTaskRepository, StorageError, TaskRepository
from tasks_api.responses import internal_error, not_found, validation_failed, write_json
from tasks_api.schemas import Task, TaskCreateRequest, TaskUpdateRequest
from tasks_api.validation import trim, validate_create, validate_update

router = APIRouter(prefix="/tasks", tags=["Tasks"])

FAILED_TO_CREATE_TASK = "failed to create task"
FAILED_TO_DECODE_BODY = "failed to decode request body"
TASK_NOT_FOUND = "task not found"
EMPTY_ID = "path param 'id' cannot be empty"


def get_task_repository(db: Session = Depends(get_db)) -> TaskRepository:
    """Task repository bound to the request's database session"""
    return SQLTaskRepository(db)


async def read_body(request: Request) -> bytes:
    return await request.body()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _lookup_failed(e: Exception, title: str) -> Response:
    """Map a repository failure to 404 or 500"""
    if isinstance(e, NotFoundError):
        return not_found(TASK_NOT_FOUND, str(e))
    return internal_error(title, str(e))


@router.get("", summary="List tasks")
def list_tasks(repo: TaskRepository = Depends(get_task_repository)):
    """Get all active tasks"""
    try:
        tasks = repo.list()
    except StorageError as e:
        return internal_error("failed to list tasks", str(e))

    return write_json(status.HTTP_200_OK, [task.to_json() for task in tasks])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a task")
def create_task(
    body: bytes = Depends(read_body),
    repo: TaskRepository = Depends(get_task_repository),
):
    """Create a new task; it always starts as todo"""
    try:
        req = TaskCreateRequest.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Undecodable create request: {e.error_count()} error(s)")
        return internal_error(FAILED_TO_DECODE_BODY, str(e))

    errors = validate_create(req.title, req.description)
    if errors:
        return validation_failed(FAILED_TO_CREATE_TASK, errors)

    task = Task(
        id=uuid.uuid4(),
        title=trim(req.title),
        description=trim(req.description),
        status=StatusType.TODO,
        created_at=_now(),
    )
    try:
        repo.create(task)
    except StorageError as e:
        return internal_error(FAILED_TO_CREATE_TASK, str(e))

    return write_json(status.HTTP_201_CREATED, task.to_json())


@router.get("/{task_id}", summary="Get a task")
def get_task(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    """Get a specific task by ID"""
    if not task_id:
        return not_found(TASK_NOT_FOUND, EMPTY_ID)

    try:
        task = repo.get(task_id)
    except (NotFoundError, StorageError) as e:
        return _lookup_failed(e, "failed to get task")

    return write_json(status.HTTP_200_OK, task.to_json())


@router.put("/{task_id}", summary="Replace a task")
def update_task(
    task_id: str,
    body: bytes = Depends(read_body),
    repo: TaskRepository = Depends(get_task_repository),
):
    """Replace title, description and status of a task.

    The current task is fetched first and written back with the new values;
    two concurrent updates of the same task are last-writer-wins.
    """
    if not task_id:
        return not_found(TASK_NOT_FOUND, EMPTY_ID)

    try:
        req = TaskUpdateRequest.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Undecodable update request for task {task_id}: {e.error_count()} error(s)")
        return internal_error(FAILED_TO_DECODE_BODY, str(e))

    errors = validate_update(req.title, req.description, req.status)
    if errors:
        return validation_failed("failed to update task", errors)

    try:
        task = repo.get(task_id)
    except (NotFoundError, StorageError) as e:
        return _lookup_failed(e, "failed to get task")

    task = task.model_copy(update={
        "title": trim(req.title),
        "description": trim(req.description),
        "status": StatusType.parse(req.status),
        "updated_at": _now(),
    })

    try:
        task = repo.update(task)
    except (NotFoundError, StorageError) as e:
        return _lookup_failed(e, "failed to update task")

    return write_json(status.HTTP_200_OK, task.to_json())


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a task")
def delete_task(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    """Soft-delete a task; deleting it again reports not found"""
    if not task_id:
        return not_found(TASK_NOT_FOUND, EMPTY_ID)

    try:
        repo.delete(task_id)
    except (NotFoundError, StorageError) as e:
        return _lookup_failed(e, "failed to delete task")

    return write_json(status.HTTP_204_NO_CONTENT)
