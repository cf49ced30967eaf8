from abc import ABC, abstractmethod
from typing import Union
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tasks_api.logger import logger
from tasks_api.models import tasks_table
from tasks_api.schemas import Task

TaskID = Union[str, UUID]

_COLUMNS = (
    tasks_table.c.id,
    tasks_table.c.title,
    tasks_table.c.description,
    tasks_table.c.status,
    tasks_table.c.created_at,
    tasks_table.c.updated_at,
)


class RepositoryError(Exception):
    """Base class for task repository failures"""


class NotFoundError(RepositoryError):
    """The id does not name an active task"""

    def __init__(self, task_id: TaskID):
        self.task_id = task_id
        super().__init__("task not found")


class StorageError(RepositoryError):
    """Any other persistence failure; the cause is kept in ``__cause__``"""

    def __init__(self, message: str, cause: Exception):
        self.cause = cause
        super().__init__(f"{message}: {cause}")


class TaskRepository(ABC):
    """Persistence capability the request handlers depend on"""

    @abstractmethod
    def create(self, task: Task) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: TaskID) -> Task:
        raise NotImplementedError

    @abstractmethod
    def list(self) -> list[Task]:
        raise NotImplementedError

    @abstractmethod
    def update(self, task: Task) -> Task:
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: TaskID) -> None:
        raise NotImplementedError


def _parse_id(task_id: TaskID) -> UUID:
    """A string that is not a UUID cannot name any row"""
    if isinstance(task_id, UUID):
        return task_id
    try:
        return UUID(task_id)
    except (TypeError, ValueError):
        raise NotFoundError(task_id) from None


def _to_task(row) -> Task:
    return Task(**row._mapping)


class SQLTaskRepository(TaskRepository):
    """Tasks stored in the ``tasks`` table.

    Rows are never removed: delete clears ``is_active`` and every other
    operation only sees active rows.
    """

    def __init__(self, db: Session):
        self.db = db

    def _insert(self):
        if self.db.get_bind().dialect.name == "postgresql":
            return postgresql.insert(tasks_table)
        return sqlite.insert(tasks_table)

    def create(self, task: Task) -> None:
        """Insert a task; an existing row with the same id is left untouched"""
        stmt = self._insert().values(
            id=task.id,
            title=task.title,
            description=task.description,
            created_at=task.created_at,
        ).on_conflict_do_nothing(index_elements=[tasks_table.c.id])
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating task {task.id}: {str(e)}")
            raise StorageError("failed to insert task", e) from e
        logger.info(f"Created task with ID: {task.id}")

    def get(self, task_id: TaskID) -> Task:
        """Get an active task by ID"""
        uid = _parse_id(task_id)
        stmt = select(*_COLUMNS).where(tasks_table.c.id == uid, tasks_table.c.is_active.is_(True))
        try:
            row = self.db.execute(stmt).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching task {task_id}: {str(e)}")
            raise StorageError("failed to query task", e) from e

        if row is None:
            raise NotFoundError(task_id)
        return _to_task(row)

    def list(self) -> list[Task]:
        """Get all active tasks, oldest first"""
        stmt = (
            select(*_COLUMNS)
            .where(tasks_table.c.is_active.is_(True))
            .order_by(tasks_table.c.created_at, tasks_table.c.id)
        )
        try:
            rows = self.db.execute(stmt).all()
            return [_to_task(row) for row in rows]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching tasks: {str(e)}")
            raise StorageError("failed to list tasks", e) from e

    def update(self, task: Task) -> Task:
        """Replace title, description, status and updated_at of an active task.

        Runs as a single statement and returns the row as stored. There is
        no version check: concurrent updates of one task are last-writer-wins.
        """
        stmt = (
            update(tasks_table)
            .where(tasks_table.c.id == task.id, tasks_table.c.is_active.is_(True))
            .values(
                title=task.title,
                description=task.description,
                status=task.status,
                updated_at=task.updated_at,
            )
            .returning(*_COLUMNS)
        )
        try:
            row = self.db.execute(stmt).first()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating task {task.id}: {str(e)}")
            raise StorageError("failed to update task", e) from e

        if row is None:
            raise NotFoundError(task.id)
        logger.info(f"Updated task with ID: {task.id}")
        return _to_task(row)

    def delete(self, task_id: TaskID) -> None:
        """Soft-delete an active task"""
        uid = _parse_id(task_id)
        stmt = (
            update(tasks_table)
            .where(tasks_table.c.id == uid, tasks_table.c.is_active.is_(True))
            .values(is_active=False)
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting task {task_id}: {str(e)}")
            raise StorageError("failed to delete task", e) from e

        if result.rowcount == 0:
            raise NotFoundError(task_id)
        logger.info(f"Deleted task with ID: {task_id}")
