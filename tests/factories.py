"""
Sample data factory helpers for tasks API tests.

These create Task entities with sensible defaults.
Override any field via keyword arguments.
"""

import uuid
from datetime import datetime, timezone

from tasks_api.enums import StatusType
from tasks_api.schemas import Task


def make_task(**overrides):
    """Create a Task with sensible defaults."""
    defaults = {
        "id": uuid.uuid4(),
        "title": "test title",
        "description": "test description",
        "status": StatusType.TODO,
        "created_at": datetime(2024, 6, 15, 12, 30, 0, 123456, tzinfo=timezone.utc),
        "updated_at": None,
    }
    defaults.update(overrides)
    return Task(**defaults)
