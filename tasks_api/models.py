from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, Text, TypeDecorator, Uuid, text

from tasks_api.database import Base
from tasks_api.enums import StatusType


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC timestamps on every backend.

    SQLite drops the offset on storage, so values read back are re-tagged as
    UTC to stay comparable with the ones that were written.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Task(Base):
    """Task model for database"""
    __tablename__ = "tasks"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="", server_default="")
    status = Column(
        Enum(
            StatusType,
            name="status_type",
            native_enum=False,
            length=16,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=StatusType.TODO,
        server_default=StatusType.TODO.value,
    )
    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(UTCDateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"), index=True)

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status={self.status}, is_active={self.is_active})>"


tasks_table = Task.__table__
