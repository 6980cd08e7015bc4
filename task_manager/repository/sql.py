"""SQLAlchemy-backed task repository."""

import logging
import re
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import Engine, delete, select, text, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from task_manager import deadline
from task_manager.database import TaskRow
from task_manager.exceptions import DeadlineExceeded, StorageError, TaskNotFound
from task_manager.models import Task, TaskStatus
from task_manager.repository.base import TaskFilter


logger = logging.getLogger(__name__)

_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def format_timestamp(value: datetime) -> str:
    """Encode a timestamp as fixed-width RFC3339 UTC text.

    Fixed width keeps lexical order equal to chronological order.
    Naive datetimes are taken as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(raw: str) -> datetime:
    """Decode RFC3339 text with 0-9 fractional digits into an aware UTC datetime.

    Digits beyond microseconds are truncated.

    Raises:
        ValueError: If ``raw`` is not a valid RFC3339 timestamp.
    """
    match = _RFC3339.match(raw or "")
    if not match:
        raise ValueError(f"not an RFC3339 timestamp: {raw!r}")

    fraction = (match["fraction"] or "").ljust(6, "0")[:6]
    offset = match["offset"]
    if offset in ("Z", "z"):
        offset = "+00:00"

    value = datetime.fromisoformat(f"{match['date']}T{match['time']}.{fraction}{offset}")
    return value.astimezone(timezone.utc)


def task_to_row(task: Task) -> TaskRow:
    return TaskRow(
        id=str(task.id),
        title=task.title,
        description=task.description,
        status=task.status.value,
        created_at=format_timestamp(task.created_at),
        updated_at=format_timestamp(task.updated_at),
    )


def row_to_task(row: TaskRow) -> Task:
    """Decode a stored row.

    Raises:
        StorageError: If the row holds values no valid task can have.
    """
    try:
        return Task(
            id=uuid.UUID(row.id),
            title=row.title,
            description=row.description,
            status=TaskStatus(row.status),
            created_at=parse_timestamp(row.created_at),
            updated_at=parse_timestamp(row.updated_at),
        )
    except ValueError as exc:
        logger.error("Corrupted task row %s: %s", row.id, exc)
        raise StorageError() from exc


class SQLTaskRepository:
    """Task repository over a relational store.

    Each operation runs in its own short-lived session and a single
    statement; not-found on update and delete is detected from the affected
    row count.

    Args:
        engine: Engine the repository reads and writes through.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @contextmanager
    def _session(self, *, write: bool = False) -> Iterator[Session]:
        deadline.check()
        try:
            if write:
                with self._session_factory.begin() as session:
                    yield session
            else:
                with self._session_factory() as session:
                    yield session
        except OperationalError as exc:
            left = deadline.remaining()
            if left is not None and left <= 0:
                logger.warning("Storage operation aborted by deadline")
                raise DeadlineExceeded() from exc
            logger.error("Storage operation failed: %s", exc)
            raise StorageError() from exc
        except SQLAlchemyError as exc:
            logger.error("Storage operation failed: %s", exc)
            raise StorageError() from exc

    def create(self, task: Task) -> None:
        with self._session(write=True) as session:
            session.add(task_to_row(task))

        logger.debug("Task row inserted: %s", task.id)

    def get(self, task_id: uuid.UUID) -> Task:
        with self._session() as session:
            row = session.get(TaskRow, str(task_id))
            if row is None:
                raise TaskNotFound()
            return row_to_task(row)

    def list(self, task_filter: TaskFilter) -> list[Task]:
        query = select(TaskRow)
        if task_filter.status is not None:
            query = query.where(TaskRow.status == task_filter.status.value)
        query = query.order_by(TaskRow.created_at.desc())
        if task_filter.limit > 0:
            query = query.limit(task_filter.limit)
        if task_filter.offset > 0:
            query = query.offset(task_filter.offset)

        with self._session() as session:
            rows = session.scalars(query).all()
            return [row_to_task(row) for row in rows]

    def update(self, task: Task) -> None:
        statement = (
            update(TaskRow)
            .where(TaskRow.id == str(task.id))
            .values(
                title=task.title,
                description=task.description,
                status=task.status.value,
                updated_at=format_timestamp(task.updated_at),
            )
            .execution_options(synchronize_session=False)
        )
        with self._session(write=True) as session:
            result = session.execute(statement)
            if result.rowcount == 0:
                raise TaskNotFound()

        logger.debug("Task row updated: %s", task.id)

    def delete(self, task_id: uuid.UUID) -> None:
        statement = (
            delete(TaskRow)
            .where(TaskRow.id == str(task_id))
            .execution_options(synchronize_session=False)
        )
        with self._session(write=True) as session:
            result = session.execute(statement)
            if result.rowcount == 0:
                raise TaskNotFound()

        logger.debug("Task row deleted: %s", task_id)

    def ping(self) -> None:
        with self._session() as session:
            session.execute(text("SELECT 1"))
