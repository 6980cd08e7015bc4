"""Task business rules on top of a task repository."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from task_manager.models import (
    CreateTaskInput,
    Task,
    TaskStatus,
    UpdateTaskInput,
    validate_status,
    validate_title,
)
from task_manager.repository import TaskFilter, TaskRepository
from task_manager.telemetry import get_meter, get_tracer


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)
meter = get_meter(__name__)

tasks_created = meter.create_counter(
    name="tasks.created",
    description="Tasks created",
    unit="1",
)

tasks_deleted = meter.create_counter(
    name="tasks.deleted",
    description="Tasks deleted",
    unit="1",
)

DEFAULT_PAGE_SIZE = 50

# Smallest step datetime can represent
_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskService:
    """Validates input, assigns identity and timestamps, delegates storage.

    Args:
        repository: Store the service reads from and writes to.
        clock: Returns the current aware UTC time.
        default_page_size: Limit used when a list call asks for none.
    """

    def __init__(
        self,
        repository: TaskRepository,
        clock: Callable[[], datetime] = _utcnow,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._default_page_size = default_page_size

    def ping(self) -> None:
        self._repository.ping()

    def create_task(self, data: CreateTaskInput) -> Task:
        """Create a task with status ``new``.

        Raises:
            TitleTooShort: If the title has fewer than 3 characters.
            StorageError: If the task could not be stored.
        """
        with tracer.start_as_current_span("task.create") as span:
            validate_title(data.title)

            now = self._clock()
            task = Task(
                id=uuid.uuid4(),
                title=data.title,
                description=data.description,
                status=TaskStatus.NEW,
                created_at=now,
                updated_at=now,
            )
            self._repository.create(task)

            span.set_attribute("task.id", str(task.id))
            tasks_created.add(1)
            logger.info(f"Task created: {task.id}")

            return task

    def get_task(self, task_id: uuid.UUID) -> Task:
        return self._repository.get(task_id)

    def list_tasks(
        self,
        status: TaskStatus | None = None,
        limit: int = 0,
        offset: int = 0,
    ) -> list[Task]:
        """List tasks newest first.

        A non-positive ``limit`` falls back to the default page size.
        """
        if limit <= 0:
            limit = self._default_page_size
        return self._repository.list(TaskFilter(status=status, limit=limit, offset=offset))

    def update_task(self, task_id: uuid.UUID, data: UpdateTaskInput) -> Task:
        """Apply a partial update; fields left as None keep their value.

        Raises:
            TaskNotFound: If no task has ``task_id``.
            TitleTooShort: If a supplied title is too short.
            InvalidStatus: If a supplied status is unknown.
            StorageError: If the store failed.
        """
        with tracer.start_as_current_span("task.update") as span:
            span.set_attribute("task.id", str(task_id))

            task = self._repository.get(task_id)

            # Validate every supplied field before touching the task
            status = task.status
            if data.title is not None:
                validate_title(data.title)
            if data.status is not None:
                status = validate_status(data.status)

            if data.title is not None:
                task.title = data.title
            if data.description is not None:
                task.description = data.description
            task.status = status
            task.updated_at = max(self._clock(), task.updated_at + _TICK, task.created_at)

            self._repository.update(task)

            span.set_attribute("task.status", task.status.value)
            logger.info(f"Task updated: {task.id}")

            return task

    def delete_task(self, task_id: uuid.UUID) -> None:
        with tracer.start_as_current_span("task.delete") as span:
            span.set_attribute("task.id", str(task_id))

            self._repository.delete(task_id)

            tasks_deleted.add(1)
            logger.info(f"Task deleted: {task_id}")
