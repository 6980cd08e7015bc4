"""Persistence contract for tasks.

The service depends only on :class:`TaskRepository`; any object providing
these methods can stand in for the SQL store.
"""

import uuid
from dataclasses import dataclass
from typing import Protocol

from task_manager.models import Task, TaskStatus


@dataclass(frozen=True)
class TaskFilter:
    """Status predicate plus pagination for list queries.

    ``limit <= 0`` and ``offset <= 0`` apply no cap and no skip at this
    layer; the service always supplies a positive limit.
    """

    status: TaskStatus | None = None
    limit: int = 0
    offset: int = 0


class TaskRepository(Protocol):
    def create(self, task: Task) -> None: ...

    def get(self, task_id: uuid.UUID) -> Task: ...

    def list(self, task_filter: TaskFilter) -> list[Task]: ...

    def update(self, task: Task) -> None: ...

    def delete(self, task_id: uuid.UUID) -> None: ...

    def ping(self) -> None: ...
