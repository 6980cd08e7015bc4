"""In-memory task repository for tests and local experiments."""

import dataclasses
import threading
import uuid

from task_manager import deadline
from task_manager.exceptions import StorageError, TaskNotFound
from task_manager.models import Task
from task_manager.repository.base import TaskFilter


class InMemoryTaskRepository:
    """Dictionary-backed repository with the same contract as the SQL one.

    Stored tasks are copied on the way in and out so callers can never
    mutate the store by holding a reference.
    """

    def __init__(self) -> None:
        self._tasks: dict[uuid.UUID, Task] = {}
        self._lock = threading.Lock()
        self.healthy = True

    def create(self, task: Task) -> None:
        deadline.check()
        with self._lock:
            if task.id in self._tasks:
                raise StorageError(f"duplicate task id {task.id}")
            self._tasks[task.id] = dataclasses.replace(task)

    def get(self, task_id: uuid.UUID) -> Task:
        deadline.check()
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFound()
            return dataclasses.replace(task)

    def list(self, task_filter: TaskFilter) -> list[Task]:
        deadline.check()
        with self._lock:
            tasks = [
                dataclasses.replace(task)
                for task in self._tasks.values()
                if task_filter.status is None or task.status == task_filter.status
            ]

        tasks.sort(key=lambda task: task.created_at, reverse=True)
        if task_filter.offset > 0:
            tasks = tasks[task_filter.offset :]
        if task_filter.limit > 0:
            tasks = tasks[: task_filter.limit]
        return tasks

    def update(self, task: Task) -> None:
        deadline.check()
        with self._lock:
            stored = self._tasks.get(task.id)
            if stored is None:
                raise TaskNotFound()
            self._tasks[task.id] = dataclasses.replace(
                stored,
                title=task.title,
                description=task.description,
                status=task.status,
                updated_at=task.updated_at,
            )

    def delete(self, task_id: uuid.UUID) -> None:
        deadline.check()
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise TaskNotFound()

    def ping(self) -> None:
        if not self.healthy:
            raise StorageError("store unavailable")

    def __len__(self) -> int:
        return len(self._tasks)
