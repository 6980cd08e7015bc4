"""Domain models."""

from task_manager.models.task import (
    CreateTaskInput,
    Task,
    TaskStatus,
    UpdateTaskInput,
    validate_status,
    validate_title,
)


__all__ = [
    "Task",
    "TaskStatus",
    "CreateTaskInput",
    "UpdateTaskInput",
    "validate_title",
    "validate_status",
]
