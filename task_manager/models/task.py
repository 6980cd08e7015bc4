"""Task entity and validation rules."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from task_manager.exceptions import InvalidStatus, TitleTooShort


MIN_TITLE_LENGTH = 3


class TaskStatus(StrEnum):
    """Task lifecycle status. Transitions are unconstrained."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class Task:
    """A persisted work item."""

    id: uuid.UUID
    title: str
    description: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class CreateTaskInput:
    title: str
    description: str = ""


@dataclass(frozen=True)
class UpdateTaskInput:
    """Partial update. ``None`` means the field was not supplied."""

    title: str | None = None
    description: str | None = None
    status: str | None = None


def validate_title(title: str) -> None:
    """Ensure the title has at least ``MIN_TITLE_LENGTH`` characters.

    Raises:
        TitleTooShort: If the title is too short.
    """
    if len(title) < MIN_TITLE_LENGTH:
        raise TitleTooShort()


def validate_status(value: str) -> TaskStatus:
    """Convert a raw status string into a ``TaskStatus``.

    Matching is exact and case-sensitive.

    Raises:
        InvalidStatus: If the value is not one of the known statuses.
    """
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        raise InvalidStatus() from None
