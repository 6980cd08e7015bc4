"""Service modules."""

from task_manager.services.tasks import DEFAULT_PAGE_SIZE, TaskService


__all__ = ["TaskService", "DEFAULT_PAGE_SIZE"]
