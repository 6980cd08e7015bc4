"""Task persistence adapters."""

from task_manager.repository.base import TaskFilter, TaskRepository
from task_manager.repository.memory import InMemoryTaskRepository
from task_manager.repository.sql import SQLTaskRepository


__all__ = ["TaskFilter", "TaskRepository", "SQLTaskRepository", "InMemoryTaskRepository"]
