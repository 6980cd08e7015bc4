"""Marshmallow schemas for serialization and validation."""

from task_manager.schemas.task import TaskCreateSchema, TaskSchema, TaskUpdateSchema


__all__ = ["TaskSchema", "TaskCreateSchema", "TaskUpdateSchema"]
