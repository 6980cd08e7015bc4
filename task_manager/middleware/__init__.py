"""Middleware modules."""

from task_manager.middleware.deadline import request_deadline
from task_manager.middleware.metrics import register_metrics_middleware


__all__ = ["request_deadline", "register_metrics_middleware"]
