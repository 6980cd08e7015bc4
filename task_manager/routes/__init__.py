"""API route blueprints."""

from task_manager.routes.health import health_bp
from task_manager.routes.tasks import tasks_bp


__all__ = ["health_bp", "tasks_bp"]
