"""Task CRUD endpoints."""

import logging
import re
import uuid

from flask import Blueprint, current_app, jsonify, request
from marshmallow import ValidationError

from task_manager.exceptions import (
    InvalidIdentifier,
    InvalidPayload,
    InvalidQueryParam,
    InvalidStatus,
)
from task_manager.middleware.deadline import request_deadline
from task_manager.models import TaskStatus
from task_manager.schemas import TaskCreateSchema, TaskSchema, TaskUpdateSchema
from task_manager.services import TaskService


logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)

INVALID_LIMIT = "Invalid limit! Limit value must be greater than zero"
INVALID_OFFSET = "Invalid offset! Offset value must be zero or greater"

_INTEGER = re.compile(r"[+-]?[0-9]+")

# Signed 64-bit bounds, the widest integer SQLite binds
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _service() -> TaskService:
    return current_app.extensions["task_service"]


def _parse_task_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise InvalidIdentifier() from None


def _parse_int(name: str, message: str, minimum: int, default: int) -> int:
    raw = request.args.get(name, "")
    if raw == "":
        return default
    if not _INTEGER.fullmatch(raw):
        raise InvalidQueryParam(message)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX or value < minimum:
        raise InvalidQueryParam(message)
    return value


def _load_json(schema):
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        raise InvalidPayload()
    try:
        return schema.load(payload)
    except ValidationError as err:
        logger.debug(f"Rejected payload: {err.messages}")
        raise InvalidPayload() from None


@tasks_bp.route("/tasks", methods=["POST"])
@request_deadline
def create_task():
    """Create a new task.

    Returns:
        JSON response with the created task and 201 status.
    """
    data = _load_json(TaskCreateSchema())
    task = _service().create_task(data)
    return jsonify(TaskSchema().dump(task)), 201


@tasks_bp.route("/tasks", methods=["GET"])
@request_deadline
def list_tasks():
    """List tasks newest first.

    Query params:
        status: Only tasks with this status (new, in_progress, done)
        limit: Page size, greater than zero (default 50)
        offset: Rows to skip, zero or greater (default 0)

    Returns:
        JSON array of tasks, possibly empty.
    """
    status = None
    raw_status = request.args.get("status", "")
    if raw_status:
        try:
            status = TaskStatus(raw_status)
        except ValueError:
            raise InvalidStatus() from None

    limit = _parse_int("limit", INVALID_LIMIT, minimum=1, default=0)
    offset = _parse_int("offset", INVALID_OFFSET, minimum=0, default=0)

    tasks = _service().list_tasks(status=status, limit=limit, offset=offset)
    return jsonify(TaskSchema(many=True).dump(tasks))


@tasks_bp.route("/tasks/<task_id>", methods=["GET"])
@request_deadline
def get_task(task_id: str):
    """Get a single task by id.

    Args:
        task_id: Task UUID.

    Returns:
        JSON response with task data.
    """
    task = _service().get_task(_parse_task_id(task_id))
    return jsonify(TaskSchema().dump(task))


@tasks_bp.route("/tasks/<task_id>", methods=["PUT"])
@request_deadline
def update_task(task_id: str):
    """Partially update a task.

    Only fields present in the body change.

    Args:
        task_id: Task UUID.

    Returns:
        JSON response with the updated task.
    """
    parsed_id = _parse_task_id(task_id)
    data = _load_json(TaskUpdateSchema())
    task = _service().update_task(parsed_id, data)
    return jsonify(TaskSchema().dump(task))


@tasks_bp.route("/tasks/<task_id>", methods=["DELETE"])
@request_deadline
def delete_task(task_id: str):
    """Delete a task.

    Args:
        task_id: Task UUID.

    Returns:
        Empty response with 204 status.
    """
    _service().delete_task(_parse_task_id(task_id))
    return "", 204
