"""Health check endpoint."""

import logging

from flask import Blueprint, current_app, jsonify

from task_manager.errors import error_response
from task_manager.exceptions import StorageError
from task_manager.middleware.deadline import request_deadline


logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
@request_deadline
def health_check():
    """Liveness probe backed by a store round trip.

    Returns:
        ``{"status": "ok"}`` with 200, or an error body with 503.
    """
    try:
        current_app.extensions["task_service"].ping()
    except StorageError as exc:
        logger.warning(f"Health check failed: {exc.__cause__ or exc!r}")
        return error_response("Server is not available", 503)

    return jsonify({"status": "ok"})
