"""Error handlers with OpenTelemetry trace context."""

import logging

from flask import Flask, jsonify
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from task_manager.exceptions import StorageError, TaskManagerError


logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int) -> tuple:
    """Create error response with trace context.

    Args:
        message: Error message.
        status_code: HTTP status code.

    Returns:
        Tuple of (response, status_code).
    """
    response = {
        "error": message,
        "status": status_code,
    }

    # Add trace ID for debugging
    span = trace.get_current_span()
    span_context = span.get_span_context()
    if span_context.is_valid:
        response["trace_id"] = format(span_context.trace_id, "032x")

    return jsonify(response), status_code


def register_error_handlers(app: Flask) -> None:
    """Register error handlers on Flask app.

    Domain errors carry their own message and status; raw storage errors
    are logged and never sent to the client.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(TaskManagerError)
    def task_manager_error(error: TaskManagerError):
        span = trace.get_current_span()
        if isinstance(error, StorageError):
            cause = error.__cause__ or error
            logger.error(f"Storage failure: {cause!r}", exc_info=cause)
            if span.is_recording():
                span.record_exception(cause)
                span.set_status(Status(StatusCode.ERROR, type(error).__name__))
        elif span.is_recording():
            span.set_attribute("error.type", type(error).__name__)

        return error_response(error.message, error.status_code)

    @app.errorhandler(400)
    def bad_request(error):
        return error_response("Bad request", 400)

    @app.errorhandler(404)
    def not_found(error):
        return error_response("Not found!", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        response, status_code = error_response(
            "Method not allowed. Please use the appropriate method for this operation", 405
        )
        if getattr(error, "valid_methods", None):
            response.headers["Allow"] = ", ".join(error.valid_methods)
        return response, status_code

    @app.errorhandler(500)
    def internal_error(error):
        return error_response("Internal server error", 500)
