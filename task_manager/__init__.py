"""Flask application factory with OpenTelemetry instrumentation."""

import logging
import os

from flask import Flask

from task_manager.repository import TaskRepository


def create_app(
    config_class: type | None = None,
    repository: TaskRepository | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to Config.
        repository: Task store to serve from. Defaults to the SQL store
            at DATABASE_URL.

    Returns:
        Configured Flask application instance.
    """
    # Initialize telemetry BEFORE creating Flask app
    if not os.getenv("OTEL_SDK_DISABLED"):
        from task_manager.telemetry import (
            get_otel_log_handler,
            instrument_engine,
            instrument_flask_app,
            setup_telemetry,
        )

        setup_telemetry()

    app = Flask(__name__)

    # Instrument Flask app (needed for Gunicorn worker forks)
    if not os.getenv("OTEL_SDK_DISABLED"):
        instrument_flask_app(app)

    # Load configuration
    if config_class is None:
        from task_manager.config import Config

        config_class = Config
    app.config.from_object(config_class)

    # Storage
    from task_manager.services import TaskService

    engine = None
    if repository is None:
        from task_manager.database import build_engine, init_db
        from task_manager.repository import SQLTaskRepository

        engine = build_engine(app.config["DATABASE_URL"], **app.config.get("DATABASE_ENGINE_OPTIONS", {}))
        if not os.getenv("OTEL_SDK_DISABLED"):
            instrument_engine(engine)
        init_db(engine)

        repository = SQLTaskRepository(engine)
        app.extensions["task_engine"] = engine

    app.extensions["task_service"] = TaskService(
        repository,
        default_page_size=app.config.get("DEFAULT_PAGE_SIZE", 50),
    )

    # Register blueprints
    from task_manager.routes.health import health_bp
    from task_manager.routes.tasks import tasks_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(tasks_bp)

    # Register error handlers
    from task_manager.errors import register_error_handlers

    register_error_handlers(app)

    # Register metrics middleware
    if not os.getenv("OTEL_SDK_DISABLED"):
        from task_manager.middleware.metrics import register_metrics_middleware

        register_metrics_middleware(app)

    # Attach OTel log handler after app setup
    if not os.getenv("OTEL_SDK_DISABLED"):
        handler = get_otel_log_handler()
        if handler:
            root_logger = logging.getLogger()
            if handler not in root_logger.handlers:
                root_logger.addHandler(handler)

    _configure_logging()

    # Sample data goes through the SQL engine only
    if engine is not None:
        from task_manager.seed import register_commands, seed_if_empty

        register_commands(app)
        if app.config.get("SEED_DATA"):
            seed_if_empty(engine)

    return app


def _configure_logging() -> None:
    """Configure logging for the application."""
    # App loggers propagate to root, where the OTel handler is
    logging.getLogger("task_manager").setLevel(logging.DEBUG)
    logging.getLogger("task_manager").propagate = True

    # Reduce noise from framework loggers
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").propagate = False

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
