"""SQLAlchemy engine, row model and schema creation."""

import logging
import time
from typing import Any

from sqlalchemy import Engine, String, Text, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from task_manager import deadline


logger = logging.getLogger(__name__)

# SQLite virtual machine instructions between deadline checks
PROGRESS_HANDLER_STEPS = 1000


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class TaskRow(Base):
    """Stored representation of a task. Every column is text encoded."""

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<TaskRow {self.id}>"


def _abort_when_expired() -> int:
    expires_at = deadline.expires_at()
    if expires_at is not None and time.monotonic() >= expires_at:
        return 1
    return 0


def build_engine(url: str, **options: Any) -> Engine:
    """Create an engine for ``url`` with deadline enforcement on SQLite.

    In-memory SQLite URLs share a single connection so every session sees
    the same database.

    Args:
        url: SQLAlchemy database URL.
        **options: Extra keyword arguments for ``create_engine``.

    Returns:
        Configured SQLAlchemy engine.
    """
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = options.setdefault("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        if url in ("sqlite://", "sqlite:///:memory:"):
            options.setdefault("poolclass", StaticPool)

    engine = create_engine(url, **options)

    if is_sqlite:

        @event.listens_for(engine, "connect")
        def _install_progress_handler(dbapi_conn, connection_record):
            dbapi_conn.set_progress_handler(_abort_when_expired, PROGRESS_HANDLER_STEPS)

    return engine


def init_db(engine: Engine) -> None:
    """Create the tasks table if it does not exist."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready", extra={"url": engine.url.render_as_string()})
