"""Sample data for local development."""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import click
from flask import Flask, current_app
from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session

from task_manager.database import TaskRow
from task_manager.models import TaskStatus
from task_manager.repository.sql import format_timestamp


logger = logging.getLogger(__name__)

SAMPLE_TASKS: list[tuple[str, str, TaskStatus]] = [
    ("Buy groceries", "Milk, eggs, bread, and vegetables", TaskStatus.NEW),
    ("Complete project report", "Finish the quarterly project report and submit to manager", TaskStatus.IN_PROGRESS),
    ("Call dentist", "Schedule annual checkup appointment", TaskStatus.NEW),
    ("Review code changes", "Review pull request #123 for the new feature", TaskStatus.IN_PROGRESS),
    ("Update documentation", "Update API documentation with latest endpoints", TaskStatus.NEW),
    ("Fix bug in login", "Investigate and fix authentication issue reported by users", TaskStatus.IN_PROGRESS),
    ("Plan team meeting", "Organize agenda and book conference room for next week", TaskStatus.NEW),
    ("Deploy to staging", "Deploy latest version to staging environment and run smoke tests", TaskStatus.DONE),
    ("Write unit tests", "Add unit tests for the new service layer", TaskStatus.IN_PROGRESS),
    ("Update dependencies", "Update pinned packages and check for security vulnerabilities", TaskStatus.NEW),
    ("Design new feature", "Create mockups and technical design for user dashboard", TaskStatus.NEW),
    ("Optimize database queries", "Review and optimize slow queries in task repository", TaskStatus.IN_PROGRESS),
    ("Setup CI/CD pipeline", "Configure GitHub Actions for automated testing and deployment", TaskStatus.DONE),
    ("Refactor legacy code", "Refactor old authentication module to use new patterns", TaskStatus.NEW),
    ("Write blog post", "Draft blog post about Python best practices for the company blog", TaskStatus.NEW),
    ("Conduct code review", "Review and provide feedback on 5 pending pull requests", TaskStatus.IN_PROGRESS),
    ("Setup monitoring", "Configure dashboards and alerts for application metrics", TaskStatus.DONE),
    ("Create API documentation", "Generate OpenAPI spec and publish to documentation site", TaskStatus.IN_PROGRESS),
    ("Implement caching", "Add a caching layer for frequently accessed data", TaskStatus.NEW),
    ("Security audit", "Perform security audit and fix identified vulnerabilities", TaskStatus.NEW),
    ("Performance testing", "Run load tests and identify bottlenecks", TaskStatus.IN_PROGRESS),
    ("Update README", "Update project README with latest setup instructions", TaskStatus.DONE),
    ("Setup error tracking", "Integrate error tracking and alerting", TaskStatus.NEW),
    ("Create user guide", "Write comprehensive user guide for the application", TaskStatus.NEW),
    ("Backup database", "Create automated backup strategy for production database", TaskStatus.DONE),
]


def count_tasks(engine: Engine) -> int:
    with Session(engine) as session:
        return session.scalar(select(func.count()).select_from(TaskRow)) or 0


def seed_tasks(engine: Engine, now: datetime | None = None) -> int:
    """Insert the sample tasks whose titles are not stored yet.

    Creation times are spread over the past days; tasks that are in
    progress or done get a later ``updated_at``.

    Args:
        engine: Engine to write through.
        now: Reference time, defaults to the current UTC time.

    Returns:
        Number of tasks inserted.
    """
    now = now or datetime.now(timezone.utc)
    inserted = 0

    with Session(engine) as session, session.begin():
        existing = set(session.scalars(select(TaskRow.title)))

        for i, (title, description, status) in enumerate(SAMPLE_TASKS):
            if title in existing:
                continue

            created_at = now - timedelta(hours=i * 3)
            updated_at = created_at
            if status in (TaskStatus.IN_PROGRESS, TaskStatus.DONE):
                updated_at = created_at + timedelta(hours=i * 2)

            session.add(
                TaskRow(
                    id=str(uuid.uuid4()),
                    title=title,
                    description=description,
                    status=status.value,
                    created_at=format_timestamp(created_at),
                    updated_at=format_timestamp(updated_at),
                )
            )
            inserted += 1

    logger.info(f"Seeded {inserted} tasks")
    return inserted


def seed_if_empty(engine: Engine) -> None:
    """Seed the database at startup unless it already holds tasks."""
    total = count_tasks(engine)
    if total:
        logger.info(f"Database already contains {total} tasks, skipping seed")
        return
    seed_tasks(engine)


def register_commands(app: Flask) -> None:
    """Register the ``seed`` CLI command.

    Args:
        app: Flask application instance.
    """

    @app.cli.command("seed")
    def seed_command() -> None:
        """Insert sample tasks into the database."""
        inserted = seed_tasks(current_app.extensions["task_engine"])
        click.echo(f"Inserted {inserted} sample tasks")
