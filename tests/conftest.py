"""Pytest fixtures for task manager testing."""

import os

import pytest


# Disable OpenTelemetry for tests
os.environ["OTEL_SDK_DISABLED"] = "true"


@pytest.fixture
def app():
    """Create test application backed by in-memory SQLite."""
    from task_manager import create_app
    from task_manager.config import TestConfig

    app = create_app(TestConfig)
    app.config["TESTING"] = True

    yield app

    app.extensions["task_engine"].dispose()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def engine():
    """Create a fresh in-memory database."""
    from task_manager.database import build_engine, init_db

    engine = build_engine("sqlite://")
    init_db(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def sql_repository(engine):
    from task_manager.repository import SQLTaskRepository

    return SQLTaskRepository(engine)


@pytest.fixture
def memory_repository():
    from task_manager.repository import InMemoryTaskRepository

    return InMemoryTaskRepository()


@pytest.fixture
def service(memory_repository):
    """Task service over the in-memory repository."""
    from task_manager.services import TaskService

    return TaskService(memory_repository)


@pytest.fixture
def create_task(client):
    """Create a task through the API and return its JSON body."""

    def _create(title="Buy milk", description="2%"):
        response = client.post("/tasks", json={"title": title, "description": description})
        assert response.status_code == 201
        return response.get_json()

    return _create
