"""Tests for the task service over the in-memory repository."""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from task_manager.exceptions import InvalidStatus, StorageError, TaskNotFound, TitleTooShort
from task_manager.models import CreateTaskInput, TaskStatus, UpdateTaskInput
from task_manager.repository import InMemoryTaskRepository, TaskFilter
from task_manager.services import DEFAULT_PAGE_SIZE, TaskService


class FixedClock:
    """Clock returning a fixed instant until advanced."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def clocked_service(memory_repository, clock):
    return TaskService(memory_repository, clock=clock)


class TestCreateTask:
    def test_create_assigns_identity_status_and_timestamps(self, service):
        task = service.create_task(CreateTaskInput(title="Buy milk", description="2%"))

        assert isinstance(task.id, uuid.UUID)
        assert task.title == "Buy milk"
        assert task.description == "2%"
        assert task.status is TaskStatus.NEW
        assert task.created_at == task.updated_at
        assert task.created_at.tzinfo is not None

    def test_create_generates_unique_ids(self, service):
        first = service.create_task(CreateTaskInput(title="First task"))
        second = service.create_task(CreateTaskInput(title="First task"))
        assert first.id != second.id

    @pytest.mark.parametrize("title", ["", "a", "ab"])
    def test_short_title_is_rejected_without_write(self, title):
        repository = MagicMock()
        service = TaskService(repository)

        with pytest.raises(TitleTooShort):
            service.create_task(CreateTaskInput(title=title, description="desc"))

        repository.create.assert_not_called()

    def test_created_task_can_be_read_back(self, service):
        created = service.create_task(CreateTaskInput(title="Read me back", description="d"))
        assert service.get_task(created.id) == created

    def test_storage_failure_propagates(self):
        repository = MagicMock()
        repository.create.side_effect = StorageError()
        service = TaskService(repository)

        with pytest.raises(StorageError):
            service.create_task(CreateTaskInput(title="Valid title"))


class TestGetTask:
    def test_get_missing_task(self, service):
        with pytest.raises(TaskNotFound):
            service.get_task(uuid.uuid4())


class TestListTasks:
    def test_list_empty(self, service):
        assert service.list_tasks() == []

    def test_filter_by_status(self, service):
        new_task = service.create_task(CreateTaskInput(title="Still new"))
        started = service.create_task(CreateTaskInput(title="Started"))
        service.update_task(started.id, UpdateTaskInput(status="in_progress"))

        in_progress = service.list_tasks(status=TaskStatus.IN_PROGRESS)
        assert [t.id for t in in_progress] == [started.id]
        assert all(t.status is TaskStatus.IN_PROGRESS for t in in_progress)

        everything = service.list_tasks()
        assert {t.id for t in everything} == {new_task.id, started.id}

    def test_newest_first(self, clocked_service, clock):
        older = clocked_service.create_task(CreateTaskInput(title="Older"))
        clock.advance(seconds=1)
        newer = clocked_service.create_task(CreateTaskInput(title="Newer"))

        assert [t.id for t in clocked_service.list_tasks()] == [newer.id, older.id]

    @pytest.mark.parametrize("limit", [0, -1, -50])
    def test_non_positive_limit_uses_default_page_size(self, limit):
        repository = MagicMock()
        repository.list.return_value = []
        service = TaskService(repository)

        assert service.list_tasks(limit=limit, offset=3) == []
        repository.list.assert_called_once_with(
            TaskFilter(status=None, limit=DEFAULT_PAGE_SIZE, offset=3)
        )

    def test_limit_and_offset(self, clocked_service, clock):
        ids = []
        for i in range(5):
            ids.append(clocked_service.create_task(CreateTaskInput(title=f"Task {i}")).id)
            clock.advance(seconds=1)

        page = clocked_service.list_tasks(limit=2, offset=1)
        assert [t.id for t in page] == [ids[3], ids[2]]


class TestUpdateTask:
    def test_update_title_only(self, clocked_service, clock):
        created = clocked_service.create_task(CreateTaskInput(title="Old title", description="keep"))
        clock.advance(seconds=5)

        updated = clocked_service.update_task(created.id, UpdateTaskInput(title="new title"))
        fetched = clocked_service.get_task(created.id)

        assert fetched == updated
        assert fetched.title == "new title"
        assert fetched.description == "keep"
        assert fetched.status is TaskStatus.NEW
        assert fetched.created_at == created.created_at
        assert fetched.updated_at > created.updated_at

    def test_updated_at_strictly_increases_when_clock_stalls(self, clocked_service):
        created = clocked_service.create_task(CreateTaskInput(title="Stalled clock"))

        first = clocked_service.update_task(created.id, UpdateTaskInput(description="one"))
        second = clocked_service.update_task(created.id, UpdateTaskInput(description="two"))

        assert created.updated_at < first.updated_at < second.updated_at

    def test_updated_at_never_before_created_at(self, clocked_service, clock):
        created = clocked_service.create_task(CreateTaskInput(title="Clock skew"))
        clock.advance(hours=-1)

        updated = clocked_service.update_task(created.id, UpdateTaskInput(status="done"))

        assert updated.updated_at > updated.created_at

    def test_empty_description_clears_it(self, service):
        created = service.create_task(CreateTaskInput(title="Has text", description="text"))

        updated = service.update_task(created.id, UpdateTaskInput(description=""))

        assert updated.description == ""

    def test_any_status_transition_is_allowed(self, service):
        created = service.create_task(CreateTaskInput(title="Round trip"))

        for status in ("done", "new", "in_progress", "new"):
            updated = service.update_task(created.id, UpdateTaskInput(status=status))
            assert updated.status == status

    def test_invalid_status_leaves_task_unchanged(self, service):
        created = service.create_task(CreateTaskInput(title="Unchanged"))

        with pytest.raises(InvalidStatus):
            service.update_task(created.id, UpdateTaskInput(title="Changed", status="bogus"))

        assert service.get_task(created.id) == created

    def test_short_title_leaves_task_unchanged(self, service):
        created = service.create_task(CreateTaskInput(title="Unchanged"))

        with pytest.raises(TitleTooShort):
            service.update_task(created.id, UpdateTaskInput(title="no", status="done"))

        assert service.get_task(created.id) == created

    def test_update_missing_task(self, service):
        with pytest.raises(TaskNotFound):
            service.update_task(uuid.uuid4(), UpdateTaskInput(title="Whatever"))

    def test_validation_runs_before_write(self):
        repository = InMemoryTaskRepository()
        service = TaskService(repository)
        created = service.create_task(CreateTaskInput(title="Spy on writes"))

        spy = MagicMock(wraps=repository)
        spied_service = TaskService(spy)
        with pytest.raises(InvalidStatus):
            spied_service.update_task(created.id, UpdateTaskInput(status="bogus"))

        spy.update.assert_not_called()


class TestDeleteTask:
    def test_delete_then_get(self, service):
        created = service.create_task(CreateTaskInput(title="Delete me"))

        service.delete_task(created.id)

        with pytest.raises(TaskNotFound):
            service.get_task(created.id)

    def test_delete_twice(self, service):
        created = service.create_task(CreateTaskInput(title="Delete me twice"))

        service.delete_task(created.id)
        with pytest.raises(TaskNotFound):
            service.delete_task(created.id)

    def test_delete_missing(self, service):
        with pytest.raises(TaskNotFound):
            service.delete_task(uuid.uuid4())


class TestPing:
    def test_ping_healthy(self, service):
        service.ping()

    def test_ping_unhealthy(self, service, memory_repository):
        memory_repository.healthy = False
        with pytest.raises(StorageError):
            service.ping()
