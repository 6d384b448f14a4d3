"""
Tests for app.repositories.task_repo against an in-memory store.
"""
import math
import uuid

import pytest

from app.db.models import Task, TaskPriority, TaskStatus
from app.repositories.task_query import TaskListParams
from app.repositories.task_repo import create_task, delete_task, get_task_owned, list_tasks, update_task
from app.schemas.task import TaskCreate, TaskUpdate


async def _make(db, user, title, **fields) -> Task:
    return await create_task(db, user.id, TaskCreate(title=title, **fields))


class TestCreateTask:
    """Test create_task function."""

    async def test_create_task_defaults(self, db_session, test_user):
        """Test create task defaults."""
        task = await _make(db_session, test_user, "Write unit tests")

        assert task.id is not None
        assert task.user_id == test_user.id
        assert task.title == "Write unit tests"
        assert task.description is None
        assert task.status is TaskStatus.pending
        assert task.priority is TaskPriority.medium
        assert task.created_at is not None
        assert task.updated_at is not None

    async def test_create_task_with_all_fields(self, db_session, test_user):
        """Test create task with all fields."""
        task = await _make(
            db_session, test_user, "Ship", description="v1", status="in-progress", priority="high"
        )

        assert task.description == "v1"
        assert task.status is TaskStatus.in_progress
        assert task.priority is TaskPriority.high


class TestGetTaskOwned:
    """Test get_task_owned function."""

    async def test_get_existing_task(self, db_session, test_user):
        """Test get existing task."""
        task = await _make(db_session, test_user, "Test task")

        result = await get_task_owned(db_session, test_user.id, task.id)

        assert result is not None
        assert result.id == task.id

    async def test_get_nonexistent_task(self, db_session, test_user):
        """Test get nonexistent task."""
        assert await get_task_owned(db_session, test_user.id, uuid.uuid4()) is None

    async def test_get_task_wrong_user(self, db_session, test_user, another_user):
        """A task owned by someone else looks exactly like a missing one."""
        task = await _make(db_session, test_user, "Test task")

        assert await get_task_owned(db_session, another_user.id, task.id) is None


class TestListTasks:
    """Test list_tasks function."""

    async def test_list_only_own_tasks(self, db_session, test_user, another_user):
        """Test list only own tasks."""
        await _make(db_session, test_user, "User 1 task")
        await _make(db_session, another_user, "User 2 task")

        tasks, total = await list_tasks(db_session, test_user.id, TaskListParams())

        assert total == 1
        assert [t.title for t in tasks] == ["User 1 task"]

    async def test_status_filter_returns_exact_subset(self, db_session, test_user, another_user):
        """Test status filter returns exact subset."""
        await _make(db_session, test_user, "a", status="completed")
        await _make(db_session, test_user, "b", status="pending")
        await _make(db_session, test_user, "c", status="completed")
        await _make(db_session, another_user, "d", status="completed")

        tasks, total = await list_tasks(db_session, test_user.id, TaskListParams.from_query(status="completed"))

        assert total == 2
        assert sorted(t.title for t in tasks) == ["a", "c"]
        assert all(t.user_id == test_user.id for t in tasks)

    async def test_priority_filter(self, db_session, test_user):
        """Test priority filter."""
        await _make(db_session, test_user, "low one", priority="low")
        await _make(db_session, test_user, "high one", priority="high")

        tasks, total = await list_tasks(db_session, test_user.id, TaskListParams.from_query(priority="high"))

        assert total == 1
        assert tasks[0].title == "high one"

    async def test_unknown_status_matches_nothing(self, db_session, test_user):
        """Test unknown status matches nothing."""
        await _make(db_session, test_user, "a")

        tasks, total = await list_tasks(db_session, test_user.id, TaskListParams.from_query(status="archived"))

        assert tasks == []
        assert total == 0

    async def test_search_title_or_description_case_insensitive(self, db_session, test_user):
        """Test search title or description case insensitive."""
        await _make(db_session, test_user, "Buy MILK")
        await _make(db_session, test_user, "Errands", description="milk and bread")
        await _make(db_session, test_user, "Gym")

        tasks, total = await list_tasks(db_session, test_user.id, TaskListParams.from_query(search="milk"))

        assert total == 2
        assert sorted(t.title for t in tasks) == ["Buy MILK", "Errands"]

    async def test_search_wildcards_match_literally(self, db_session, test_user):
        """Test search wildcards match literally."""
        await _make(db_session, test_user, "Reach 100% coverage")
        await _make(db_session, test_user, "Reach 1000 users")

        tasks, _ = await list_tasks(db_session, test_user.id, TaskListParams.from_query(search="100%"))

        assert [t.title for t in tasks] == ["Reach 100% coverage"]

    async def test_newest_first_by_default(self, db_session, test_user):
        """Test newest first by default."""
        for title in ("First", "Second", "Third"):
            await _make(db_session, test_user, title)

        tasks, _ = await list_tasks(db_session, test_user.id, TaskListParams())

        assert [t.title for t in tasks] == ["Third", "Second", "First"]

    async def test_oldest_is_reverse_of_newest(self, db_session, test_user):
        """Test oldest is reverse of newest."""
        for i in range(6):
            await _make(db_session, test_user, f"Task {i}")

        newest, _ = await list_tasks(db_session, test_user.id, TaskListParams.from_query(sort="newest"))
        oldest, _ = await list_tasks(db_session, test_user.id, TaskListParams.from_query(sort="oldest"))

        assert [t.id for t in newest] == [t.id for t in reversed(oldest)]

    @pytest.mark.parametrize("limit", [1, 3, 4, 7])
    async def test_pages_concatenate_to_full_result(self, db_session, test_user, limit):
        """Test pages concatenate to full result."""
        for i in range(7):
            await _make(db_session, test_user, f"Task {i}")

        full, total = await list_tasks(db_session, test_user.id, TaskListParams(limit=100))
        collected = []
        for page in range(1, math.ceil(total / limit) + 1):
            rows, page_total = await list_tasks(db_session, test_user.id, TaskListParams(page=page, limit=limit))
            assert page_total == total
            collected.extend(rows)

        assert [t.id for t in collected] == [t.id for t in full]

    async def test_page_past_end_is_empty(self, db_session, test_user):
        """Test page past end is empty."""
        await _make(db_session, test_user, "only")

        tasks, total = await list_tasks(db_session, test_user.id, TaskListParams(page=5, limit=10))

        assert tasks == []
        assert total == 1


class TestUpdateTask:
    """Test update_task function."""

    async def test_only_supplied_fields_change(self, db_session, test_user):
        """Test only supplied fields change."""
        task = await _make(db_session, test_user, "Keep", description="same", priority="low")

        updated = await update_task(db_session, task, TaskUpdate(status="completed"))

        assert updated.status is TaskStatus.completed
        assert updated.title == "Keep"
        assert updated.description == "same"
        assert updated.priority is TaskPriority.low

    async def test_description_can_be_cleared(self, db_session, test_user):
        """Test description can be cleared."""
        task = await _make(db_session, test_user, "Keep", description="remove me")

        updated = await update_task(db_session, task, TaskUpdate(description=None))

        assert updated.description is None

    async def test_owner_never_changes(self, db_session, test_user):
        """Test owner never changes."""
        task = await _make(db_session, test_user, "Keep")

        updated = await update_task(db_session, task, TaskUpdate(title="Renamed", priority="high"))

        assert updated.title == "Renamed"
        assert updated.user_id == test_user.id


class TestDeleteTask:
    """Test delete_task function."""

    async def test_delete_removes_row(self, db_session, test_user):
        """Test delete removes row."""
        task = await _make(db_session, test_user, "Gone soon")

        await delete_task(db_session, task)

        assert await get_task_owned(db_session, test_user.id, task.id) is None
