"""
Tests for database.py - task CRUD, timestamps, not-found and store failures.
"""
import pytest
import sys
import os
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
from database import TaskStore
from errors import StoreError, TaskNotFoundError
from models import TaskCreate


class TestTaskCRUD:
    """Tests for basic task create/read/update/delete operations."""

    def test_create_task_basic(self, store):
        """Create a simple task with defaults."""
        task = store.insert(TaskCreate(title="Buy groceries"))

        assert task.id == 1
        assert task.title == "Buy groceries"
        assert task.description is None
        assert task.due_date is None
        assert task.duration is None
        assert task.status == "pending"
        assert task.created_at is not None
        assert task.updated_at == task.created_at

    def test_ids_are_sequential(self, store):
        first = store.insert(TaskCreate(title="Task 1"))
        second = store.insert(TaskCreate(title="Task 2"))

        assert second.id == first.id + 1

    def test_round_trip(self, store):
        """Reading a task back by id returns the inserted field values."""
        due = datetime(2026, 11, 2, 14, 30)
        created = store.insert(TaskCreate(
            title="Dentist",
            description="Bring insurance card",
            due_date=due,
            duration=45,
            status="in_progress",
        ))

        fetched = store.get(created.id)
        assert fetched == created
        assert fetched.title == "Dentist"
        assert fetched.description == "Bring insurance card"
        assert fetched.due_date == due
        assert fetched.duration == 45
        assert fetched.status == "in_progress"
        assert fetched.id is not None
        assert fetched.created_at is not None
        assert fetched.updated_at is not None

    def test_empty_description_is_kept_distinct_from_missing(self, store):
        empty = store.insert(TaskCreate(title="A", description=""))
        missing = store.insert(TaskCreate(title="B"))

        assert store.get(empty.id).description == ""
        assert store.get(missing.id).description is None

    def test_list_all_empty(self, store):
        assert store.list_all() == []

    def test_list_all_multiple(self, store):
        store.insert(TaskCreate(title="Task 1"))
        store.insert(TaskCreate(title="Task 2"))
        store.insert(TaskCreate(title="Meeting", due_date=datetime(2026, 10, 20, 10, 0)))

        tasks = store.list_all()
        assert [t.title for t in tasks] == ["Task 1", "Task 2", "Meeting"]
        assert len(store.list_all()) == 3

    def test_get_not_found(self, store):
        with pytest.raises(TaskNotFoundError) as exc_info:
            store.get(99)
        assert exc_info.value.task_id == 99

    def test_update_fields(self, store):
        created = store.insert(TaskCreate(title="Old title", duration=30))
        updated = store.update(created.id, {
            "title": "New title",
            "status": "completed",
            "due_date": None,
            "duration": None,
        })

        assert updated.title == "New title"
        assert updated.status == "completed"
        assert updated.duration is None
        assert updated.created_at == created.created_at

    def test_update_refreshes_updated_at(self, store, monkeypatch):
        created = store.insert(TaskCreate(title="Touch me"))

        class Later(datetime):
            @classmethod
            def now(cls, tz=None):
                return datetime(2030, 1, 1, 12, 0)

        monkeypatch.setattr(database, "datetime", Later)
        updated = store.update(created.id, {"description": "changed"})

        assert updated.updated_at == datetime(2030, 1, 1, 12, 0)
        assert updated.created_at == created.created_at

    def test_update_ignores_unknown_and_immutable_fields(self, store):
        created = store.insert(TaskCreate(title="Keep id"))
        updated = store.update(created.id, {"id": 500, "created_at": "2000-01-01T00:00:00", "color": "red"})

        assert updated.id == created.id
        assert updated.created_at == created.created_at

    def test_update_not_found(self, store):
        with pytest.raises(TaskNotFoundError):
            store.update(42, {"title": "New title"})

    def test_delete_task(self, store):
        created = store.insert(TaskCreate(title="Delete me"))
        deleted = store.delete(created.id)

        assert deleted.id == created.id
        assert deleted.title == "Delete me"
        assert store.list_all() == []

    def test_delete_task_not_found(self, store):
        with pytest.raises(TaskNotFoundError):
            store.delete(7)


class TestStoreFailures:
    """sqlite errors surface as StoreError, distinct from not-found."""

    def test_unreachable_database(self, tmp_path):
        broken = TaskStore(str(tmp_path / "missing-dir" / "tasks.db"))

        with pytest.raises(StoreError) as exc_info:
            broken.list_all()
        assert not isinstance(exc_info.value, TaskNotFoundError)
        assert exc_info.value.cause is not None

    def test_missing_table(self, test_db):
        uninitialized = TaskStore(test_db)

        with pytest.raises(StoreError):
            uninitialized.insert(TaskCreate(title="No table yet"))

    def test_init_db_is_idempotent(self, store):
        store.insert(TaskCreate(title="Survives"))
        store.init_db()

        assert len(store.list_all()) == 1
