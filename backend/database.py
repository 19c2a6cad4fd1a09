import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from errors import StoreError, TaskNotFoundError
from models import Task, TaskCreate

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT,
        due_date TEXT,
        duration INTEGER,
        status TEXT NOT NULL DEFAULT 'pending'
            CHECK (status IN ('pending', 'in_progress', 'completed')),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
"""

# Columns a caller may replace through update()
UPDATABLE_FIELDS = ("title", "description", "due_date", "duration", "status")


def _to_db(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        due_date=row["due_date"],
        duration=row["duration"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TaskStore:
    """CRUD over the tasks table. Datetimes are stored as ISO-8601 text."""

    def __init__(self, database_path: str):
        self.database_path = database_path

    @contextmanager
    def get_db(self):
        """Context manager for database connections."""
        try:
            conn = sqlite3.connect(self.database_path)
        except sqlite3.Error as e:
            logger.exception("Could not open database %s", self.database_path)
            raise StoreError("Database unavailable", cause=e) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            logger.exception("Database operation failed")
            raise StoreError("Database operation failed", cause=e) from e
        finally:
            conn.close()

    def init_db(self):
        """Create the tasks table if it does not exist yet."""
        with self.get_db() as conn:
            conn.execute(SCHEMA)
            conn.commit()

    def list_all(self) -> list[Task]:
        with self.get_db() as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY id").fetchall()
            return [_row_to_task(row) for row in rows]

    def get(self, task_id: int) -> Task:
        with self.get_db() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if not row:
            raise TaskNotFoundError(task_id)
        return _row_to_task(row)

    def insert(self, task: TaskCreate) -> Task:
        """Insert a task; id, created_at and updated_at are assigned here."""
        now = datetime.now().isoformat()
        with self.get_db() as conn:
            cursor = conn.execute(
                """INSERT INTO tasks
                   (title, description, due_date, duration, status, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    task.title,
                    task.description,
                    _to_db(task.due_date),
                    task.duration,
                    task.status,
                    now,
                    now,
                ),
            )
            conn.commit()
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (cursor.lastrowid,)).fetchone()
        logger.info("Created task %s", row["id"])
        return _row_to_task(row)

    def update(self, task_id: int, fields: dict) -> Task:
        """
        Replace the given fields of a task and refresh updated_at.
        Unknown keys (including id and created_at) are ignored.
        """
        changes = {name: _to_db(value) for name, value in fields.items() if name in UPDATABLE_FIELDS}
        changes["updated_at"] = datetime.now().isoformat()

        with self.get_db() as conn:
            set_clause = ", ".join(f"{name} = ?" for name in changes)
            values = list(changes.values()) + [task_id]
            cursor = conn.execute(f"UPDATE tasks SET {set_clause} WHERE id = ?", values)
            if cursor.rowcount == 0:
                raise TaskNotFoundError(task_id)
            conn.commit()
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(row)

    def delete(self, task_id: int) -> Task:
        """Delete a task and return the removed record."""
        with self.get_db() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if not row:
                raise TaskNotFoundError(task_id)
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
        logger.info("Deleted task %s", task_id)
        return _row_to_task(row)
