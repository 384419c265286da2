"""
SQLite task store
"""

import contextlib
import re
import sqlite3
import threading
import uuid
from datetime import date
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple, Union
from todo_manager.config.constants import (
    TASK_ID_PATTERN,
    TASK_DEFAULT_STATUS,
    TASK_DEFAULT_PRIORITY,
    TASK_DEFAULT_CATEGORY,
)
from todo_manager.models.task import Task, TaskStatus, TaskPriority, TaskCategory, clean_title
from todo_manager.utils.date_parser import parse_due_date
from todo_manager.utils.date_utils import get_current_datetime, to_timestamp, from_timestamp
from todo_manager.utils.error_handler import ValidationError, StoreFault
from todo_manager.utils.logger import logger

_ID_RE = re.compile(TASK_ID_PATTERN)

UPDATABLE_FIELDS = ("title", "status", "priority", "category", "due_date")


def is_valid_task_id(task_id: str) -> bool:
    """Check that a task id has the format the store generates"""
    return bool(task_id) and bool(_ID_RE.match(task_id))


def _enum_value(enum_cls, value: Any, field: str) -> str:
    """Validate a value against an enumeration and return its string value"""
    if isinstance(value, enum_cls):
        return value.value
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Allowed: {allowed}")


def _due_date_value(value: Any) -> Optional[str]:
    try:
        due = parse_due_date(value)
    except ValueError as e:
        raise ValidationError(str(e))
    return due.isoformat() if due else None


def _title_value(value: Any) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError("Title must be a string")
    try:
        return clean_title(value)
    except ValueError as e:
        raise ValidationError(str(e))


class TaskStore:
    """
    SQLite task store.

    Each task is one row keyed by an opaque uuid4 hex id. Every method opens
    its own connection, so the store can be shared by the server's worker
    threads; single statements are atomic. Only the createdAt counter is locked.
    """

    def __init__(self, db_path: Union[str, Path] = "todos.sqlite3"):
        """
        Open (and create if needed) the store

        Args:
            db_path: SQLite database file

        Raises:
            StoreFault: If the database cannot be opened or its schema created
        """
        self._db_path = Path(db_path)
        self._created_at_lock = threading.Lock()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
            self._last_created_at = self._max_created_at()
        except (OSError, sqlite3.Error) as e:
            raise StoreFault(f"Cannot open task store at {self._db_path}: {e}") from e
        logger.info(f"TaskStore ready db={self._db_path} total={self.count()}")

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'todo',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    category TEXT NOT NULL DEFAULT 'general',
                    due_date TEXT,
                    created_at REAL NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_todos_created ON todos(created_at)")
            conn.commit()
        finally:
            conn.close()

    def _execute(self, sql: str, params: tuple = ()) -> Tuple[List[sqlite3.Row], int]:
        """Run one statement on a fresh connection and commit it"""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StoreFault(f"Task store unavailable: {e}") from e
        try:
            cur = conn.execute(sql, params)
            rows = cur.fetchall()
            conn.commit()
            return rows, cur.rowcount
        except sqlite3.Error as e:
            logger.error(f"TaskStore statement failed: {e}")
            raise StoreFault(f"Task store error: {e}") from e
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            title=row["title"],
            status=row["status"],
            priority=row["priority"],
            category=row["category"],
            due_date=date.fromisoformat(row["due_date"]) if row["due_date"] else None,
            created_at=from_timestamp(row["created_at"]),
        )

    def _max_created_at(self) -> float:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT MAX(created_at) AS last FROM todos").fetchone()
        finally:
            conn.close()
        return float(row["last"]) if row["last"] is not None else 0.0

    def _next_created_at(self) -> float:
        # createdAt never goes backwards, also across worker threads and restarts
        now = to_timestamp(get_current_datetime())
        with self._created_at_lock:
            self._last_created_at = max(now, self._last_created_at)
            return self._last_created_at

    # ---- public API ----

    def count(self) -> int:
        rows, _ = self._execute("SELECT COUNT(*) AS n FROM todos")
        return int(rows[0]["n"])

    def insert(self, fields: Dict[str, Any]) -> Task:
        """
        Insert a new task

        Args:
            fields: title (required), status, priority, category, due_date;
                missing or empty values take the defaults

        Returns:
            Stored task with generated id and created_at
        """
        title = _title_value(fields.get("title"))
        status = _enum_value(TaskStatus, fields.get("status") or TASK_DEFAULT_STATUS, "status")
        priority = _enum_value(TaskPriority, fields.get("priority") or TASK_DEFAULT_PRIORITY, "priority")
        category = _enum_value(TaskCategory, fields.get("category") or TASK_DEFAULT_CATEGORY, "category")
        due_date = _due_date_value(fields.get("due_date"))

        task_id = uuid.uuid4().hex
        created_at = self._next_created_at()

        self._execute(
            """
            INSERT INTO todos(id, title, status, priority, category, due_date, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (task_id, title, status, priority, category, due_date, created_at),
        )
        logger.debug(f"Task added id={task_id} status={status} priority={priority}")

        return Task(
            id=task_id,
            title=title,
            status=status,
            priority=priority,
            category=category,
            due_date=due_date,
            created_at=from_timestamp(created_at),
        )

    def find_all(self) -> List[Task]:
        """All tasks, newest first"""
        rows, _ = self._execute("SELECT * FROM todos ORDER BY created_at DESC, rowid DESC")
        return [self._row_to_task(r) for r in rows]

    def find_by_id(self, task_id: str) -> Optional[Task]:
        rows, _ = self._execute("SELECT * FROM todos WHERE id = ?", (task_id,))
        return self._row_to_task(rows[0]) if rows else None

    def update_by_id(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        """
        Apply a partial update

        Only keys present in fields are changed. Unknown keys are ignored.

        Args:
            task_id: Task id
            fields: Subset of title, status, priority, category, due_date

        Returns:
            Updated task, or None if the id is unknown

        Raises:
            ValidationError: If a supplied value is invalid
        """
        assignments: List[str] = []
        params: List[Any] = []

        if "title" in fields:
            assignments.append("title = ?")
            params.append(_title_value(fields["title"]))

        if "status" in fields:
            assignments.append("status = ?")
            params.append(_enum_value(TaskStatus, fields["status"], "status"))

        if "priority" in fields:
            assignments.append("priority = ?")
            params.append(_enum_value(TaskPriority, fields["priority"], "priority"))

        if "category" in fields:
            assignments.append("category = ?")
            params.append(_enum_value(TaskCategory, fields["category"], "category"))

        if "due_date" in fields:
            assignments.append("due_date = ?")
            params.append(_due_date_value(fields["due_date"]))

        if assignments:
            params.append(task_id)
            _, rowcount = self._execute(
                f"UPDATE todos SET {', '.join(assignments)} WHERE id = ?",
                tuple(params),
            )
            if rowcount == 0:
                return None
            logger.debug(f"Task updated id={task_id} fields={sorted(k for k in fields if k in UPDATABLE_FIELDS)}")

        return self.find_by_id(task_id)

    def delete_by_id(self, task_id: str) -> Optional[Task]:
        """Remove a task and return it, or None if the id is unknown"""
        task = self.find_by_id(task_id)
        if task is None:
            return None
        _, rowcount = self._execute("DELETE FROM todos WHERE id = ?", (task_id,))
        if rowcount == 0:
            # Removed by a concurrent request in between
            return None
        logger.debug(f"Task deleted id={task_id}")
        return task

    def delete_all(self) -> int:
        """Remove every task and return how many were removed"""
        _, rowcount = self._execute("DELETE FROM todos")
        removed = max(rowcount, 0)
        logger.info(f"Cleared {removed} tasks")
        return removed
