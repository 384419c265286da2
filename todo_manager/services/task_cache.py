"""
Client-side task cache with a single-slot undo buffer
"""

from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional
from todo_manager.config.constants import UNDO_DURATION
from todo_manager.models.task import PendingUndo, Task
from todo_manager.utils.date_utils import get_current_datetime
from todo_manager.utils.logger import logger


class TaskCache:
    """
    In-memory mirror of the server's task collection.

    Only successful server responses are applied here; a failed request leaves
    the cache as it was. The most recently deleted task is kept as a
    PendingUndo that expires after undo_duration seconds.
    """

    def __init__(
        self,
        undo_duration: float = UNDO_DURATION,
        clock: Callable[[], datetime] = get_current_datetime,
    ):
        """
        Initialize task cache

        Args:
            undo_duration: Seconds during which a deleted task can be restored
            clock: Source of the current time
        """
        self.undo_duration = undo_duration
        self.clock = clock
        self._tasks: List[Task] = []
        self._pending_undo: Optional[PendingUndo] = None
        self.logger = logger

    @property
    def tasks(self) -> List[Task]:
        """Snapshot of the cached tasks in cache order"""
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def _index_of(self, task_id: str) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return -1

    def get(self, task_id: str) -> Optional[Task]:
        index = self._index_of(task_id)
        return self._tasks[index] if index != -1 else None

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Mirror a full list fetched from the server"""
        self._tasks = list(tasks)
        self.logger.debug(f"Cache loaded with {len(self._tasks)} tasks")

    def prepend(self, task: Task) -> None:
        """Add a freshly created task at the top"""
        self._tasks.insert(0, task)

    def replace(self, task: Task) -> bool:
        """
        Replace the cached task with the same id in place

        Returns:
            False if the task is not cached (nothing changes)
        """
        index = self._index_of(task.id)
        if index == -1:
            self.logger.debug(f"Task {task.id} not cached, update ignored")
            return False
        self._tasks[index] = task
        return True

    def remove(self, task_id: str) -> Optional[Task]:
        """
        Remove a deleted task and keep its snapshot for undo

        Any previously pending undo is discarded.

        Returns:
            The removed task, or None if it was not cached
        """
        index = self._index_of(task_id)
        if index == -1:
            return None

        task = self._tasks.pop(index)
        self._pending_undo = PendingUndo(
            task=task.model_copy(),
            expires_at=self.clock() + timedelta(seconds=self.undo_duration),
        )
        return task

    def clear(self) -> None:
        """Empty the cache after a delete-all"""
        self._tasks = []

    def pending_undo(self) -> Optional[PendingUndo]:
        """Pending undo, or None once it has expired (expired entries are dropped)"""
        self.expire_undo()
        return self._pending_undo

    def expire_undo(self) -> bool:
        """
        Drop the pending undo if its window has passed

        Returns:
            True if an entry was dropped by this call
        """
        if self._pending_undo is not None and self._pending_undo.is_expired(self.clock()):
            self.logger.debug(f"Undo window for task {self._pending_undo.task.id} expired")
            self._pending_undo = None
            return True
        return False

    def clear_undo(self) -> None:
        self._pending_undo = None
