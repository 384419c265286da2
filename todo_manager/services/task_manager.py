"""
Task management service: the command interface used by the presentation layer
"""

from datetime import date, datetime
from pathlib import Path
from typing import Optional, Dict, Any, Callable, List, Union
from todo_manager.api.todo_client import TodoClient
from todo_manager.config.constants import STATUS_CYCLE
from todo_manager.config.settings import settings
from todo_manager.models.ports import Presenter, Severity
from todo_manager.models.task import PendingUndo, Task, TaskStatus
from todo_manager.models.view import ImportResult, TodoView, ViewCriteria
from todo_manager.services.analytics_service import compute_stats
from todo_manager.services.import_export import export_tasks, import_tasks, parse_import
from todo_manager.services.task_cache import TaskCache
from todo_manager.services.task_view import build_view
from todo_manager.utils.date_utils import get_current_datetime
from todo_manager.utils.error_handler import TodoError, ValidationError, NotFoundError
from todo_manager.utils.formatters import format_import_result
from todo_manager.utils.logger import logger

# Python field names accepted by on_update, mapped to their JSON names
_UPDATE_FIELDS = {
    "title": "title",
    "status": "status",
    "priority": "priority",
    "category": "category",
    "due_date": "dueDate",
}


def _enum_to_value(value: Any) -> Any:
    return getattr(value, "value", value)


class TodoManager:
    """
    Keeps the client cache in sync with the Task API and drives the presenter.

    Every handler performs at most one request. A failed request leaves the
    cache untouched and is reported through presenter.notify; handlers never
    raise TodoError to the caller. Concurrent calls are not de-duplicated, so
    the last response to arrive wins.
    """

    def __init__(
        self,
        client: TodoClient,
        presenter: Presenter,
        cache: Optional[TaskCache] = None,
        clock: Callable[[], datetime] = get_current_datetime,
    ):
        """
        Initialize task manager

        Args:
            client: Task API client
            presenter: Presentation collaborator
            cache: Client cache (a new one with the configured undo window by default)
            clock: Source of the current time for a default cache
        """
        self.client = client
        self.presenter = presenter
        self.cache = cache if cache is not None else TaskCache(undo_duration=settings.UNDO_DURATION, clock=clock)
        self.criteria = ViewCriteria()
        self.is_loading = False
        self.logger = logger

    # ---- rendering ----

    def current_view(self) -> TodoView:
        return build_view(self.cache.tasks, self.criteria)

    def render(self) -> TodoView:
        """Recompute the view and hand it to the presenter"""
        todo_view = self.current_view()
        self.presenter.render(todo_view, compute_stats(self.cache.tasks))
        return todo_view

    def _notify_failure(self, message: str, error: TodoError) -> None:
        self.logger.warning(f"{message}: {error}")
        if isinstance(error, (ValidationError, NotFoundError)):
            message = f"{message}: {error.message}"
        self.presenter.notify(message, Severity.ERROR)

    # ---- criteria ----

    def set_filter(self, filter_status: str) -> TodoView:
        self.criteria = self.criteria.model_copy(update={"filter_status": filter_status})
        return self.render()

    def set_search(self, search_text: str) -> TodoView:
        self.criteria = self.criteria.model_copy(update={"search_text": (search_text or "").lower()})
        return self.render()

    def set_sort(self, sort_key: str) -> TodoView:
        self.criteria = self.criteria.model_copy(update={"sort_key": sort_key})
        return self.render()

    # ---- loading ----

    async def refresh(self) -> bool:
        """
        Reload the whole collection from the server

        Returns:
            True on success; on failure the cache keeps its previous content
        """
        self.is_loading = True
        try:
            tasks = await self.client.list_todos()
        except TodoError as e:
            self._notify_failure("Failed to load tasks", e)
            return False
        finally:
            self.is_loading = False

        self.cache.replace_all(tasks)
        self.render()
        return True

    # ---- create ----

    async def _create(self, payload: Dict[str, Any]) -> Task:
        """Create a task on the server and prepend it to the cache (raises TodoError)"""
        task = await self.client.create_todo(
            title=payload["title"],
            status=payload.get("status"),
            priority=payload.get("priority"),
            category=payload.get("category"),
            due_date=payload.get("dueDate"),
        )
        self.cache.prepend(task)
        self.render()
        return task

    async def on_create(
        self,
        title: str,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        due_date: Union[date, str, None] = None,
        status: Optional[str] = None,
    ) -> Optional[Task]:
        """
        Add a task

        Blank titles are rejected locally and no request is sent.

        Returns:
            Created task, or None on failure
        """
        title = (title or "").strip()
        if not title:
            self.presenter.notify("Please enter a task title", Severity.ERROR)
            return None

        payload = {
            "title": title,
            "status": _enum_to_value(status) or TaskStatus.TODO.value,
            "priority": _enum_to_value(priority),
            "category": _enum_to_value(category),
            "dueDate": due_date or None,
        }

        try:
            task = await self._create(payload)
        except TodoError as e:
            self._notify_failure("Failed to add task", e)
            return None

        self.presenter.notify("Task added successfully!", Severity.SUCCESS)
        return task

    # ---- update ----

    async def _update(self, task_id: str, updates: Dict[str, Any], failure_message: str) -> Optional[Task]:
        try:
            task = await self.client.update_todo(task_id, updates)
        except TodoError as e:
            self._notify_failure(failure_message, e)
            return None

        if self.cache.replace(task):
            self.render()
        return task

    async def on_update(self, task_id: str, **fields: Any) -> Optional[Task]:
        """
        Partially update a task

        Args:
            task_id: Task ID
            **fields: Any of title, status, priority, category, due_date

        Returns:
            Updated task, or None on failure
        """
        unknown = set(fields) - set(_UPDATE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        updates = {_UPDATE_FIELDS[name]: _enum_to_value(value) for name, value in fields.items()}
        task = await self._update(task_id, updates, "Failed to update task")
        if task is not None:
            self.presenter.notify("Task updated!", Severity.SUCCESS)
        return task

    async def on_edit_title(self, task_id: str, title: str) -> Optional[Task]:
        new_title = (title or "").strip()
        if not new_title:
            self.presenter.notify("Title cannot be empty", Severity.ERROR)
            return None
        return await self.on_update(task_id, title=new_title)

    async def _change_status(self, task_id: str, new_status: TaskStatus) -> Optional[Task]:
        task = await self._update(task_id, {"status": new_status.value}, "Failed to update task")
        if task is None:
            return None

        if new_status == TaskStatus.COMPLETED:
            self.presenter.notify("Task completed!", Severity.SUCCESS)
        else:
            self.presenter.notify("Status updated!", Severity.SUCCESS)
        return task

    def _current_status(self, task_id: str) -> Optional[TaskStatus]:
        task = self.cache.get(task_id)
        if task is None:
            self.presenter.notify("Task not found", Severity.ERROR)
            return None
        return task.status

    async def on_toggle_complete(self, task_id: str) -> Optional[Task]:
        """Completed tasks go back to todo, anything else becomes completed"""
        current = self._current_status(task_id)
        if current is None:
            return None
        new_status = TaskStatus.TODO if current == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        return await self._change_status(task_id, new_status)

    async def on_cycle_status(self, task_id: str) -> Optional[Task]:
        """todo -> progress -> completed -> todo"""
        current = self._current_status(task_id)
        if current is None:
            return None
        return await self._change_status(task_id, TaskStatus(STATUS_CYCLE[current.value]))

    # ---- delete / undo ----

    async def on_delete(self, task_id: str) -> bool:
        """
        Delete a task and open the undo window

        Returns:
            True if the server deleted the task
        """
        try:
            await self.client.delete_todo(task_id)
        except TodoError as e:
            self._notify_failure("Failed to delete task", e)
            return False

        if self.cache.remove(task_id) is not None:
            self.render()
            self.presenter.notify("Task deleted", Severity.INFO)
        return True

    @property
    def pending_undo(self) -> Optional[PendingUndo]:
        return self.cache.pending_undo()

    def expire_undo(self) -> bool:
        """Called by the presenter's scheduler; True if the undo window just closed"""
        return self.cache.expire_undo()

    async def on_undo(self) -> Optional[Task]:
        """
        Re-create the most recently deleted task

        The restored task is a new record: it gets a new id and createdAt.

        Returns:
            Re-created task, or None if there is nothing to undo or the request failed
        """
        pending = self.cache.pending_undo()
        if pending is None:
            return None

        try:
            task = await self._create(pending.task.to_create_payload())
        except TodoError as e:
            self._notify_failure("Failed to restore task", e)
            return None

        self.cache.clear_undo()
        self.presenter.notify("Task restored!", Severity.SUCCESS)
        return task

    # ---- clear all ----

    async def on_clear_all(self) -> bool:
        """
        Ask for confirmation, then delete every task

        Returns:
            True if the tasks were cleared; False if the cache was empty,
            the user declined or the request failed
        """
        if len(self.cache) == 0:
            self.presenter.notify("Database is already empty", Severity.ERROR)
            return False

        cleared = False

        async def confirmed() -> None:
            nonlocal cleared
            cleared = await self._clear_all()

        await self.presenter.confirm(
            "Clear All Tasks",
            f"Are you sure you want to delete all {len(self.cache)} tasks? This action cannot be undone.",
            confirmed,
        )
        return cleared

    async def _clear_all(self) -> bool:
        try:
            removed = await self.client.clear_todos()
        except TodoError as e:
            self._notify_failure("Failed to clear tasks", e)
            return False

        self.logger.info(f"Server removed {removed} tasks")
        self.cache.clear()
        self.render()
        self.presenter.notify("All tasks cleared!", Severity.SUCCESS)
        return True

    # ---- import / export ----

    def on_export(self, directory: Union[str, Path] = ".") -> Optional[Path]:
        """
        Write the whole cache to a JSON backup

        Returns:
            Backup path, or None if nothing was written
        """
        tasks = self.cache.tasks
        if not tasks:
            self.presenter.notify("No tasks to export", Severity.ERROR)
            return None

        try:
            path = export_tasks(tasks, directory)
        except OSError as e:
            self.logger.error(f"Export error: {e}")
            self.presenter.notify("Failed to export tasks", Severity.ERROR)
            return None

        self.presenter.notify(f"Exported {len(tasks)} tasks!", Severity.SUCCESS)
        return path

    async def on_import(self, text: str) -> Optional[ImportResult]:
        """
        Validate a backup, ask for confirmation, then import it

        Returns:
            Import counts, or None if the file was rejected or the user declined
        """
        try:
            items = parse_import(text)
        except ValidationError as e:
            self.logger.warning(f"Import rejected: {e}")
            self.presenter.notify("Failed to import tasks. Invalid file format.", Severity.ERROR)
            return None

        result: Optional[ImportResult] = None

        async def confirmed() -> None:
            nonlocal result
            result = await self.import_items(items)

        await self.presenter.confirm(
            "Import Tasks",
            f"Import {len(items)} tasks? This will add them to your existing tasks.",
            confirmed,
        )
        return result

    async def import_items(self, items: List[Dict[str, Any]]) -> ImportResult:
        """Create the validated items one by one and report the counts"""
        result = await import_tasks(items, self._create)

        if result.succeeded:
            self.presenter.notify(format_import_result(result.succeeded, 0), Severity.SUCCESS)
        if result.failed:
            self.presenter.notify(format_import_result(0, result.failed), Severity.ERROR)
        return result
