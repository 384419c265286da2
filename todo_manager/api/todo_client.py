"""
Client for the Task API
"""

from datetime import date
from typing import Optional, List, Dict, Any, Union
import httpx
from todo_manager.api.base_client import BaseAPIClient
from todo_manager.config.settings import settings
from todo_manager.models.task import Task
from todo_manager.utils.error_handler import StoreFault


def _date_to_str(value: Union[date, str, None]) -> Optional[str]:
    if isinstance(value, date):
        return value.isoformat()
    return value


class TodoClient(BaseAPIClient):
    """Client for the Task API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Task API client

        Args:
            base_url: Server URL (defaults to API_BASE_URL setting)
            timeout: Request timeout in seconds (defaults to REQUEST_TIMEOUT setting)
            transport: Custom httpx transport
        """
        super().__init__(
            (base_url or settings.API_BASE_URL).rstrip("/") + settings.API_PREFIX,
            timeout=timeout or settings.REQUEST_TIMEOUT,
            transport=transport,
        )

    @staticmethod
    def _parse_task(data: Any) -> Task:
        try:
            return Task.model_validate(data)
        except ValueError as e:
            raise StoreFault(f"Unexpected task payload: {e}") from e

    async def health(self) -> Dict[str, Any]:
        """GET /health"""
        return await self.get("/health")

    async def list_todos(self) -> List[Task]:
        """
        Get all tasks

        Returns:
            Tasks, newest first
        """
        data = await self.get("/todos")
        if not isinstance(data, list):
            raise StoreFault("Unexpected response: task list expected")
        return [self._parse_task(item) for item in data]

    async def create_todo(
        self,
        title: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        due_date: Union[date, str, None] = None,
    ) -> Task:
        """
        Create a new task

        Args:
            title: Task title
            status: todo, progress or completed
            priority: low, medium or high
            category: general, work, personal, shopping, health or study
            due_date: Due date (date or YYYY-MM-DD)

        Returns:
            Created task
        """
        task_data: Dict[str, Any] = {"title": title}

        if status:
            task_data["status"] = status

        if priority:
            task_data["priority"] = priority

        if category:
            task_data["category"] = category

        task_data["dueDate"] = _date_to_str(due_date)

        data = await self.post("/todos", json_data=task_data)
        return self._parse_task(data)

    async def update_todo(self, task_id: str, updates: Dict[str, Any]) -> Task:
        """
        Partially update a task

        Args:
            task_id: Task ID
            updates: Fields to change (title, status, priority, category, dueDate)

        Returns:
            Updated task
        """
        payload = {
            key: _date_to_str(value) if key == "dueDate" else value
            for key, value in updates.items()
        }
        data = await self.put(f"/todos/{task_id}", json_data=payload)
        return self._parse_task(data)

    async def delete_todo(self, task_id: str) -> Task:
        """
        Delete task

        Args:
            task_id: Task ID

        Returns:
            The deleted task as returned by the server
        """
        data = await self.delete(f"/todos/{task_id}")
        if not isinstance(data, dict) or "todo" not in data:
            raise StoreFault("Unexpected response: deleted task expected")
        return self._parse_task(data["todo"])

    async def clear_todos(self) -> int:
        """
        Delete all tasks

        Returns:
            Number of deleted tasks
        """
        data = await self.delete("/todos")
        if not isinstance(data, dict):
            raise StoreFault("Unexpected response: delete count expected")
        return int(data.get("deletedCount", 0))
