"""
View models: criteria, derived view and statistics
"""

from typing import List, Optional
from enum import Enum
from pydantic import BaseModel
from todo_manager.config.constants import FILTER_ALL, DEFAULT_SORT
from todo_manager.models.task import Task


class SortKey(str, Enum):
    """Known sort keys; any other key keeps the cache order"""
    NEWEST = "newest"
    OLDEST = "oldest"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"


class EmptyReason(str, Enum):
    """Why a derived view came out empty"""
    SEARCH = "search"
    FILTER = "filter"
    EMPTY = "empty"


class ViewCriteria(BaseModel):
    """Current filter/search/sort selection"""
    filter_status: str = FILTER_ALL
    search_text: str = ""
    sort_key: str = DEFAULT_SORT


class TodoView(BaseModel):
    """Ordered tasks to display and, when there are none, the reason"""
    tasks: List[Task]
    criteria: ViewCriteria
    empty_reason: Optional[EmptyReason] = None


class TaskStats(BaseModel):
    """Per-status counts and completion percentage"""
    total: int = 0
    todo: int = 0
    progress: int = 0
    completed: int = 0
    percentage: int = 0


class ImportResult(BaseModel):
    """Outcome of a sequential import"""
    succeeded: int = 0
    failed: int = 0
