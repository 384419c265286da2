"""
Filter/sort/search projection of the task cache
"""

from datetime import date
from typing import Callable, Dict, List, Sequence, Tuple
from todo_manager.config.constants import FILTER_ALL, PRIORITY_ORDER
from todo_manager.models.task import Task
from todo_manager.models.view import EmptyReason, SortKey, TodoView, ViewCriteria


def matches_search(task: Task, search_text: str) -> bool:
    """
    Case-insensitive substring match on title or category

    Examples:
    - "milk" matches "Buy milk"
    - "SHOP" matches any task in the shopping category

    Args:
        task: Task to test
        search_text: Text to look for

    Returns:
        True if the task matches
    """
    needle = search_text.lower()
    return needle in task.title.lower() or needle in task.category.value.lower()


def _due_date_key(task: Task) -> Tuple[bool, date]:
    # Tasks without a due date go after every dated task
    return (task.due_date is None, task.due_date or date.min)


_SORTS: Dict[str, Tuple[Callable[[Task], object], bool]] = {
    SortKey.NEWEST.value: (lambda task: task.created_at, True),
    SortKey.OLDEST.value: (lambda task: task.created_at, False),
    SortKey.PRIORITY.value: (lambda task: PRIORITY_ORDER[task.priority.value], True),
    SortKey.DUE_DATE.value: (_due_date_key, False),
}


def view(
    tasks: Sequence[Task],
    filter_status: str = FILTER_ALL,
    search_text: str = "",
    sort_key: str = SortKey.NEWEST.value,
) -> List[Task]:
    """
    Derive the ordered list of tasks to display

    Algorithm:
    1. Keep tasks whose status equals filter_status ("all" keeps everything)
    2. If search_text is non-empty, keep case-insensitive title/category matches
    3. Sort by sort_key; the sort is stable, so ties keep the input order.
       Unknown sort keys leave the order unchanged

    Args:
        tasks: Cached tasks
        filter_status: "all" or a status value
        search_text: Search text
        sort_key: newest, oldest, priority or dueDate

    Returns:
        New list; the input is not modified
    """
    filtered = list(tasks)

    if filter_status != FILTER_ALL:
        filtered = [task for task in filtered if task.status.value == filter_status]

    if search_text:
        filtered = [task for task in filtered if matches_search(task, search_text)]

    sort = _SORTS.get(sort_key)
    if sort is not None:
        key, reverse = sort
        filtered.sort(key=key, reverse=reverse)

    return filtered


def empty_reason(criteria: ViewCriteria) -> EmptyReason:
    """Explain an empty view: active search first, then a non-"all" filter"""
    if criteria.search_text:
        return EmptyReason.SEARCH
    if criteria.filter_status != FILTER_ALL:
        return EmptyReason.FILTER
    return EmptyReason.EMPTY


def build_view(tasks: Sequence[Task], criteria: ViewCriteria) -> TodoView:
    """Apply the criteria and attach the empty-state reason when nothing is left"""
    visible = view(tasks, criteria.filter_status, criteria.search_text, criteria.sort_key)
    return TodoView(
        tasks=visible,
        criteria=criteria,
        empty_reason=None if visible else empty_reason(criteria),
    )
