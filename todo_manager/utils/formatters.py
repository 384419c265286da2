"""
Message formatting utilities
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel
from todo_manager.models.task import Task, TaskStatus
from todo_manager.models.view import EmptyReason, TaskStats, ViewCriteria

STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}


class DueDateInfo(BaseModel):
    """Display label and urgency of a due date"""
    label: str
    state: str  # overdue, today or upcoming


def format_status(status: TaskStatus) -> str:
    """Human-readable status label"""
    return STATUS_LABELS.get(status, status.value)


def due_date_info(due_date: Optional[date], today: date) -> Optional[DueDateInfo]:
    """
    Describe a due date relative to today
    
    Args:
        due_date: Task due date (None means no deadline)
        today: Current calendar date
        
    Returns:
        DueDateInfo, or None for tasks without a deadline
    """
    if due_date is None:
        return None
    
    diff_days = (due_date - today).days
    if diff_days < 0:
        state = "overdue"
    elif diff_days == 0:
        state = "today"
    else:
        state = "upcoming"
    
    # e.g. "Nov 5, 2024"
    label = f"{due_date.strftime('%b')} {due_date.day}, {due_date.year}"
    return DueDateInfo(label=label, state=state)


def format_empty_state(reason: EmptyReason, criteria: ViewCriteria) -> str:
    """
    Message shown instead of an empty list
    
    Args:
        reason: Why the view is empty
        criteria: Criteria that produced the view
        
    Returns:
        Formatted message
    """
    if reason == EmptyReason.SEARCH:
        return "No tasks found matching your search"
    if reason == EmptyReason.FILTER:
        return f"No {criteria.filter_status} tasks"
    return "No tasks yet. Add one to get started!"


def format_task_line(task: Task, today: date) -> str:
    """
    One-line summary of a task
    
    Example: "[In Progress] Write report (work, high) due Nov 5, 2024 (overdue)"
    """
    line = f"[{format_status(task.status)}] {task.title} ({task.category.value}, {task.priority.value})"
    info = due_date_info(task.due_date, today)
    if info:
        line += f" due {info.label}"
        if info.state != "upcoming":
            line += f" ({info.state})"
    return line


def format_stats(stats: TaskStats) -> str:
    """Example: "4 tasks: 1 to do, 1 in progress, 2 completed (50% complete)" """
    return (
        f"{stats.total} tasks: {stats.todo} to do, {stats.progress} in progress, "
        f"{stats.completed} completed ({stats.percentage}% complete)"
    )


def format_import_result(succeeded: int, failed: int) -> str:
    """Summary of an import run"""
    parts = []
    if succeeded:
        parts.append(f"Imported {succeeded} tasks")
    if failed:
        parts.append(f"Failed to import {failed} tasks")
    return ", ".join(parts) if parts else "Nothing imported"
