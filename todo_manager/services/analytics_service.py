"""
Task statistics
"""

import math
from typing import Sequence
from todo_manager.models.task import Task, TaskStatus
from todo_manager.models.view import TaskStats


def completion_percentage(completed: int, total: int) -> int:
    """Percentage of completed tasks, halves rounded up; 0 for an empty list"""
    if total == 0:
        return 0
    return int(math.floor(completed / total * 100 + 0.5))


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    """
    Count tasks per status
    
    Args:
        tasks: All cached tasks (not the filtered view)
        
    Returns:
        Totals and completion percentage
    """
    todo = sum(1 for task in tasks if task.status == TaskStatus.TODO)
    progress = sum(1 for task in tasks if task.status == TaskStatus.PROGRESS)
    completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)
    total = len(tasks)
    
    return TaskStats(
        total=total,
        todo=todo,
        progress=progress,
        completed=completed,
        percentage=completion_percentage(completed, total),
    )
