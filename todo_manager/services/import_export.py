"""
Import/export of task backups
"""

import json
from pathlib import Path
from typing import List, Dict, Any, Callable, Awaitable, Sequence, Union
from todo_manager.config.constants import (
    EXPORT_FILE_PREFIX,
    TASK_DEFAULT_STATUS,
    TASK_DEFAULT_PRIORITY,
    TASK_DEFAULT_CATEGORY,
)
from todo_manager.models.task import Task
from todo_manager.models.view import ImportResult
from todo_manager.utils.date_utils import get_backup_timestamp
from todo_manager.utils.error_handler import TodoError, ValidationError
from todo_manager.utils.logger import logger


def export_tasks(tasks: Sequence[Task], directory: Union[str, Path] = ".") -> Path:
    """
    Write tasks to a JSON backup file

    Args:
        tasks: Tasks to export (the whole cache)
        directory: Target directory

    Returns:
        Path of the written file

    Raises:
        ValidationError: If there is nothing to export
    """
    if not tasks:
        raise ValidationError("No tasks to export")

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"{EXPORT_FILE_PREFIX}-{get_backup_timestamp()}.json"

    data = [task.to_json() for task in tasks]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    logger.info(f"Exported {len(data)} tasks to {path}")
    return path


def parse_import(text: str) -> List[Dict[str, Any]]:
    """
    Parse and validate a backup before anything is created

    Every element must be an object with a non-empty string title; otherwise
    the whole file is rejected.

    Args:
        text: File contents

    Returns:
        Raw task objects

    Raises:
        ValidationError: If the file is not a valid backup
    """
    try:
        items = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e.msg}") from e

    if not isinstance(items, list):
        raise ValidationError("Invalid data format: a JSON array is expected")

    for index, item in enumerate(items):
        title = item.get("title") if isinstance(item, dict) else None
        if not isinstance(title, str) or not title:
            raise ValidationError(f"Invalid todo format at position {index}: title is required")

    return items


def to_create_payload(item: Dict[str, Any]) -> Dict[str, Any]:
    """Creation fields of an imported item; missing values take the defaults"""
    return {
        "title": item["title"],
        "status": item.get("status") or TASK_DEFAULT_STATUS,
        "priority": item.get("priority") or TASK_DEFAULT_PRIORITY,
        "category": item.get("category") or TASK_DEFAULT_CATEGORY,
        "dueDate": item.get("dueDate") or None,
    }


async def import_tasks(
    items: Sequence[Dict[str, Any]],
    create: Callable[[Dict[str, Any]], Awaitable[Any]],
) -> ImportResult:
    """
    Create one task per item, sequentially

    A failing item is counted and skipped; it never aborts the batch.

    Args:
        items: Validated items from parse_import
        create: Async function creating a task from a payload

    Returns:
        Succeeded/failed counts
    """
    result = ImportResult()

    for item in items:
        try:
            await create(to_create_payload(item))
            result.succeeded += 1
        except TodoError as e:
            logger.error(f"Failed to import todo '{item.get('title')}': {e}")
            result.failed += 1

    logger.info(f"Import complete: {result.succeeded} succeeded, {result.failed} failed")
    return result
