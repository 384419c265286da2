"""
Tests for task backup import/export
"""

import json
import pytest
from unittest.mock import AsyncMock
from datetime import date
from todo_manager.services.import_export import export_tasks, import_tasks, parse_import, to_create_payload
from todo_manager.utils.error_handler import StoreFault, ValidationError
from fakes import make_task


def test_export_writes_backup(tmp_path):
    tasks = [
        make_task(task_id="1" * 32, title="Buy milk", due_date=date(2025, 2, 1)),
        make_task(task_id="2" * 32, title="Gym"),
    ]

    path = export_tasks(tasks, tmp_path)

    assert path.parent == tmp_path
    assert path.name.startswith("todo-backup-")
    assert path.suffix == ".json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert [item["title"] for item in data] == ["Buy milk", "Gym"]
    assert data[0]["dueDate"] == "2025-02-01"
    assert data[0]["id"] == "1" * 32
    assert "createdAt" in data[0]


def test_export_nothing(tmp_path):
    with pytest.raises(ValidationError, match="No tasks to export"):
        export_tasks([], tmp_path)

    assert list(tmp_path.iterdir()) == []


def test_parse_import_valid():
    items = parse_import('[{"title": "A"}, {"title": "B", "priority": "high"}]')

    assert len(items) == 2


def test_parse_import_empty_array():
    assert parse_import("[]") == []


@pytest.mark.parametrize("text", [
    "not json",
    '{"title": "A"}',
    '[{"title": "A"}, {"priority": "high"}]',
    '[{"title": ""}]',
    '[{"title": 5}]',
    '["A"]',
])
def test_parse_import_rejects_whole_file(text):
    with pytest.raises(ValidationError):
        parse_import(text)


def test_to_create_payload_defaults():
    payload = to_create_payload({"title": "A", "priority": "", "id": "x", "createdAt": "y"})

    assert payload == {
        "title": "A",
        "status": "todo",
        "priority": "medium",
        "category": "general",
        "dueDate": None,
    }


@pytest.mark.asyncio
async def test_import_is_sequential_and_counts_failures():
    """Test a failing item is counted and the rest still imported"""
    create = AsyncMock(side_effect=[None, StoreFault("Request failed"), None])

    result = await import_tasks([{"title": "A"}, {"title": "B"}, {"title": "C"}], create)

    assert result.succeeded == 2
    assert result.failed == 1
    assert [call.args[0]["title"] for call in create.await_args_list] == ["A", "B", "C"]
