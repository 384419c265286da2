"""
Tests for the task manager command interface
"""

import pytest
from datetime import timedelta
from todo_manager.config.settings import settings
from todo_manager.models.ports import Severity
from todo_manager.models.view import EmptyReason
from todo_manager.services.task_manager import TodoManager
from todo_manager.utils.error_handler import NotFoundError, StoreFault, ValidationError
from fakes import make_task

TASK_A = "a" * 32
TASK_B = "b" * 32


@pytest.fixture
def loaded(manager, mock_todo_client):
    """Manager whose cache holds two tasks"""
    manager.cache.replace_all([
        make_task(task_id=TASK_B, title="Write report", status="progress", minutes=1),
        make_task(task_id=TASK_A, title="Buy milk", category="shopping"),
    ])
    return manager


@pytest.mark.asyncio
async def test_refresh_loads_cache_and_renders(manager, mock_todo_client, presenter):
    mock_todo_client.list_todos.return_value = [make_task(task_id=TASK_A)]

    assert await manager.refresh()

    assert [t.id for t in manager.cache.tasks] == [TASK_A]
    assert presenter.last_stats.total == 1
    assert not manager.is_loading


@pytest.mark.asyncio
async def test_refresh_failure_keeps_cache(loaded, mock_todo_client, presenter):
    """Test a failed fetch leaves the previous cache content"""
    mock_todo_client.list_todos.side_effect = StoreFault("Request failed")

    assert not await loaded.refresh()

    assert len(loaded.cache) == 2
    assert presenter.last_message == ("Failed to load tasks", Severity.ERROR)
    assert not loaded.is_loading


@pytest.mark.asyncio
async def test_create_prepends(loaded, mock_todo_client, presenter):
    task = await loaded.on_create("Created", priority="high", due_date="2025-02-01")

    assert task.id == "c" * 32
    assert loaded.cache.tasks[0].id == "c" * 32
    assert presenter.last_message == ("Task added successfully!", Severity.SUCCESS)
    mock_todo_client.create_todo.assert_awaited_once_with(
        title="Created",
        status="todo",
        priority="high",
        category=None,
        due_date="2025-02-01",
    )


@pytest.mark.asyncio
async def test_create_blank_title_sends_nothing(manager, mock_todo_client, presenter):
    assert await manager.on_create("   ") is None

    mock_todo_client.create_todo.assert_not_awaited()
    assert presenter.last_message == ("Please enter a task title", Severity.ERROR)


@pytest.mark.asyncio
async def test_create_failure_keeps_cache(loaded, mock_todo_client, presenter):
    mock_todo_client.create_todo.side_effect = ValidationError("Title is required")

    assert await loaded.on_create("Task") is None

    assert len(loaded.cache) == 2
    assert presenter.last_message == ("Failed to add task: Title is required", Severity.ERROR)


@pytest.mark.asyncio
async def test_update_replaces_in_place(loaded, mock_todo_client, presenter):
    mock_todo_client.update_todo.return_value = make_task(task_id=TASK_A, title="Buy oat milk")

    task = await loaded.on_update(TASK_A, title="Buy oat milk", due_date=None)

    assert task.title == "Buy oat milk"
    assert [t.id for t in loaded.cache.tasks] == [TASK_B, TASK_A]
    assert loaded.cache.get(TASK_A).title == "Buy oat milk"
    mock_todo_client.update_todo.assert_awaited_once_with(TASK_A, {"title": "Buy oat milk", "dueDate": None})
    assert presenter.last_message == ("Task updated!", Severity.SUCCESS)


@pytest.mark.asyncio
async def test_update_unknown_field(loaded):
    with pytest.raises(TypeError):
        await loaded.on_update(TASK_A, colour="red")


@pytest.mark.asyncio
async def test_update_not_found_keeps_cache(loaded, mock_todo_client, presenter):
    mock_todo_client.update_todo.side_effect = NotFoundError("Todo not found")

    assert await loaded.on_update(TASK_A, priority="high") is None

    assert loaded.cache.get(TASK_A).priority.value == "medium"
    assert presenter.last_message == ("Failed to update task: Todo not found", Severity.ERROR)


@pytest.mark.asyncio
async def test_edit_title_rejects_blank(loaded, mock_todo_client, presenter):
    assert await loaded.on_edit_title(TASK_A, "  ") is None

    mock_todo_client.update_todo.assert_not_awaited()
    assert presenter.last_message == ("Title cannot be empty", Severity.ERROR)


@pytest.mark.asyncio
async def test_toggle_complete(loaded, mock_todo_client, presenter):
    mock_todo_client.update_todo.return_value = make_task(task_id=TASK_A, status="completed")

    await loaded.on_toggle_complete(TASK_A)

    mock_todo_client.update_todo.assert_awaited_once_with(TASK_A, {"status": "completed"})
    assert presenter.last_message == ("Task completed!", Severity.SUCCESS)

    mock_todo_client.update_todo.reset_mock()
    mock_todo_client.update_todo.return_value = make_task(task_id=TASK_A, status="todo")

    await loaded.on_toggle_complete(TASK_A)

    mock_todo_client.update_todo.assert_awaited_once_with(TASK_A, {"status": "todo"})
    assert presenter.last_message == ("Status updated!", Severity.SUCCESS)


@pytest.mark.asyncio
async def test_cycle_status(loaded, mock_todo_client):
    mock_todo_client.update_todo.return_value = make_task(task_id=TASK_B, status="completed")

    await loaded.on_cycle_status(TASK_B)

    mock_todo_client.update_todo.assert_awaited_once_with(TASK_B, {"status": "completed"})


@pytest.mark.asyncio
async def test_status_change_unknown_task(loaded, mock_todo_client, presenter):
    assert await loaded.on_cycle_status("9" * 32) is None

    mock_todo_client.update_todo.assert_not_awaited()
    assert presenter.last_message == ("Task not found", Severity.ERROR)


@pytest.mark.asyncio
async def test_delete_opens_undo(loaded, mock_todo_client, presenter):
    assert await loaded.on_delete(TASK_A)

    assert loaded.cache.get(TASK_A) is None
    assert loaded.pending_undo.task.id == TASK_A
    assert presenter.last_message == ("Task deleted", Severity.INFO)


@pytest.mark.asyncio
async def test_delete_failure_keeps_cache(loaded, mock_todo_client, presenter):
    mock_todo_client.delete_todo.side_effect = StoreFault("Request failed")

    assert not await loaded.on_delete(TASK_A)

    assert loaded.cache.get(TASK_A) is not None
    assert loaded.pending_undo is None
    assert presenter.last_message == ("Failed to delete task", Severity.ERROR)


@pytest.mark.asyncio
async def test_undo_recreates_task(loaded, mock_todo_client, presenter):
    await loaded.on_delete(TASK_A)
    mock_todo_client.create_todo.return_value = make_task(task_id="d" * 32, title="Buy milk", category="shopping")

    task = await loaded.on_undo()

    assert task.id == "d" * 32
    mock_todo_client.create_todo.assert_awaited_once_with(
        title="Buy milk",
        status="todo",
        priority="medium",
        category="shopping",
        due_date=None,
    )
    assert loaded.pending_undo is None
    assert loaded.cache.tasks[0].id == "d" * 32
    assert presenter.last_message == ("Task restored!", Severity.SUCCESS)


@pytest.mark.asyncio
async def test_undo_after_expiry_does_nothing(loaded, mock_todo_client, clock):
    await loaded.on_delete(TASK_A)
    clock.advance(5)

    assert await loaded.on_undo() is None
    mock_todo_client.create_todo.assert_not_awaited()


@pytest.mark.asyncio
async def test_undo_failure_keeps_slot(loaded, mock_todo_client, presenter):
    await loaded.on_delete(TASK_A)
    mock_todo_client.create_todo.side_effect = StoreFault("Request failed")

    assert await loaded.on_undo() is None

    assert loaded.pending_undo is not None
    assert presenter.last_message == ("Failed to restore task", Severity.ERROR)


@pytest.mark.asyncio
async def test_clear_all_confirmed(loaded, mock_todo_client, presenter):
    mock_todo_client.clear_todos.return_value = 2

    assert await loaded.on_clear_all()

    assert presenter.confirmations[0][0] == "Clear All Tasks"
    assert len(loaded.cache) == 0
    assert presenter.last_view.empty_reason == EmptyReason.EMPTY
    assert presenter.last_message == ("All tasks cleared!", Severity.SUCCESS)


@pytest.mark.asyncio
async def test_clear_all_declined(loaded, mock_todo_client, presenter):
    presenter.accept_confirm = False

    assert not await loaded.on_clear_all()

    mock_todo_client.clear_todos.assert_not_awaited()
    assert len(loaded.cache) == 2


@pytest.mark.asyncio
async def test_clear_all_when_empty(manager, mock_todo_client, presenter):
    assert not await manager.on_clear_all()

    assert presenter.confirmations == []
    assert presenter.last_message == ("Database is already empty", Severity.ERROR)


def test_criteria_changes_render(loaded, presenter):
    loaded.set_filter("completed")
    assert presenter.last_view.empty_reason == EmptyReason.FILTER

    loaded.set_search("MILK")
    assert loaded.criteria.search_text == "milk"
    assert presenter.last_view.empty_reason == EmptyReason.SEARCH

    loaded.set_filter("all")
    assert [t.id for t in presenter.last_view.tasks] == [TASK_A]

    loaded.set_search("")
    loaded.set_sort("oldest")
    assert [t.id for t in presenter.last_view.tasks] == [TASK_A, TASK_B]


def test_stats_use_whole_cache(loaded, presenter):
    loaded.set_filter("completed")

    assert presenter.last_stats.total == 2
    assert presenter.last_stats.progress == 1


def test_export(loaded, presenter, tmp_path):
    path = loaded.on_export(tmp_path)

    assert path.exists()
    assert presenter.last_message == ("Exported 2 tasks!", Severity.SUCCESS)


def test_export_empty(manager, presenter, tmp_path):
    assert manager.on_export(tmp_path) is None
    assert presenter.last_message == ("No tasks to export", Severity.ERROR)


@pytest.mark.asyncio
async def test_import_invalid_file(manager, mock_todo_client, presenter):
    assert await manager.on_import('[{"title": ""}]') is None

    mock_todo_client.create_todo.assert_not_awaited()
    assert presenter.confirmations == []
    assert presenter.last_message == ("Failed to import tasks. Invalid file format.", Severity.ERROR)


@pytest.mark.asyncio
async def test_import_counts_failures(manager, mock_todo_client, presenter):
    mock_todo_client.create_todo.side_effect = [
        make_task(task_id="1" * 32, title="One"),
        ValidationError("Invalid priority"),
        make_task(task_id="3" * 32, title="Three"),
    ]

    result = await manager.on_import('[{"title": "One"}, {"title": "Two", "priority": "urgent"}, {"title": "Three"}]')

    assert (result.succeeded, result.failed) == (2, 1)

    assert presenter.confirmations[0] == (
        "Import Tasks",
        "Import 3 tasks? This will add them to your existing tasks.",
    )
    assert mock_todo_client.create_todo.await_count == 3
    assert len(manager.cache) == 2
    assert presenter.messages(Severity.SUCCESS) == ["Imported 2 tasks"]
    assert presenter.messages(Severity.ERROR) == ["Failed to import 1 tasks"]


@pytest.mark.asyncio
async def test_clear_all_failure_reports_false(loaded, mock_todo_client, presenter):
    mock_todo_client.clear_todos.side_effect = StoreFault("Failed to clear todos")

    assert not await loaded.on_clear_all()

    assert len(loaded.cache) == 2
    assert presenter.last_message == ("Failed to clear tasks", Severity.ERROR)


@pytest.mark.asyncio
async def test_import_declined(manager, mock_todo_client, presenter):
    presenter.accept_confirm = False

    assert await manager.on_import('[{"title": "One"}]') is None
    mock_todo_client.create_todo.assert_not_awaited()


@pytest.mark.asyncio
async def test_clock_drives_default_cache(mock_todo_client, presenter, clock):
    """Test the manager's clock sets the undo expiry of its own cache"""
    manager = TodoManager(mock_todo_client, presenter, clock=clock)
    manager.cache.replace_all([make_task(task_id=TASK_A)])

    await manager.on_delete(TASK_A)

    assert manager.pending_undo.expires_at == clock() + timedelta(seconds=settings.UNDO_DURATION)
    clock.advance(settings.UNDO_DURATION)
    assert manager.expire_undo()
    assert manager.pending_undo is None
