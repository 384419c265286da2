"""
Pytest configuration and fixtures
"""

import os

# Keep test runs from writing log files
os.environ.setdefault("LOG_DIR", "")

import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from todo_manager.api.todo_client import TodoClient
from todo_manager.services.task_cache import TaskCache
from todo_manager.services.task_manager import TodoManager
from todo_manager.services.task_store import TaskStore
from todo_manager.web.main import create_app
from fakes import BASE_TIME, FakeClock, FakePresenter, make_task


@pytest.fixture
def store(tmp_path):
    """Task store on a temporary database"""
    return TaskStore(tmp_path / "todos.sqlite3")


@pytest.fixture
def app(store):
    """Task API application bound to the temporary store"""
    return create_app(store)


@pytest.fixture
def api(app):
    """HTTP test client for the Task API"""
    return TestClient(app)


@pytest.fixture
def asgi_client(app):
    """TodoClient talking to the in-process app"""
    return TodoClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))


@pytest.fixture
def presenter():
    return FakePresenter()


@pytest.fixture
def clock():
    return FakeClock(BASE_TIME)


@pytest.fixture
def mock_todo_client():
    """Mock Task API client"""
    client = MagicMock(spec=TodoClient)
    client.list_todos = AsyncMock(return_value=[])
    client.create_todo = AsyncMock(return_value=make_task(task_id="c" * 32, title="Created"))
    client.update_todo = AsyncMock()
    client.delete_todo = AsyncMock()
    client.clear_todos = AsyncMock(return_value=0)
    return client


@pytest.fixture
def manager(mock_todo_client, presenter, clock):
    """Task manager with mocked client and a controllable clock"""
    cache = TaskCache(undo_duration=5, clock=clock)
    return TodoManager(mock_todo_client, presenter, cache=cache)
