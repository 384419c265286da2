"""
Task API: HTTP endpoints over the task store
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional
from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from todo_manager.config.settings import settings
from todo_manager.models.response import ClearResponse, DeleteResponse, HealthResponse
from todo_manager.models.task import Task, TaskCreate, TaskUpdate
from todo_manager.services.task_store import TaskStore, is_valid_task_id
from todo_manager.utils.error_handler import TodoError, NotFoundError, StoreFault, ValidationError, handle_error
from todo_manager.utils.logger import logger

router = APIRouter()


def get_store(request: Request) -> TaskStore:
    """Store attached to the application"""
    return request.app.state.store


def _require_valid_id(task_id: str) -> None:
    if not is_valid_task_id(task_id):
        raise ValidationError("Invalid todo ID")


@contextmanager
def store_failure(message: str) -> Iterator[None]:
    """Report a store fault to the client as a fixed message; the details are only logged"""
    try:
        yield
    except StoreFault as e:
        logger.error(f"{message}: {e}")
        raise StoreFault(message) from e


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as a readable message"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]

    if loc and loc[-1] == "title" and (error.get("type") == "missing" or error.get("input") is None):
        return "Title is required"

    message = error.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        return message[len("Value error, "):]

    if loc:
        return f"{loc[-1]}: {message}"
    return message


@router.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse()


@router.get("/todos", response_model=List[Task])
def list_todos(store: TaskStore = Depends(get_store)):
    """List all tasks, newest first"""
    with store_failure("Failed to fetch todos"):
        return store.find_all()


@router.post("/todos", response_model=Task, status_code=201)
def create_todo(
    payload: Optional[TaskCreate] = Body(None),
    store: TaskStore = Depends(get_store),
):
    """Create a task; only the title is required"""
    if payload is None:
        raise ValidationError("Title is required")

    with store_failure("Failed to create todo"):
        task = store.insert(payload.model_dump())
    logger.info(f"Created task {task.id} '{task.title}'")
    return task


@router.put("/todos/{task_id}", response_model=Task)
def update_todo(
    task_id: str,
    payload: Optional[TaskUpdate] = Body(None),
    store: TaskStore = Depends(get_store),
):
    """Partially update a task"""
    _require_valid_id(task_id)

    changes = payload.changes() if payload is not None else {}
    with store_failure("Failed to update todo"):
        task = store.update_by_id(task_id, changes)
    if task is None:
        raise NotFoundError("Todo not found")

    logger.info(f"Updated task {task_id} fields={sorted(changes)}")
    return task


@router.delete("/todos/{task_id}", response_model=DeleteResponse)
def delete_todo(task_id: str, store: TaskStore = Depends(get_store)):
    """Delete one task"""
    _require_valid_id(task_id)

    with store_failure("Failed to delete todo"):
        task = store.delete_by_id(task_id)
    if task is None:
        raise NotFoundError("Todo not found")

    logger.info(f"Deleted task {task_id}")
    return DeleteResponse(todo=task)


@router.delete("/todos", response_model=ClearResponse)
def clear_todos(store: TaskStore = Depends(get_store)):
    """Delete every task"""
    with store_failure("Failed to clear todos"):
        removed = store.delete_all()
    return ClearResponse(deleted_count=removed)


async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    response = handle_error(exc)
    return JSONResponse(status_code=response.status_code, content=response.model_dump())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _validation_message(exc)
    logger.warning(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content={"error": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # 405 is reported like an unknown route
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    response = handle_error(exc)
    return JSONResponse(status_code=500, content=response.model_dump())


def create_app(store: TaskStore) -> FastAPI:
    """
    Build the Task API application

    Args:
        store: Opened task store shared by all requests

    Returns:
        FastAPI application
    """
    app = FastAPI(title="Todo Manager API")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    app.include_router(router, prefix=settings.API_PREFIX)

    app.add_exception_handler(TodoError, todo_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    return app
