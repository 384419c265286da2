"""
Ports (interfaces) used by the core.

The task manager depends on this Protocol instead of a concrete UI, so a web page,
a terminal or a test double can play the presentation role.
"""

from enum import Enum
from typing import Awaitable, Callable, Protocol
from todo_manager.models.view import TodoView, TaskStats


class Severity(str, Enum):
    """Notification severity"""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


ConfirmCallback = Callable[[], Awaitable[None]]


class Presenter(Protocol):
    """Presentation collaborator driven by the task manager"""
    
    def render(self, view: TodoView, stats: TaskStats) -> None:
        """Display the derived view (empty_reason is set when there is nothing to show)"""
        ...
    
    def notify(self, message: str, severity: Severity = Severity.SUCCESS) -> None:
        """Show a short message"""
        ...
    
    def confirm(self, title: str, message: str, on_confirm: ConfirmCallback) -> Awaitable[None]:
        """Ask the user to confirm; await on_confirm() only if they accept"""
        ...
