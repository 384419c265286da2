"""
Terminal front end: a Presenter that prints, driven by one command per run
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, TextIO
from todo_manager.api.todo_client import TodoClient
from todo_manager.config.constants import FILTER_ALL, DEFAULT_SORT, TASK_STATUSES
from todo_manager.models.ports import ConfirmCallback, Severity
from todo_manager.models.view import SortKey, TaskStats, TodoView
from todo_manager.services.task_manager import TodoManager
from todo_manager.utils.date_utils import get_current_date
from todo_manager.utils.formatters import format_empty_state, format_stats, format_task_line

SEVERITY_MARKS = {
    Severity.SUCCESS: "ok",
    Severity.ERROR: "error",
    Severity.INFO: "info",
}


class ConsolePresenter:
    """Prints views and notifications; confirmations are read from stdin unless assume_yes"""

    def __init__(self, out: TextIO = sys.stdout, assume_yes: bool = False, show_list: bool = True):
        self.out = out
        self.assume_yes = assume_yes
        self.show_list = show_list

    def render(self, view: TodoView, stats: TaskStats) -> None:
        if not self.show_list:
            return

        if view.empty_reason is not None:
            print(format_empty_state(view.empty_reason, view.criteria), file=self.out)
        else:
            today = get_current_date()
            for task in view.tasks:
                print(f"{task.id}  {format_task_line(task, today)}", file=self.out)
        print(format_stats(stats), file=self.out)

    def notify(self, message: str, severity: Severity = Severity.SUCCESS) -> None:
        print(f"[{SEVERITY_MARKS[severity]}] {message}", file=self.out)

    async def confirm(self, title: str, message: str, on_confirm: ConfirmCallback) -> None:
        print(f"{title}: {message}", file=self.out)
        if not self.assume_yes:
            answer = input("Continue? [y/N] ").strip().lower()
            if answer not in ("y", "yes"):
                print("Cancelled", file=self.out)
                return
        await on_confirm()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todo", description="Todo Manager command line client")
    parser.add_argument("--url", help="Task API base URL (defaults to API_BASE_URL)")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="Show tasks")
    list_cmd.add_argument("--filter", default=FILTER_ALL, choices=(FILTER_ALL,) + TASK_STATUSES)
    list_cmd.add_argument("--search", default="")
    list_cmd.add_argument("--sort", default=DEFAULT_SORT, choices=[key.value for key in SortKey])

    add_cmd = commands.add_parser("add", help="Add a task")
    add_cmd.add_argument("title")
    add_cmd.add_argument("--priority")
    add_cmd.add_argument("--category")
    add_cmd.add_argument("--due", help="YYYY-MM-DD, today or tomorrow")

    edit_cmd = commands.add_parser("edit", help="Rename a task")
    edit_cmd.add_argument("id")
    edit_cmd.add_argument("title")

    for name, help_text in (
        ("done", "Toggle a task between completed and todo"),
        ("next", "Move a task to its next status"),
        ("delete", "Delete a task"),
    ):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument("id")

    commands.add_parser("clear", help="Delete all tasks")

    export_cmd = commands.add_parser("export", help="Write a JSON backup")
    export_cmd.add_argument("directory", nargs="?", default=".")

    import_cmd = commands.add_parser("import", help="Import a JSON backup")
    import_cmd.add_argument("file")

    return parser


async def run(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    """
    Execute one command

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    presenter = ConsolePresenter(out=out, assume_yes=args.yes, show_list=args.command == "list")

    async with TodoClient(base_url=args.url) as client:
        manager = TodoManager(client, presenter)
        if args.command == "list":
            manager.criteria = manager.criteria.model_copy(update={
                "filter_status": args.filter,
                "search_text": args.search.lower(),
                "sort_key": args.sort,
            })

        if not await manager.refresh():
            return 1

        if args.command == "list":
            return 0

        if args.command == "add":
            task = await manager.on_create(args.title, args.priority, args.category, args.due)
            return 0 if task else 1

        if args.command == "edit":
            return 0 if await manager.on_edit_title(args.id, args.title) else 1

        if args.command == "done":
            return 0 if await manager.on_toggle_complete(args.id) else 1

        if args.command == "next":
            return 0 if await manager.on_cycle_status(args.id) else 1

        if args.command == "delete":
            return 0 if await manager.on_delete(args.id) else 1

        if args.command == "clear":
            return 0 if await manager.on_clear_all() else 1

        if args.command == "export":
            return 0 if manager.on_export(args.directory) else 1

        if args.command == "import":
            try:
                text = Path(args.file).read_text(encoding="utf-8")
            except OSError as e:
                presenter.notify(f"Cannot read {args.file}: {e}", Severity.ERROR)
                return 1
            result = await manager.on_import(text)
            return 0 if result is not None and result.failed == 0 else 1

    return 2


def main():
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
