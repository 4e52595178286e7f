"""Command-line front end for the task controller.

Every invocation behaves like a page load: a persisted session is resumed (and
the task list loaded) before the requested command runs.

Usage:
    taskboard signin -u alice
    taskboard list --status TODO
    taskboard add "Buy milk" --priority HIGH --deadline 2025-02-01T18:00
    taskboard toggle 3
    taskboard delete 3 --yes
"""

import argparse
import asyncio
import getpass
import logging
import sys
from datetime import datetime
from typing import TextIO

from core.config import Settings, get_settings
from schemas.auth import SignUpRequest
from schemas.task import Task, TaskFields, TaskPriority, TaskStatus
from services.formatting import escape_terminal, format_datetime, format_status
from services.notification_service import NoticeKind, Notifier
from services.task_view_service import TaskListView, TaskStats
from services.template_renderer import render_task_list_html

from .api_client import create_http_client
from .controller import TaskController
from .session_store import KeyValueStore, SessionStore
from .state import Create, SaveTask, View

logger = logging.getLogger(__name__)

_AUTH_COMMANDS = {"signin", "signup", "signout"}


def _deadline(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid deadline '{value}', use ISO-8601 (e.g. 2025-02-01T18:00)",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskboard", description="Manage your tasks.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    signin = subparsers.add_parser("signin", help="Sign in and remember the session")
    signin.add_argument("-u", "--username", required=True)
    signin.add_argument("-p", "--password", help="Prompted for when omitted")

    signup = subparsers.add_parser("signup", help="Create an account")
    signup.add_argument("-u", "--username", required=True)
    signup.add_argument("-e", "--email", required=True)
    signup.add_argument("--first-name", required=True)
    signup.add_argument("--last-name", required=True)
    signup.add_argument("-p", "--password", help="Prompted for when omitted")

    subparsers.add_parser("signout", help="Forget the stored session")
    subparsers.add_parser("whoami", help="Show the signed-in user")

    list_parser = subparsers.add_parser("list", help="List tasks")
    list_parser.add_argument("--status", choices=[s.value for s in TaskStatus])
    list_parser.add_argument("--priority", choices=[p.value for p in TaskPriority])
    list_parser.add_argument("--html", action="store_true", help="Print an HTML fragment")

    subparsers.add_parser("stats", help="Show task counts")

    show = subparsers.add_parser("show", help="Fetch one task from the server")
    show.add_argument("task_id", type=int)

    add = subparsers.add_parser("add", help="Create a task")
    add.add_argument("title")
    add.add_argument("-d", "--description", default="")
    add.add_argument("--status", choices=[s.value for s in TaskStatus], default="TODO")
    add.add_argument("--priority", choices=[p.value for p in TaskPriority], default="MEDIUM")
    add.add_argument("--deadline", type=_deadline)

    edit = subparsers.add_parser("edit", help="Update a task")
    edit.add_argument("task_id", type=int)
    edit.add_argument("--title")
    edit.add_argument("-d", "--description")
    edit.add_argument("--status", choices=[s.value for s in TaskStatus])
    edit.add_argument("--priority", choices=[p.value for p in TaskPriority])
    edit.add_argument("--deadline", type=_deadline)

    toggle = subparsers.add_parser("toggle", help="Mark a task done, or reopen a done task")
    toggle.add_argument("task_id", type=int)

    delete = subparsers.add_parser("delete", help="Delete a task")
    delete.add_argument("task_id", type=int)
    delete.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")

    subparsers.add_parser("overdue", help="List tasks the server reports as overdue")
    return parser


def _prompt_confirm(message: str) -> bool:
    answer = input(f"{message} [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def print_task_list(view: TaskListView, out: TextIO) -> None:
    """Print cards as plain text with task text neutralized for the terminal."""
    print_stats(view.stats, out)
    if view.empty_message:
        print(view.empty_message, file=out)
        return
    for card in view.cards:
        print(
            f"[{card.task_id}] {escape_terminal(card.title)}"
            f"  ({card.status_label}, {card.priority_label})",
            file=out,
        )
        if card.description:
            print(f"    {escape_terminal(card.description)}", file=out)
        if card.deadline_label:
            marker = "  OVERDUE" if card.is_overdue else ""
            print(f"    Due: {card.deadline_label}{marker}", file=out)


def print_stats(stats: TaskStats, out: TextIO) -> None:
    print(
        f"To Do: {stats.todo}  In Progress: {stats.in_progress}  "
        f"Done: {stats.done}  Overdue: {stats.overdue}",
        file=out,
    )


def _print_task(task: Task, out: TextIO) -> None:
    print(f"[{task.id}] {escape_terminal(task.title)}", file=out)
    print(f"    Status: {format_status(task.status)}  Priority: {task.priority.value}", file=out)
    if task.description:
        print(f"    {escape_terminal(task.description)}", file=out)
    if task.deadline:
        print(f"    Due: {format_datetime(task.deadline)}", file=out)


async def _dispatch(  # noqa: PLR0911, PLR0912
    controller: TaskController,
    args: argparse.Namespace,
    out: TextIO,
) -> bool:
    command = args.command
    if command == "signin":
        password = args.password or getpass.getpass("Password: ")
        return await controller.sign_in(args.username, password)
    if command == "signup":
        password = args.password or getpass.getpass("Password: ")
        request = SignUpRequest(
            username=args.username,
            email=args.email,
            password=password,
            first_name=args.first_name,
            last_name=args.last_name,
        )
        return await controller.sign_up(request)
    if command == "signout":
        controller.sign_out()
        return True

    if controller.state.view != View.APP or controller.state.session is None:
        controller.notifier.notify("Not signed in. Run 'taskboard signin' first.", NoticeKind.ERROR)
        return False

    if command == "whoami":
        session = controller.state.session
        print(f"{session.username} <{session.email}> (id {session.user_id})", file=out)
        return True
    if command == "list":
        controller.set_filters(
            status=TaskStatus(args.status) if args.status else None,
            priority=TaskPriority(args.priority) if args.priority else None,
        )
        screen = controller.render()
        if screen.task_list is None:
            return False
        if args.html:
            print(render_task_list_html(screen.task_list), file=out)
        else:
            print(screen.welcome, file=out)
            print_task_list(screen.task_list, out)
        return True
    if command == "stats":
        screen = controller.render()
        if screen.task_list is None:
            return False
        print_stats(screen.task_list.stats, out)
        return True
    if command == "show":
        task = await controller.fetch_task(args.task_id)
        if task is None:
            return False
        _print_task(task, out)
        return True
    if command == "add":
        fields = TaskFields(
            title=args.title,
            description=args.description,
            status=TaskStatus(args.status),
            priority=TaskPriority(args.priority),
            deadline=args.deadline,
        )
        return await controller.save_task(SaveTask(mode=Create(), fields=fields))
    if command == "edit":
        editor = controller.open_editor(args.task_id)
        if editor is None:
            controller.notifier.notify(f"Task {args.task_id} not found", NoticeKind.WARNING)
            return False
        current = editor.fields
        fields = TaskFields(
            title=args.title if args.title is not None else current.title,
            description=(
                args.description if args.description is not None else current.description
            ),
            status=TaskStatus(args.status) if args.status else current.status,
            priority=TaskPriority(args.priority) if args.priority else current.priority,
            deadline=args.deadline if args.deadline is not None else current.deadline,
        )
        return await controller.submit_editor(fields)
    if command == "toggle":
        return await controller.toggle_status(args.task_id)
    if command == "delete":
        confirm = (lambda _: True) if args.yes else None
        return await controller.delete_task(args.task_id, confirm=confirm)
    if command == "overdue":
        tasks = await controller.fetch_remote_listing(overdue=True)
        if tasks is None:
            return False
        for task in tasks:
            _print_task(task, out)
        if not tasks:
            print("No overdue tasks.", file=out)
        return True
    raise ValueError(f"Unknown command: {command}")


async def run(
    args: argparse.Namespace,
    settings: Settings,
    out: TextIO = sys.stdout,
    err: TextIO = sys.stderr,
    notifier: Notifier | None = None,
) -> int:
    """
    Run one command against the API and return the process exit code.

    Every notice issued during the run is printed and counts toward the exit
    code, however long the command took.
    """
    logger.debug("Running '%s' against %s", args.command, settings.api_base_url)
    if notifier is None:
        notifier = Notifier(ttl_seconds=settings.notice_ttl_seconds)
    session_store = SessionStore(KeyValueStore(settings.session_file))
    async with create_http_client(settings) as client:
        controller = TaskController(client, session_store, notifier, confirm=_prompt_confirm)
        if args.command not in _AUTH_COMMANDS:
            await controller.start()
        ok = await _dispatch(controller, args, out)

    failed = False
    for notice in notifier.drain(include_expired=True):
        failed = failed or notice.kind == NoticeKind.ERROR
        print(f"{notice.icon} {escape_terminal(notice.message)}", file=err)
    return 0 if ok and not failed else 1


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
