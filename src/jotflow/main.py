"""
Jotflow CLI

Usage:
    jotflow submit "Call the plumber tomorrow about the leak"
    jotflow tasks list [--status "To Do"]
    jotflow tasks update ID --status Done
    jotflow notes create "Wifi" --content "Password is on the fridge"
    jotflow --debug --console submit "..."

Every command prints JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, NoReturn

from jotflow import __version__
from jotflow.app import Jotflow
from jotflow.config import get_config
from jotflow.utils.logging import get_logger, setup_logging


def _print(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="jotflow",
        description="Jotflow - turn free-form text into tasks and notes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Use pretty console logging instead of JSON",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    submit = commands.add_parser("submit", help="Turn text into tasks and/or notes")
    submit.add_argument("text", help="Free-form input text")

    tasks = commands.add_parser("tasks", help="Manage tasks")
    task_actions = tasks.add_subparsers(dest="action", required=True)
    task_list = task_actions.add_parser("list")
    task_list.add_argument("--status", choices=["To Do", "In Progress", "Done"])
    task_actions.add_parser("show").add_argument("id")
    task_actions.add_parser("delete").add_argument("id")
    task_update = task_actions.add_parser("update")
    task_update.add_argument("id")
    task_update.add_argument("--title")
    task_update.add_argument("--description")
    task_update.add_argument("--status", choices=["To Do", "In Progress", "Done"])
    task_update.add_argument("--priority", choices=["Low", "Medium", "High"])
    task_update.add_argument("--difficulty", type=int, choices=range(1, 6))
    task_update.add_argument("--due-time", help="ISO timestamp, or 'none' to clear")
    task_update.add_argument("--category", action="append", dest="categories")
    task_update.add_argument("--step", action="append", dest="steps")

    notes = commands.add_parser("notes", help="Manage notes")
    note_actions = notes.add_subparsers(dest="action", required=True)
    note_actions.add_parser("list")
    note_actions.add_parser("show").add_argument("id")
    note_actions.add_parser("delete").add_argument("id")
    note_create = note_actions.add_parser("create")
    note_create.add_argument("title")
    note_create.add_argument("--content", default="")
    note_create.add_argument("--category", action="append", dest="categories")
    note_update = note_actions.add_parser("update")
    note_update.add_argument("id")
    note_update.add_argument("--title")
    note_update.add_argument("--content")
    note_update.add_argument("--category", action="append", dest="categories")

    return parser.parse_args(argv)


def _task_changes(args: argparse.Namespace) -> dict[str, Any]:
    changes = {
        "title": args.title,
        "description": args.description,
        "status": args.status,
        "priority": args.priority,
        "difficulty": args.difficulty,
        "categories": args.categories,
        "steps": args.steps,
    }
    if args.due_time is not None:
        changes["due_time"] = None if args.due_time.lower() == "none" else args.due_time
    return changes


def run_command(app: Jotflow, args: argparse.Namespace) -> int:
    """Execute a parsed command and return the exit code."""
    if args.command == "submit":
        response = asyncio.run(app.submit(args.text))
        _print(response.model_dump(exclude_none=True))
        return 0 if response.success else 1

    if args.command == "tasks":
        if args.action == "list":
            _print([task.to_dict() for task in app.list_tasks(args.status)])
            return 0
        if args.action == "show":
            task = app.get_task(args.id)
        elif args.action == "delete":
            deleted = app.delete_task(args.id)
            _print({"success": deleted})
            return 0 if deleted else 1
        else:
            task = app.update_task(args.id, **_task_changes(args))
        if task is None:
            _print({"error": "Task not found"})
            return 1
        _print(task.to_dict())
        return 0

    if args.action == "list":
        _print([note.to_dict() for note in app.list_notes()])
        return 0
    if args.action == "show":
        note = app.get_note(args.id)
    elif args.action == "delete":
        deleted = app.delete_note(args.id)
        _print({"success": deleted})
        return 0 if deleted else 1
    elif args.action == "create":
        note = app.create_note(args.title, args.content, args.categories)
    else:
        note = app.update_note(
            args.id,
            title=args.title,
            content=args.content,
            categories=args.categories,
        )
    if note is None:
        _print({"error": "Note not found"})
        return 1
    _print(note.to_dict())
    return 0


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the jotflow command."""
    args = parse_args(argv)

    config = get_config()

    if args.debug:
        config.log.level = "DEBUG"
    if args.console:
        config.log.format = "console"

    setup_logging(
        level=config.log.level,
        format=config.log.format,
        log_file=config.log.file,
    )
    logger = get_logger("jotflow.cli")

    app = Jotflow(config)
    try:
        exit_code = run_command(app, args)
    except ValueError as e:
        logger.error("invalid_arguments", error=str(e))
        _print({"error": str(e)})
        exit_code = 2
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
