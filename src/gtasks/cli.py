"""CLI for gtasks - Google Tasks from the command line.

Usage:
    gtasks add <list> <title> [notes] [due]   # Add a task
    gtasks list <list>                        # Print all tasks as JSON
    gtasks check <list> <task-id>             # Mark a task completed
    gtasks uncheck <list> <task-id>           # Mark a task not completed
    gtasks delete <list> <task-id>            # Delete a task

On first use, prints an authorization URL and waits for the code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable

from gtasks import commands
from gtasks.config import Config
from gtasks.exceptions import GtasksError
from gtasks.google import obtain_transport
from gtasks.tasks import TasksClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gtasks",
        description="Manage Google Tasks from the command line",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="command")

    # add command
    add_parser = subparsers.add_parser("add", help="Add a task")
    add_parser.add_argument("tasklist", help="Task list name")
    add_parser.add_argument("title", help="Task title")
    add_parser.add_argument("notes", nargs="?", default="", help="Task notes")
    add_parser.add_argument("due", nargs="?", default="", help="Due date (RFC 3339 or YYYY-MM-DD)")

    # list command
    list_parser = subparsers.add_parser("list", help="Print all tasks as JSON")
    list_parser.add_argument("tasklist", help="Task list name")

    # check, uncheck and delete take a task ID
    for name, help_text in (
        ("check", "Mark a task completed"),
        ("uncheck", "Mark a task not completed"),
        ("delete", "Delete a task"),
    ):
        task_parser = subparsers.add_parser(name, help=help_text)
        task_parser.add_argument("tasklist", help="Task list name")
        task_parser.add_argument("task_id", help="Task ID")

    return parser


def setup_logging(verbose: bool = False) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(
    args: argparse.Namespace,
    config: Config,
    prompt: Callable[[], str] = input,
) -> int:
    """Authenticate, resolve the task list and run one command."""
    client = TasksClient(obtain_transport(config, prompt=prompt))
    tasklist_id = commands.resolve_task_list(client, args.tasklist)

    if args.command == "add":
        commands.add(client, tasklist_id, args.title, notes=args.notes, due=args.due)
    elif args.command == "list":
        commands.list_tasks(client, tasklist_id)
    elif args.command == "check":
        commands.check(client, tasklist_id, args.task_id)
    elif args.command == "uncheck":
        commands.uncheck(client, tasklist_id, args.task_id)
    elif args.command == "delete":
        commands.delete(client, tasklist_id, args.task_id)
    else:
        raise GtasksError(f"Unknown command: {args.command}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = Config.from_env()
        return run(args, config)
    except GtasksError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
