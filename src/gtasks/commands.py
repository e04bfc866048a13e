"""Task commands.

Each command operates on one task list and performs at most one mutation.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

from gtasks.exceptions import TaskListNotFoundError
from gtasks.tasks import TasksClient, TaskStatus

logger = logging.getLogger(__name__)


def resolve_task_list(client: TasksClient, name: str) -> str:
    """Resolve a task list name to its ID.

    Matching is exact and case-sensitive. When several lists share a name,
    the last one returned by the API wins.

    Raises:
        TaskListNotFoundError: If no list has this name.
    """
    ids: dict[str, str] = {}
    for task_list in client.list_task_lists():
        if task_list.title in ids:
            logger.warning(f"Multiple task lists named {task_list.title!r}; using the last one")
        ids[task_list.title] = task_list.id

    if not name or name not in ids:
        raise TaskListNotFoundError(name)
    return ids[name]


def add(client: TasksClient, tasklist_id: str, title: str, notes: str = "", due: str = "") -> None:
    """Add a task to the list."""
    task = client.insert_task(tasklist_id, title, notes=notes, due=due)
    logger.info(f"Added task {task.get('id')}")


def list_tasks(client: TasksClient, tasklist_id: str, out: TextIO | None = None) -> None:
    """Write every task in the list, hidden and completed included, as JSON."""
    if out is None:
        out = sys.stdout
    items = client.list_tasks(tasklist_id, show_hidden=True)
    out.write(json.dumps(items, separators=(",", ":"), ensure_ascii=False))
    out.write("\n")


def set_status(client: TasksClient, tasklist_id: str, task_id: str, status: TaskStatus) -> None:
    """Fetch a task, change its status and write the full task back."""
    task = client.get_task(tasklist_id, task_id)
    task["status"] = status.value
    client.update_task(tasklist_id, task_id, task)
    logger.info(f"Set task {task_id} to {status.value}")


def check(client: TasksClient, tasklist_id: str, task_id: str) -> None:
    """Mark a task as completed."""
    set_status(client, tasklist_id, task_id, TaskStatus.COMPLETED)


def uncheck(client: TasksClient, tasklist_id: str, task_id: str) -> None:
    """Mark a task as not completed."""
    set_status(client, tasklist_id, task_id, TaskStatus.NEEDS_ACTION)


def delete(client: TasksClient, tasklist_id: str, task_id: str) -> None:
    """Delete a task. A task that is already gone is an error."""
    client.delete_task(tasklist_id, task_id)
    logger.info(f"Deleted task {task_id}")
