"""Google Tasks API client.

Usage:
    from gtasks.config import Config
    from gtasks.google import obtain_transport
    from gtasks.tasks import TasksClient

    client = TasksClient(obtain_transport(Config.from_env()))

    # List task lists
    lists = client.list_task_lists()

    # List tasks, including hidden and completed ones
    tasks = client.list_tasks(lists[0].id)

    # Create a task
    client.insert_task(lists[0].id, "Review PR", notes="Check the changes", due="2026-01-25")
"""

from __future__ import annotations

from gtasks.tasks.client import TaskList, TasksClient, TaskStatus

__all__ = ["TasksClient", "TaskList", "TaskStatus"]
