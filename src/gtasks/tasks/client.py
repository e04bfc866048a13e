"""Google Tasks API client implementation."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any
from urllib.parse import quote

import requests
from authlib.common.errors import AuthlibBaseError

from gtasks.exceptions import TasksAPIError
from gtasks.google.transport import Transport

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Task completion status."""

    NEEDS_ACTION = "needsAction"
    COMPLETED = "completed"


@dataclass
class TaskList:
    """Represents a Google Tasks list."""

    id: str
    title: str


def _normalize_due(due: str) -> str:
    """Expand a bare YYYY-MM-DD date to RFC 3339; pass anything else through."""
    with contextlib.suppress(ValueError):
        # Google Tasks API expects RFC 3339 format
        return f"{date.fromisoformat(due).isoformat()}T00:00:00.000Z"
    return due


class TasksClient:
    """Google Tasks API client over an authenticated transport.

    Tasks are returned as the raw JSON objects from the API so their field
    names and order are preserved.

    Usage:
        client = TasksClient(obtain_transport(config))
        lists = client.list_task_lists()
        tasks = client.list_tasks(lists[0].id)
    """

    BASE_URL = "https://tasks.googleapis.com/tasks/v1"
    PAGE_SIZE = 100

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any] | None:
        """Issue a request and decode the JSON response.

        Raises:
            TasksAPIError: On network failure or a non-2xx response.
        """
        url = f"{self.BASE_URL}{path}"
        try:
            response = self.transport.request(method, url, **kwargs)
        except (AuthlibBaseError, requests.RequestException) as e:
            raise TasksAPIError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise TasksAPIError(
                f"{method} {path} failed: {response.status_code} {self._error_message(response)}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TasksAPIError(f"{method} {path} returned invalid JSON: {e}") from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract the API error message, falling back to the reason phrase."""
        with contextlib.suppress(ValueError, LookupError, AttributeError, TypeError):
            message = response.json()["error"]["message"]
            if message:
                return message
        return response.reason or "error"

    def _paginate(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Collect items across all result pages."""
        params = dict(params or {})
        params["maxResults"] = self.PAGE_SIZE
        items: list[dict[str, Any]] = []

        while True:
            result = self._request("GET", path, params=params) or {}
            items.extend(result.get("items", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                return items
            params["pageToken"] = page_token

    @staticmethod
    def _task_path(tasklist_id: str, task_id: str | None = None) -> str:
        path = f"/lists/{quote(tasklist_id, safe='')}/tasks"
        if task_id is not None:
            path += f"/{quote(task_id, safe='')}"
        return path

    # =========================================================================
    # Task Lists
    # =========================================================================

    def list_task_lists(self) -> list[TaskList]:
        """List all task lists.

        Returns:
            List of TaskList objects.
        """
        items = self._paginate("/users/@me/lists")
        return [TaskList(id=item["id"], title=item.get("title", "")) for item in items]

    # =========================================================================
    # Tasks
    # =========================================================================

    def list_tasks(self, tasklist_id: str, show_hidden: bool = True) -> list[dict[str, Any]]:
        """List tasks in a task list, including completed ones.

        Args:
            tasklist_id: Task list ID.
            show_hidden: Include hidden tasks.

        Returns:
            Task objects as returned by the API.
        """
        params = {
            "showCompleted": "true",
            "showHidden": "true" if show_hidden else "false",
        }
        return self._paginate(self._task_path(tasklist_id), params)

    def get_task(self, tasklist_id: str, task_id: str) -> dict[str, Any]:
        """Get a specific task.

        Raises:
            TasksAPIError: If the task does not exist.
        """
        return self._request("GET", self._task_path(tasklist_id, task_id)) or {}

    def insert_task(
        self,
        tasklist_id: str,
        title: str,
        notes: str = "",
        due: str = "",
    ) -> dict[str, Any]:
        """Create a new task.

        Args:
            tasklist_id: Task list ID.
            title: Task title.
            notes: Task notes; omitted when empty.
            due: Due date as RFC 3339 or "YYYY-MM-DD"; omitted when empty.

        Returns:
            Created task.
        """
        body: dict[str, Any] = {"title": title}
        if notes:
            body["notes"] = notes
        if due:
            body["due"] = _normalize_due(due)

        return self._request("POST", self._task_path(tasklist_id), json=body) or {}

    def update_task(self, tasklist_id: str, task_id: str, body: dict[str, Any]) -> dict[str, Any]:
        """Replace a task with the given full body.

        Returns:
            Updated task.
        """
        return self._request("PUT", self._task_path(tasklist_id, task_id), json=body) or {}

    def delete_task(self, tasklist_id: str, task_id: str) -> None:
        """Delete a task.

        Raises:
            TasksAPIError: If the task does not exist or cannot be deleted.
        """
        self._request("DELETE", self._task_path(tasklist_id, task_id))
