"""Shared fixtures."""

import json

import pytest

from gtasks.config import Config
from gtasks.exceptions import TasksAPIError
from gtasks.tasks import TaskList


class FakeTasksClient:
    """In-memory stand-in for TasksClient."""

    def __init__(self, task_lists=None, tasks=None):
        self.task_lists = task_lists or []
        self.tasks = tasks or {}
        self.inserted = []
        self.updated = []
        self.deleted = []

    def list_task_lists(self):
        return list(self.task_lists)

    def list_tasks(self, tasklist_id, show_hidden=True):
        return [task for (list_id, _), task in self.tasks.items() if list_id == tasklist_id]

    def get_task(self, tasklist_id, task_id):
        key = (tasklist_id, task_id)
        if key not in self.tasks:
            raise TasksAPIError(f"GET {task_id} failed: 404 Task not found.", status_code=404)
        return json.loads(json.dumps(self.tasks[key]))

    def insert_task(self, tasklist_id, title, notes="", due=""):
        self.inserted.append((tasklist_id, title, notes, due))
        task = {"kind": "tasks#task", "id": f"task-{len(self.inserted)}", "title": title}
        self.tasks[(tasklist_id, task["id"])] = task
        return task

    def update_task(self, tasklist_id, task_id, body):
        key = (tasklist_id, task_id)
        if key not in self.tasks:
            raise TasksAPIError(f"PUT {task_id} failed: 404 Task not found.", status_code=404)
        self.updated.append((tasklist_id, task_id, body))
        self.tasks[key] = body
        return body

    def delete_task(self, tasklist_id, task_id):
        key = (tasklist_id, task_id)
        if key not in self.tasks:
            raise TasksAPIError(f"DELETE {task_id} failed: 404 Task not found.", status_code=404)
        self.deleted.append((tasklist_id, task_id))
        del self.tasks[key]


@pytest.fixture
def fake_client():
    """Fake client with an Inbox list holding two tasks."""
    return FakeTasksClient(
        task_lists=[
            TaskList(id="inbox-id", title="Inbox"),
            TaskList(id="work-id", title="Work"),
        ],
        tasks={
            ("inbox-id", "t1"): {
                "kind": "tasks#task",
                "id": "t1",
                "etag": '"abc"',
                "title": "Buy milk",
                "updated": "2026-01-01T10:00:00.000Z",
                "status": "needsAction",
                "due": "2026-01-25T00:00:00.000Z",
            },
            ("inbox-id", "t2"): {
                "kind": "tasks#task",
                "id": "t2",
                "title": "Call mom",
                "notes": "Sunday",
                "status": "completed",
                "completed": "2026-01-02T08:00:00.000Z",
                "hidden": True,
            },
        },
    )


@pytest.fixture
def config(tmp_path):
    """Config rooted in a temporary directory."""
    return Config(config_dir=tmp_path / "gtasks")


@pytest.fixture
def client_secret_file(config):
    """Write an installed-app client secret into the config directory."""
    creds = {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }
    config.ensure_config_dir()
    with open(config.credentials_path, "w") as f:
        json.dump(creds, f)
    return config.credentials_path
