"""Client for the task-management API."""

from .controller import TaskController
from .session_store import KeyValueStore, SessionStore
from .state import AppState, Create, SaveTask, Update
from .views import render

__all__ = [
    "AppState",
    "Create",
    "KeyValueStore",
    "SaveTask",
    "SessionStore",
    "TaskController",
    "Update",
    "render",
]
