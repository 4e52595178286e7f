"""
Client controller for the task API.

Owns the application state, switches between the auth and app views, and
mediates every read and write of task data. Every failure is recovered here:
the user gets an error notice and the state stays at its last known good value.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

import httpx

from schemas.auth import SignUpRequest
from schemas.task import Task, TaskFields, TaskPriority, TaskStatus
from services.exceptions import ApplicationError, ClientError
from services.notification_service import NoticeKind, Notifier
from shared.api_errors import parse_http_error, parse_request_error

from . import api_client
from .session_store import SessionStore
from .state import AppState, AuthTab, Create, SaveTask, Session, TaskEditor, Update, View
from .views import ScreenView, render

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Are you sure you want to delete this task?"

Confirm = Callable[[str], bool]


def _deny(_: str) -> bool:
    return False


class TaskController:
    """
    Single owner of session, task cache and editor state.

    Args:
        client: HTTP client with the API base URL configured.
        session_store: Durable mirror of the session.
        notifier: Receives every user-visible message.
        confirm: Asked before destructive operations; without one, deletes are
            never confirmed.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        session_store: SessionStore,
        notifier: Notifier,
        confirm: Confirm | None = None,
    ) -> None:
        self.client = client
        self.session_store = session_store
        self.notifier = notifier
        self.confirm = confirm or _deny
        self.state = AppState()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Resume a persisted session without contacting the server, or show auth."""
        stored = self.session_store.load()
        if stored is None:
            self._show_auth()
            return
        token, profile = stored
        self.state.session = Session.from_profile(token, profile)
        logger.info("Restored session for user %s", profile.username)
        await self._show_app()

    def show_tab(self, tab: AuthTab) -> None:
        self.state.auth_tab = tab

    def render(self, now: datetime | None = None) -> ScreenView:
        """View-model of the current state."""
        return render(self.state, now)

    def _show_auth(self) -> None:
        self.state.view = View.AUTH

    async def _show_app(self) -> None:
        self.state.view = View.APP
        await self.load_tasks()

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self.state.pending_requests += 1
        try:
            yield
        finally:
            self.state.pending_requests -= 1

    def _report(self, error: ClientError) -> None:
        logger.warning("%s: %s", type(error).__name__, error.message)
        self.notifier.notify(error.message, NoticeKind.ERROR)

    def _require_token(self) -> str | None:
        if self.state.session is None:
            self.notifier.notify("Please sign in first", NoticeKind.WARNING)
            return None
        return self.state.session.auth_token

    # ------------------------------------------------------------------
    # Auth flow
    # ------------------------------------------------------------------

    async def sign_in(self, username: str, password: str) -> bool:
        """Authenticate, persist the session and switch to the app view."""
        with self._loading():
            try:
                response = await api_client.sign_in(self.client, username, password)
            except httpx.HTTPStatusError as e:
                self._report(parse_http_error(e, "Login failed"))
                return False
            except httpx.RequestError as e:
                self._report(parse_request_error(e, "Network error. Please try again."))
                return False
            except ValueError:
                self._report(ApplicationError("Login failed"))
                return False

        session = Session(
            user_id=response.id,
            username=response.username,
            email=response.email,
            auth_token=response.access_token,
        )
        self.state.session = session
        self.session_store.save(session.auth_token, session.to_profile())
        logger.info("Signed in as %s", session.username)
        self.notifier.notify("Login successful!", NoticeKind.SUCCESS)
        await self._show_app()
        return True

    async def sign_up(self, request: SignUpRequest) -> bool:
        """Register an account and return to the sign-in tab without authenticating."""
        with self._loading():
            try:
                await api_client.sign_up(self.client, request)
            except httpx.HTTPStatusError as e:
                self._report(parse_http_error(e, "Registration failed"))
                return False
            except httpx.RequestError as e:
                self._report(parse_request_error(e, "Network error. Please try again."))
                return False
            except ValueError:
                # Account exists; only the unused response body failed to decode.
                logger.warning("Unexpected payload in sign-up response")

        logger.info("Registered user %s", request.username)
        self.notifier.notify("Registration successful! Please login.", NoticeKind.SUCCESS)
        self.state.auth_tab = AuthTab.SIGN_IN
        return True

    def sign_out(self) -> None:
        """
        Forget the session in memory and storage. Never fails, no network call.

        Task lists still in flight for the old session are discarded on arrival.
        """
        self.state.session = None
        self.state.load_seq += 1
        self.state.tasks = []
        self.state.editor = None
        self.session_store.clear()
        self._show_auth()
        self.notifier.notify("Logged out successfully", NoticeKind.INFO)

    # ------------------------------------------------------------------
    # Task CRUD flow
    # ------------------------------------------------------------------

    async def load_tasks(self) -> bool:
        """
        Replace the task cache with the server's full list.

        Each call takes a sequence number; a response that arrives after a newer
        load was started is discarded, success or failure.
        """
        token = self._require_token()
        if token is None:
            return False

        self.state.load_seq += 1
        seq = self.state.load_seq
        error: ClientError | None = None
        tasks: list[Task] = []
        with self._loading():
            try:
                tasks = await api_client.list_tasks(self.client, token)
            except httpx.HTTPStatusError as e:
                error = parse_http_error(e, "Failed to load tasks")
            except httpx.RequestError as e:
                error = parse_request_error(e, "Network error while loading tasks")
            except ValueError:
                # Body was not JSON or did not match the task schema
                error = ApplicationError("Failed to load tasks")

        if seq != self.state.load_seq:
            logger.info("Discarding stale task list (request %d, latest %d)", seq, self.state.load_seq)
            return False
        if error is not None:
            self._report(error)
            return False

        self.state.tasks = tasks
        logger.debug("Loaded %d tasks", len(tasks))
        return True

    def open_editor(self, task_id: int | None = None) -> TaskEditor | None:
        """
        Open the edit surface.

        Without a task id the editor creates a new task with status TODO and
        priority MEDIUM. With an id it is prefilled from the cache; ids missing
        from the cache open nothing.
        """
        if task_id is None:
            # Blank form; the title is validated when the user submits it
            editor = TaskEditor(mode=Create(), fields=TaskFields.model_construct(title=""))
        else:
            task = self.state.find_task(task_id)
            if task is None:
                return None
            editor = TaskEditor(mode=Update(task.id), fields=TaskFields.from_task(task))
        self.state.editor = editor
        return editor

    def close_editor(self) -> None:
        self.state.editor = None

    async def submit_editor(self, fields: TaskFields) -> bool:
        """Save the open editor's fields, creating or updating per its mode."""
        if self.state.editor is None:
            self.notifier.notify("No task is being edited", NoticeKind.WARNING)
            return False
        return await self.save_task(self.state.editor.command(fields))

    async def save_task(self, command: SaveTask) -> bool:
        """
        Create or update a task, then reload the full list.

        On success the editor is closed; on failure it stays open.
        """
        token = self._require_token()
        if token is None:
            return False

        with self._loading():
            try:
                if isinstance(command.mode, Update):
                    await api_client.update_task(
                        self.client, token, command.mode.task_id, command.fields,
                    )
                else:
                    await api_client.create_task(self.client, token, command.fields)
            except httpx.HTTPStatusError as e:
                self._report(parse_http_error(e, "Failed to save task"))
                return False
            except httpx.RequestError as e:
                self._report(parse_request_error(e, "Network error while saving task"))
                return False
            except ValueError:
                # Saved server-side but the echo did not parse; the reload shows the truth.
                logger.warning("Unexpected task payload in save response")

        if isinstance(command.mode, Update):
            self.notifier.notify("Task updated successfully!", NoticeKind.SUCCESS)
        else:
            self.notifier.notify("Task created successfully!", NoticeKind.SUCCESS)
        self.close_editor()
        await self.load_tasks()
        return True

    async def delete_task(self, task_id: int, confirm: Confirm | None = None) -> bool:
        """Delete a task after explicit confirmation, then reload."""
        token = self._require_token()
        if token is None:
            return False
        if not (confirm or self.confirm)(DELETE_CONFIRMATION):
            logger.debug("Delete of task %d not confirmed", task_id)
            return False

        with self._loading():
            try:
                await api_client.delete_task(self.client, token, task_id)
            except httpx.HTTPStatusError as e:
                self._report(parse_http_error(e, "Failed to delete task"))
                return False
            except httpx.RequestError as e:
                self._report(parse_request_error(e, "Network error while deleting task"))
                return False
            except ValueError:
                logger.warning("Unexpected payload in delete response")

        self.notifier.notify("Task deleted successfully!", NoticeKind.SUCCESS)
        await self.load_tasks()
        return True

    async def toggle_status(self, task_id: int) -> bool:
        """
        Flip a task between DONE and TODO.

        Anything that is not DONE (IN_PROGRESS included) goes to DONE.
        """
        token = self._require_token()
        if token is None:
            return False
        task = self.state.find_task(task_id)
        if task is None:
            self.notifier.notify(f"Task {task_id} not found", NoticeKind.WARNING)
            return False

        new_status = TaskStatus.TODO if task.status == TaskStatus.DONE else TaskStatus.DONE
        with self._loading():
            try:
                await api_client.update_task_status(self.client, token, task_id, new_status)
            except httpx.HTTPStatusError as e:
                self._report(parse_http_error(e, "Failed to update task status"))
                return False
            except httpx.RequestError as e:
                self._report(parse_request_error(e, "Network error while updating task"))
                return False
            except ValueError:
                logger.warning("Unexpected task payload in status response")

        done = new_status == TaskStatus.DONE
        self.notifier.notify(
            f"Task marked as {'completed' if done else 'incomplete'}!", NoticeKind.SUCCESS,
        )
        await self.load_tasks()
        return True

    # ------------------------------------------------------------------
    # Filtering and server-side lookups
    # ------------------------------------------------------------------

    def set_filters(
        self,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
    ) -> None:
        """Change the filters applied by render(); does not touch the server."""
        self.state.status_filter = status
        self.state.priority_filter = priority

    async def fetch_task(self, task_id: int) -> Task | None:
        """Fetch one task straight from the server without touching the cache."""
        token = self._require_token()
        if token is None:
            return None
        with self._loading():
            try:
                return await api_client.get_task(self.client, token, task_id)
            except httpx.HTTPStatusError as e:
                self._report(parse_http_error(e, f"Task {task_id} not found"))
            except httpx.RequestError as e:
                self._report(parse_request_error(e, "Network error while loading task"))
            except ValueError:
                self._report(ApplicationError(f"Failed to load task {task_id}"))
        return None

    async def fetch_remote_listing(
        self,
        *,
        overdue: bool = False,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
    ) -> list[Task] | None:
        """
        Run one server-side listing (overdue, by status or by priority).

        The result is returned as-is; the task cache is not replaced.

        Raises:
            ValueError: If not exactly one listing is selected.
        """
        selected = sum([overdue, status is not None, priority is not None])
        if selected != 1:
            raise ValueError("Select exactly one of overdue, status or priority")
        token = self._require_token()
        if token is None:
            return None

        with self._loading():
            try:
                if overdue:
                    return await api_client.list_overdue_tasks(self.client, token)
                if status is not None:
                    return await api_client.list_tasks_by_status(self.client, token, status)
                if priority is not None:
                    return await api_client.list_tasks_by_priority(self.client, token, priority)
            except httpx.HTTPStatusError as e:
                self._report(parse_http_error(e, "Failed to load tasks"))
            except httpx.RequestError as e:
                self._report(parse_request_error(e, "Network error while loading tasks"))
            except ValueError:
                self._report(ApplicationError("Failed to load tasks"))
        return None
