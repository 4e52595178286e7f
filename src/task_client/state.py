"""Application state owned by the task controller."""
from dataclasses import dataclass, field
from enum import StrEnum

from schemas.auth import UserProfile
from schemas.task import Task, TaskFields, TaskPriority, TaskStatus


class View(StrEnum):
    """The two mutually exclusive views."""

    AUTH = "auth"
    APP = "app"


class AuthTab(StrEnum):
    """Tabs of the auth view."""

    SIGN_IN = "signin"
    SIGN_UP = "signup"


@dataclass(frozen=True)
class Session:
    """Authenticated user context plus the bearer token."""

    user_id: int
    username: str
    email: str
    auth_token: str

    @classmethod
    def from_profile(cls, token: str, profile: UserProfile) -> "Session":
        return cls(
            user_id=profile.id,
            username=profile.username,
            email=profile.email,
            auth_token=token,
        )

    def to_profile(self) -> UserProfile:
        return UserProfile(id=self.user_id, username=self.username, email=self.email)


@dataclass(frozen=True)
class Create:
    """Save mode: the submitted fields become a new task."""


@dataclass(frozen=True)
class Update:
    """Save mode: the submitted fields replace those of an existing task."""

    task_id: int


SaveMode = Create | Update


@dataclass(frozen=True)
class SaveTask:
    """Explicit create-or-update command."""

    mode: SaveMode
    fields: TaskFields


@dataclass
class TaskEditor:
    """An open edit surface: the save mode and the fields shown in it."""

    mode: SaveMode
    fields: TaskFields

    @property
    def title(self) -> str:
        return "Edit Task" if isinstance(self.mode, Update) else "Add New Task"

    def command(self, fields: TaskFields | None = None) -> SaveTask:
        """Build the save command for the submitted (or prefilled) fields."""
        return SaveTask(mode=self.mode, fields=fields if fields is not None else self.fields)


@dataclass
class AppState:
    """
    Everything the controller mutates.

    ``tasks`` is the task cache: the full list from the last successful fetch.
    ``load_seq`` numbers list fetches so that a response older than the newest
    request can be discarded.
    """

    view: View = View.AUTH
    auth_tab: AuthTab = AuthTab.SIGN_IN
    session: Session | None = None
    tasks: list[Task] = field(default_factory=list)
    editor: TaskEditor | None = None
    status_filter: TaskStatus | None = None
    priority_filter: TaskPriority | None = None
    pending_requests: int = 0
    load_seq: int = 0

    @property
    def loading(self) -> bool:
        """True while any request is in flight."""
        return self.pending_requests > 0

    def find_task(self, task_id: int) -> Task | None:
        """Look a task up in the cache."""
        return next((task for task in self.tasks if task.id == task_id), None)
