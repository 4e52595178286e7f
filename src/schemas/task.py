"""Pydantic schemas for task payloads exchanged with the task API."""
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(StrEnum):
    """Workflow state of a task."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(StrEnum):
    """Priority of a task."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(BaseModel):
    """
    A task as returned by the API.

    The id is assigned by the server. Deadlines arrive either as naive local
    timestamps (e.g. '2025-01-31T13:45:00') or with an offset; naive values are
    kept naive and interpreted as local time wherever they are compared.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: int
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskFields(BaseModel):
    """Fields submitted when creating or updating a task."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: datetime | None = Field(
        default=None,
        description="Naive values are taken as local time and sent as UTC ISO-8601.",
    )

    @field_validator("title")
    @classmethod
    def check_title_not_empty(cls, v: str) -> str:
        """Validate title is not empty."""
        if not v or not v.strip():
            raise ValueError("Title cannot be empty")
        return v

    @field_serializer("deadline")
    def serialize_deadline(self, value: datetime | None) -> str | None:
        """Serialize the deadline as a UTC timestamp with millisecond precision."""
        if value is None:
            return None
        utc_value = value.astimezone(UTC)
        return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_payload(self) -> dict:
        """JSON body for POST /tasks and PUT /tasks/{id}."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_task(cls, task: Task) -> "TaskFields":
        """Prefill editor fields from a cached task."""
        return cls(
            title=task.title,
            description=task.description or "",
            status=task.status,
            priority=task.priority,
            deadline=task.deadline,
        )
