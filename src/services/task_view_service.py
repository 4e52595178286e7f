"""
Filtering, statistics and display cards for the task cache.

Everything here is a pure function of the tasks passed in and the current time;
nothing touches the API.
"""
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from schemas.task import Task, TaskPriority, TaskStatus
from services.formatting import format_datetime, format_status

EMPTY_LIST_MESSAGE = "No tasks found. Create your first task!"


@dataclass(frozen=True)
class TaskStats:
    """Aggregate counts over the whole cache."""

    todo: int
    in_progress: int
    done: int
    overdue: int

    @property
    def total(self) -> int:
        """Every task falls in exactly one status bucket."""
        return self.todo + self.in_progress + self.done


@dataclass(frozen=True)
class TaskCard:
    """
    Display model of one task.

    Text fields hold the raw task text; renderers escape them for their output
    medium.
    """

    task_id: int
    title: str
    status: TaskStatus
    status_label: str
    priority: TaskPriority
    priority_label: str
    description: str | None
    deadline_label: str | None
    is_overdue: bool
    toggle_label: str


@dataclass(frozen=True)
class TaskListView:
    """Cards for the filtered tasks plus stats for the whole cache."""

    cards: list[TaskCard]
    stats: TaskStats
    empty_message: str | None = None


def is_overdue(task: Task, now: datetime) -> bool:
    """
    A task is overdue when its deadline has passed and it is not DONE.

    Args:
        task: The task to check.
        now: Current time, timezone-aware.
    """
    if task.deadline is None or task.status == TaskStatus.DONE:
        return False
    # Naive deadlines are local times; astimezone() attaches the local offset.
    deadline = task.deadline if task.deadline.tzinfo else task.deadline.astimezone()
    return deadline < now


def filter_tasks(
    tasks: Iterable[Task],
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
) -> list[Task]:
    """
    Return tasks matching every provided filter, in their original order.

    An absent filter places no constraint on that dimension.
    """
    filtered = list(tasks)
    if status:
        filtered = [task for task in filtered if task.status == status]
    if priority:
        filtered = [task for task in filtered if task.priority == priority]
    return filtered


def compute_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    """Count tasks per status plus overdue tasks in one scan."""
    todo = in_progress = done = overdue = 0
    for task in tasks:
        if task.status == TaskStatus.TODO:
            todo += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            in_progress += 1
        elif task.status == TaskStatus.DONE:
            done += 1
        if is_overdue(task, now):
            overdue += 1
    return TaskStats(todo=todo, in_progress=in_progress, done=done, overdue=overdue)


def build_task_card(task: Task, now: datetime) -> TaskCard:
    """Convert a task to its display card."""
    return TaskCard(
        task_id=task.id,
        title=task.title,
        status=task.status,
        status_label=format_status(task.status),
        priority=task.priority,
        priority_label=task.priority.value,
        description=task.description or None,
        deadline_label=format_datetime(task.deadline) if task.deadline else None,
        is_overdue=is_overdue(task, now),
        toggle_label="Reopen" if task.status == TaskStatus.DONE else "Complete",
    )


def build_task_list_view(
    tasks: list[Task],
    now: datetime,
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
) -> TaskListView:
    """Filter the cache and build cards; stats always cover the full cache."""
    visible = filter_tasks(tasks, status=status, priority=priority)
    stats = compute_stats(tasks, now)
    if not visible:
        return TaskListView(cards=[], stats=stats, empty_message=EMPTY_LIST_MESSAGE)
    return TaskListView(cards=[build_task_card(task, now) for task in visible], stats=stats)
