"""View-model of the whole client, independent of any UI toolkit."""
from dataclasses import dataclass
from datetime import UTC, datetime

from services.task_view_service import TaskListView, build_task_list_view

from .state import AppState, AuthTab, TaskEditor, View


@dataclass(frozen=True)
class ScreenView:
    """What a front end should show."""

    view: View
    auth_tab: AuthTab
    loading: bool
    welcome: str | None = None
    task_list: TaskListView | None = None
    editor: TaskEditor | None = None


def render(state: AppState, now: datetime | None = None) -> ScreenView:
    """
    Build the view-model for the current state.

    The task list is only built in the app view; it reflects the active filters
    while stats cover the whole cache.
    """
    if state.view == View.AUTH or state.session is None:
        return ScreenView(view=View.AUTH, auth_tab=state.auth_tab, loading=state.loading)

    now = now or datetime.now(UTC)
    return ScreenView(
        view=View.APP,
        auth_tab=state.auth_tab,
        loading=state.loading,
        welcome=f"Welcome, {state.session.username}!",
        task_list=build_task_list_view(
            state.tasks,
            now,
            status=state.status_filter,
            priority=state.priority_filter,
        ),
        editor=state.editor,
    )
