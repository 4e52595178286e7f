"""
Jinja2 rendering of the task list view to an HTML fragment.

Autoescaping is always on: task text is untrusted and must never become markup.
"""

from jinja2 import Environment, StrictUndefined

from services.task_view_service import TaskListView

_TASK_LIST_TEMPLATE = """\
<div class="task-stats">
  <span id="todo-count">{{ view.stats.todo }}</span>
  <span id="in-progress-count">{{ view.stats.in_progress }}</span>
  <span id="done-count">{{ view.stats.done }}</span>
  <span id="overdue-count">{{ view.stats.overdue }}</span>
</div>
<div id="task-list">
{%- if view.empty_message %}
  <div class="task-empty"><p>{{ view.empty_message }}</p></div>
{%- else %}
{%- for card in view.cards %}
  <div class="task-card priority-{{ card.priority.value | lower }}" data-task-id="{{ card.task_id }}">
    <div class="task-header">
      <div class="task-title">{{ card.title }}</div>
      <div class="task-meta">
        <span class="task-status {{ card.status.value | lower | replace('_', '-') }}">{{ card.status_label }}</span>
        <span class="task-priority {{ card.priority.value | lower }}">{{ card.priority_label }}</span>
      </div>
    </div>
    {%- if card.description %}
    <div class="task-description">{{ card.description }}</div>
    {%- endif %}
    {%- if card.deadline_label %}
    <div class="task-deadline{% if card.is_overdue %} overdue{% endif %}">Due: {{ card.deadline_label }}</div>
    {%- endif %}
    <div class="task-actions">
      <button data-action="edit">Edit</button>
      <button data-action="toggle">{{ card.toggle_label }}</button>
      <button data-action="delete">Delete</button>
    </div>
  </div>
{%- endfor %}
{%- endif %}
</div>
"""

# Autoescaping on for every template, StrictUndefined to catch view-model typos
_jinja_env = Environment(autoescape=True, undefined=StrictUndefined)
_task_list_template = _jinja_env.from_string(_TASK_LIST_TEMPLATE)


def render_task_list_html(view: TaskListView) -> str:
    """Render cards and stats as an HTML fragment with all task text escaped."""
    return _task_list_template.render(view=view)
