"""HTTP client helpers for the task API."""

from typing import Any

import httpx

from core.config import Settings
from schemas.auth import SignInRequest, SignInResponse, SignUpRequest
from schemas.task import Task, TaskFields, TaskPriority, TaskStatus

REQUEST_SOURCE = "taskboard-cli"


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the HTTP client used for every API request."""
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout,
        headers={"X-Request-Source": REQUEST_SOURCE},
    )


def _get_headers(token: str) -> dict[str, str]:
    """Get common headers for authenticated API requests."""
    return {"Authorization": f"Bearer {token}"}


async def api_get(
    client: httpx.AsyncClient,
    path: str,
    token: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """Make an authenticated GET request to the API."""
    response = await client.get(path, params=params, headers=_get_headers(token))
    response.raise_for_status()
    return response.json()


async def api_post(
    client: httpx.AsyncClient,
    path: str,
    token: str | None,
    json: dict[str, Any] | None = None,
) -> Any:
    """Make a POST request to the API; sign-in and sign-up go without a token."""
    headers = _get_headers(token) if token else None
    response = await client.post(path, json=json, headers=headers)
    response.raise_for_status()
    return _json_or_none(response)


async def api_put(
    client: httpx.AsyncClient,
    path: str,
    token: str,
    json: dict[str, Any],
) -> Any:
    """Make an authenticated PUT request to the API."""
    response = await client.put(path, json=json, headers=_get_headers(token))
    response.raise_for_status()
    return _json_or_none(response)


async def api_patch(
    client: httpx.AsyncClient,
    path: str,
    token: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """Make an authenticated PATCH request to the API."""
    response = await client.patch(path, params=params, headers=_get_headers(token))
    response.raise_for_status()
    return _json_or_none(response)


async def api_delete(client: httpx.AsyncClient, path: str, token: str) -> Any:
    """Make an authenticated DELETE request to the API."""
    response = await client.delete(path, headers=_get_headers(token))
    response.raise_for_status()
    return _json_or_none(response)


def _json_or_none(response: httpx.Response) -> Any:
    """Decode the body when there is one; some endpoints answer with nothing."""
    if not response.content:
        return None
    return response.json()


async def sign_in(
    client: httpx.AsyncClient,
    username: str,
    password: str,
) -> SignInResponse:
    """Exchange credentials for a bearer token."""
    body = SignInRequest(username=username, password=password).model_dump()
    data = await api_post(client, "/auth/signin", None, body)
    return SignInResponse.model_validate(data)


async def sign_up(client: httpx.AsyncClient, request: SignUpRequest) -> None:
    """Register a new account. The response body is not used."""
    await api_post(client, "/auth/signup", None, request.model_dump(by_alias=True))


async def list_tasks(client: httpx.AsyncClient, token: str) -> list[Task]:
    """Fetch every task of the current user."""
    data = await api_get(client, "/tasks", token)
    return [Task.model_validate(item) for item in data]


async def get_task(client: httpx.AsyncClient, token: str, task_id: int) -> Task:
    """Fetch a single task by id."""
    data = await api_get(client, f"/tasks/{task_id}", token)
    return Task.model_validate(data)


async def create_task(client: httpx.AsyncClient, token: str, fields: TaskFields) -> Task:
    """Create a task; the server assigns its id."""
    data = await api_post(client, "/tasks", token, fields.to_payload())
    return Task.model_validate(data)


async def update_task(
    client: httpx.AsyncClient,
    token: str,
    task_id: int,
    fields: TaskFields,
) -> Task:
    """Replace the editable fields of a task."""
    data = await api_put(client, f"/tasks/{task_id}", token, fields.to_payload())
    return Task.model_validate(data)


async def update_task_status(
    client: httpx.AsyncClient,
    token: str,
    task_id: int,
    status: TaskStatus,
) -> Task:
    """Change only the status of a task."""
    data = await api_patch(
        client, f"/tasks/{task_id}/status", token, params={"status": status.value},
    )
    return Task.model_validate(data)


async def delete_task(client: httpx.AsyncClient, token: str, task_id: int) -> None:
    """Delete a task."""
    await api_delete(client, f"/tasks/{task_id}", token)


async def list_overdue_tasks(client: httpx.AsyncClient, token: str) -> list[Task]:
    """Fetch tasks the server considers overdue."""
    data = await api_get(client, "/tasks/overdue", token)
    return [Task.model_validate(item) for item in data]


async def list_tasks_by_status(
    client: httpx.AsyncClient,
    token: str,
    status: TaskStatus,
) -> list[Task]:
    """Fetch tasks with the given status, filtered server-side."""
    data = await api_get(client, f"/tasks/status/{status.value}", token)
    return [Task.model_validate(item) for item in data]


async def list_tasks_by_priority(
    client: httpx.AsyncClient,
    token: str,
    priority: TaskPriority,
) -> list[Task]:
    """Fetch tasks with the given priority, filtered server-side."""
    data = await api_get(client, f"/tasks/priority/{priority.value}", token)
    return [Task.model_validate(item) for item in data]
