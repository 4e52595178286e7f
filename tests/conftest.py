"""Pytest fixtures for testing the task client against an in-memory task API."""
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path

import httpx
import pytest
import respx

from fakes import API_BASE_URL, FakeClock, FakeTaskApi
from services.notification_service import NoticeKind, Notifier
from task_client.controller import TaskController
from task_client.session_store import KeyValueStore, SessionStore


@pytest.fixture
def mock_router() -> Generator[respx.MockRouter]:
    """Respx router; unmatched requests raise."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def fake_api(mock_router: respx.MockRouter) -> FakeTaskApi:
    """In-memory task API."""
    return FakeTaskApi(mock_router)


@pytest.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient]:
    """HTTP client pointed at the fake API."""
    async with httpx.AsyncClient(base_url=API_BASE_URL) as client:
        yield client


@pytest.fixture
def session_file(tmp_path: Path) -> Path:
    return tmp_path / "session.json"


@pytest.fixture
def session_store(session_file: Path) -> SessionStore:
    return SessionStore(KeyValueStore(session_file))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier(clock: FakeClock) -> Notifier:
    return Notifier(ttl_seconds=5.0, clock=clock)


@pytest.fixture
def controller(
    http_client: httpx.AsyncClient,
    session_store: SessionStore,
    notifier: Notifier,
) -> TaskController:
    """Controller with deletes always confirmed."""
    return TaskController(http_client, session_store, notifier, confirm=lambda _: True)


@pytest.fixture
async def signed_in_controller(
    fake_api: FakeTaskApi,
    controller: TaskController,
) -> TaskController:
    """Controller signed in as alice with notices cleared."""
    assert await controller.sign_in("alice", "secret")
    controller.notifier.drain()
    return controller


@pytest.fixture
def error_messages(notifier: Notifier) -> Callable[[], list[str]]:
    """Messages of the currently active error notices."""
    def _messages() -> list[str]:
        return [n.message for n in notifier.active() if n.kind == NoticeKind.ERROR]
    return _messages
