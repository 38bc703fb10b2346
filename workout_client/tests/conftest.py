"""Общие фикстуры: фейковый HTTP, хранилище, часы, клиент."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

import pytest
import requests

from workout_client.api_client import APIClient
from workout_client.core.credentials import SharedSecretStrategy, TokenWithExpiryStrategy
from workout_client.core.events import LogoutNotifier
from workout_client.core.session import SessionStore
from workout_client.core.storage import MemoryStorage

API_URL = "https://backend.test/exec"
NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def make_response(body: Union[Dict[str, Any], List[Any], str, bytes], status: int = 200) -> requests.Response:
    """Собирает requests.Response с заданным телом"""
    response = requests.Response()
    response.status_code = status
    response.url = API_URL
    if isinstance(body, bytes):
        response._content = body
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.encoding = "utf-8"
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    params: Optional[Dict[str, str]]
    data: Optional[bytes]
    headers: Optional[Dict[str, str]]
    timeout: Any

    @property
    def body(self) -> Dict[str, Any]:
        return json.loads(self.data.decode("utf-8"))


@dataclass
class FakeHTTP:
    """Подменяет requests.Session: записывает запросы, отдаёт заготовленные ответы"""

    calls: List[RecordedCall] = field(default_factory=list)
    responses: List[Any] = field(default_factory=list)
    closed: bool = False

    def reply(self, body: Any, status: int = 200) -> "FakeHTTP":
        self.responses.append(make_response(body, status))
        return self

    def fail(self, exc: Exception) -> "FakeHTTP":
        self.responses.append(exc)
        return self

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        self.calls.append(RecordedCall(method, url, params, data, headers, timeout))
        if not self.responses:
            raise AssertionError(f"Unexpected {method} request")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class FrozenClock:
    """Часы, которые двигаются только вручную"""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session(storage, clock) -> SessionStore:
    store = SessionStore(storage, clock=clock)
    store.init()
    return store


@pytest.fixture
def notifier() -> LogoutNotifier:
    return LogoutNotifier()


@pytest.fixture
def http() -> FakeHTTP:
    return FakeHTTP()


@pytest.fixture
def client(session, notifier, http) -> APIClient:
    return APIClient(
        strategy=TokenWithExpiryStrategy(session),
        session=session,
        notifier=notifier,
        base_url=API_URL,
        http=http,
    )


@pytest.fixture
def logged_in(session, clock) -> SessionStore:
    """Сессия с живым токеном на час вперёд"""
    session.set_session("tok-123", {"username": "ivan"}, clock() + timedelta(hours=1))
    return session


@pytest.fixture
def secret_client(notifier, http) -> APIClient:
    return APIClient(
        strategy=SharedSecretStrategy("s3cret"),
        notifier=notifier,
        base_url=API_URL,
        http=http,
    )
