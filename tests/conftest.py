"""
Shared fixtures: a scripted fake upstream and clean cache state per test.
"""
import json
import threading
import time
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

import pytest

from app import api_client
from app.cache import reset_cache_managers
from app.workflows import provider as provider_module
from config.settings import settings


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self) -> Any:
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeUpstream:
    """
    Scripted replacement for requests.get.

    - list_response: returned for GET /workflows
    - details[id]: returned for GET /workflows/{id} (404 when missing)
    - gates[key]: Event the call blocks on; key is "list" or a workflow id
    - entered[key]: Event set as soon as a call for key arrives
    """

    def __init__(self):
        self.list_response = FakeResponse(200, [])
        self.details: Dict[str, FakeResponse] = {}
        self.gates: Dict[str, threading.Event] = {}
        self.entered: Dict[str, threading.Event] = {}
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def set_list(self, body: Any = None, status_code: int = 200, text: Optional[str] = None) -> None:
        self.list_response = FakeResponse(status_code, body, text)

    def set_detail(self, workflow_id: str, body: Any, status_code: int = 200) -> None:
        self.details[workflow_id] = FakeResponse(status_code, body)

    def fail_detail(self, workflow_id: str, status_code: int = 500, text: str = "boom") -> None:
        self.details[workflow_id] = FakeResponse(status_code, text=text)

    def hold(self, key: str) -> threading.Event:
        """Block calls for key until the returned Event is set."""
        gate = threading.Event()
        self.gates[key] = gate
        self.entered[key] = threading.Event()
        return gate

    def __call__(self, url, headers=None, params=None, timeout=None):
        tail = url.split("/workflows", 1)[1]
        key = unquote(tail.lstrip("/")) if tail else "list"

        with self._lock:
            self.calls.append({"key": key, "headers": headers, "params": params})
        if key in self.entered:
            self.entered[key].set()
        if key in self.gates:
            self.gates[key].wait(timeout=5)

        if key == "list":
            return self.list_response
        return self.details.get(key, FakeResponse(404, text="not found"))

    def count(self, key: str) -> int:
        with self._lock:
            return sum(1 for call in self.calls if call["key"] == key)


def wait_until(predicate, timeout: float = 5.0) -> bool:
    """Poll predicate until true or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Configured API key, empty caches and a new provider for every test."""
    monkeypatch.setattr(settings, "novu_secret_key", "test-secret")
    reset_cache_managers()
    monkeypatch.setattr(provider_module, "_provider", None)
    yield
    reset_cache_managers()


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()
    monkeypatch.setattr(api_client.requests, "get", fake)
    return fake


@pytest.fixture(name="wait_until")
def wait_until_fixture():
    return wait_until
