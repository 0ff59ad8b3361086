"""Shared fixtures: in-memory store with a controllable clock, a scripted executor, an API client."""
import os
from datetime import datetime, timezone

# Settings are read at import; keep tests off any real database or .env values.
os.environ["STORE_BACKEND"] = "memory"
os.environ["TRELLO_API_KEY"] = ""

import pytest

from trello_scheduler.core.errors import ActionExecutionError
from trello_scheduler.services.executor import set_executor
from trello_scheduler.services.store import InMemoryActionStore, set_store

NOW = datetime(2026, 10, 19, 12, 0, 10, tzinfo=timezone.utc)


class FakeClock:
    """Epoch-seconds clock the tests move by hand."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start.timestamp()

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedExecutor:
    """Records every attempt; fails the first `failures[key]` attempts for a key (or all keys via fail_all)."""

    def __init__(self) -> None:
        self.attempts: list[str] = []
        self.executed: list[str] = []
        self.failures: dict[str, int] = {}
        self.fail_all = False

    def execute(self, action) -> None:
        self.attempts.append(action.key)
        remaining = self.failures.get(action.key, 0)
        if self.fail_all or remaining > 0:
            self.failures[action.key] = max(remaining - 1, 0)
            raise ActionExecutionError(f"simulated failure for {action.key}")
        self.executed.append(action.key)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryActionStore(clock=clock)


@pytest.fixture
def executor():
    return ScriptedExecutor()


@pytest.fixture
def client(store, executor):
    from fastapi.testclient import TestClient

    from trello_scheduler.main import app

    set_store(store)
    set_executor(executor)
    try:
        yield TestClient(app)
    finally:
        set_store(None)
        set_executor(None)
