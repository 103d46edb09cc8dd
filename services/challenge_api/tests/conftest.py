"""
Shared pytest fixtures.

Every test gets a fresh in-memory counter and a recording sink, so nothing
touches the network or the real spreadsheet.
"""
from typing import Any, Dict, List, Tuple

import pytest
from fastapi.testclient import TestClient

from challenge_api import main
from challenge_api.adapters.memory import MemoryCounter
from challenge_api.core.checkout import CheckoutTracker
from challenge_api.state import AppState, set_state


class RecordingSink:
    """Keeps every appended row in memory."""

    name = "recording"

    def __init__(self):
        self.rows: List[Tuple[str, Dict[str, Any]]] = []

    async def append(self, tab: str, row: Dict[str, Any]) -> None:
        self.rows.append((tab, row))


class FailingSink:
    """Raises on every append, like an unreachable spreadsheet."""

    name = "failing"

    def __init__(self, error: Exception = None):
        self.error = error or RuntimeError("HTTP error: 502")
        self.calls = 0

    async def append(self, tab: str, row: Dict[str, Any]) -> None:
        self.calls += 1
        raise self.error


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def app_state(sink):
    state = AppState(counter=MemoryCounter(), sink=sink, checkout_tracker=CheckoutTracker())
    set_state(state)
    main.rate_limiter.reset()
    yield state
    set_state(None)


@pytest.fixture
def client(app_state):
    return TestClient(main.app)


@pytest.fixture
def valid_identity():
    return {"username": "jane_doe", "email": "jane@example.com"}
