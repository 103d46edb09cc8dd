# services/challenge_api/state.py
"""
Process-wide runtime objects (RSVP counter, submission sink, caches) and
the FastAPI dependency getters the routers use to reach them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from cachetools import TTLCache

from challenge_api.adapters.base import CounterAdapter, SubmissionSink
from challenge_api.core.checkout import CheckoutTracker
from challenge_api.core.forwarding import build_sink
from challenge_api.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_counter(settings: Settings) -> CounterAdapter:
    backend = (settings.counter_backend or "memory").lower()

    if backend == "memory":
        from challenge_api.adapters.memory import MemoryCounter

        return MemoryCounter()

    if backend == "json":
        from challenge_api.adapters.json import JsonCounter

        return JsonCounter(settings.counter_file)

    if backend == "sqlite":
        from challenge_api.adapters.sqlite import SqliteCounter

        return SqliteCounter.from_url(settings.db_url)

    raise ValueError(f"Unknown COUNTER_BACKEND: {settings.counter_backend}")


@dataclass
class AppState:
    counter: CounterAdapter
    sink: SubmissionSink
    checkout_tracker: CheckoutTracker = field(default_factory=CheckoutTracker)
    # Short-lived cache for GET /api/rsvp (the landing page polls it every few seconds)
    rsvp_cache: Optional[TTLCache] = None

    def read_count(self) -> int:
        if self.rsvp_cache is None:
            return self.counter.get()
        try:
            return self.rsvp_cache["count"]
        except KeyError:
            count = self.counter.get()
            self.rsvp_cache["count"] = count
            return count

    def increment_count(self) -> int:
        count = self.counter.increment()
        if self.rsvp_cache is not None:
            self.rsvp_cache["count"] = count
        return count


def build_state(settings: Settings) -> AppState:
    ttl = settings.rsvp_cache_ttl_seconds
    state = AppState(
        counter=build_counter(settings),
        sink=build_sink(settings),
        rsvp_cache=TTLCache(maxsize=1, ttl=ttl) if ttl and ttl > 0 else None,
    )
    logger.info(
        f"🔧 Counter backend: {settings.counter_backend.upper()}, submission sink: {state.sink.name}"
    )
    return state


_state_instance: Optional[AppState] = None


def get_state() -> AppState:
    """Singleton pattern for runtime state."""
    global _state_instance
    if _state_instance is None:
        _state_instance = build_state(get_settings())
    return _state_instance


def set_state(state: Optional[AppState]) -> None:
    global _state_instance
    _state_instance = state


# ---- DI helpers (used by routers/*) ----

def get_counter() -> CounterAdapter:
    return get_state().counter


def get_sink() -> SubmissionSink:
    return get_state().sink
