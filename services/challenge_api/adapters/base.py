"""
Adapter interfaces for the challenge API.
Defines the contracts the RSVP counter backends and the submission sinks
must implement.
"""

from typing import Any, Dict, Protocol


class CounterAdapter(Protocol):
    """
    Protocol defining the interface for all RSVP counter backends.

    This allows swapping between process memory, a JSON file and SQLite
    without changing the router code.

    NOTE:
    - There is no locking contract. Two simultaneous increments may race
      on backends that do a read-modify-write (memory, json).
    """

    def get(self) -> int:
        """Return the current count (0 when nothing was stored yet)."""
        ...

    def increment(self) -> int:
        """
        Add one to the count.

        Returns:
            The count after the increment.
        """
        ...

    def reset(self) -> None:
        """Set the count back to 0."""
        ...

    def ping(self) -> None:
        """
        Readiness check. Raise if the backend cannot serve requests.
        """
        ...


class SubmissionSink(Protocol):
    """
    Protocol for wherever homework rows are forwarded to
    (Apps Script webhook, Google Sheets, or just the log).
    """

    name: str

    async def append(self, tab: str, row: Dict[str, Any]) -> None:
        """
        Append one flat row to the given tab.

        Args:
            tab: Worksheet/tab name for the challenge day
            row: Column name -> value

        Raises:
            Any exception on failure. Callers decide whether to swallow it.
        """
        ...
