"""
In-memory RSVP counter.
Resets whenever the process restarts; each worker process has its own count.
"""


class MemoryCounter:
    """Plain integer held in process memory."""

    def __init__(self, start: int = 0):
        self._count = start

    def get(self) -> int:
        return self._count

    def increment(self) -> int:
        self._count += 1
        return self._count

    def reset(self) -> None:
        self._count = 0

    def ping(self) -> None:
        return None
