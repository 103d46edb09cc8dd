# services/challenge_api/core/rate_limit.py
from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

# Never rate limited
EXEMPT_PATHS = {"/healthz", "/readyz", "/metrics", "/docs", "/redoc", "/openapi.json"}

WINDOW = timedelta(minutes=1)


class RateLimiter:
    """
    Sliding one-minute window per (client ip, method, path).
    In-process only; each worker keeps its own windows.
    Expired windows are swept at most once per window length, so paths a
    client hit once (including 404s) do not pile up.
    """

    def __init__(self, read_per_minute: int = 100, write_per_minute: int = 20):
        self.limits = {
            "read": read_per_minute,    # GET requests
            "write": write_per_minute,  # POST/PUT/DELETE requests
        }
        # {ip: {"METHOD:path": [timestamps]}}
        self._storage: Dict[str, Dict[str, List[datetime]]] = defaultdict(lambda: defaultdict(list))
        self._last_sweep: Optional[datetime] = None

    def limit_for(self, method: str) -> int:
        if method in ("GET", "HEAD", "OPTIONS"):
            return self.limits["read"]
        return self.limits["write"]

    def check(self, ip: str, method: str, path: str, now: Optional[datetime] = None) -> Tuple[bool, int]:
        """
        Check if request exceeds rate limit.
        Returns: (is_allowed, retry_after_seconds)
        """
        limit = self.limit_for(method)
        now = now or datetime.now()
        one_minute_ago = now - WINDOW

        if self._last_sweep is None or now - self._last_sweep >= WINDOW:
            self.sweep(now)

        # Clean old entries
        key = f"{method}:{path}"
        window = [ts for ts in self._storage[ip][key] if ts > one_minute_ago]
        self._storage[ip][key] = window

        if len(window) >= limit:
            # Seconds until the oldest request leaves the window
            oldest = min(window)
            retry_after = int((oldest - one_minute_ago).total_seconds()) + 1
            return False, retry_after

        window.append(now)
        return True, 0

    def sweep(self, now: Optional[datetime] = None) -> None:
        """Drop windows with no request in the last minute, and clients left with none."""
        now = now or datetime.now()
        one_minute_ago = now - WINDOW

        for ip in list(self._storage):
            windows = self._storage[ip]
            for key in list(windows):
                live = [ts for ts in windows[key] if ts > one_minute_ago]
                if live:
                    windows[key] = live
                else:
                    del windows[key]
            if not windows:
                del self._storage[ip]
        self._last_sweep = now

    def tracked(self) -> Dict[str, List[str]]:
        """{ip: [METHOD:path, ...]} currently held in memory."""
        return {ip: sorted(windows) for ip, windows in self._storage.items()}

    def reset(self) -> None:
        self._storage.clear()
        self._last_sweep = None
