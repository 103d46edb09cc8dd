"""
JSON file RSVP counter.
Simple file-based storage so the count survives a restart on a single box.
Not production-ready (no proper locking, not suitable for concurrent access).
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


class JsonCounter:
    """
    JSON file-based counter.
    Stores {"count": int, "updated_at": iso} in a single file.
    Uses atomic file replacement for basic consistency.
    """

    def __init__(self, path: str = "data/rsvp_count.json"):
        """
        Initialize the JSON counter.

        Args:
            path: File holding the count; parent directories are created
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if not self.path.exists():
            self._write_file({"count": 0, "updated_at": None})

    def _read_file(self) -> Dict[str, Any]:
        """Read and parse the counter file. A missing or corrupt file reads as 0."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            return {"count": 0}
        if not isinstance(data, dict):
            return {"count": 0}
        return data

    def _write_file(self, data: Dict[str, Any]) -> None:
        """Write data to the counter file atomically."""
        # Write to temporary file first
        tmp_file = self.path.with_suffix(".tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

        # Atomic rename
        tmp_file.replace(self.path)

    def get(self) -> int:
        try:
            return max(int(self._read_file().get("count") or 0), 0)
        except (TypeError, ValueError):
            return 0

    def increment(self) -> int:
        count = self.get() + 1
        self._write_file({"count": count, "updated_at": datetime.now(timezone.utc).isoformat()})
        return count

    def reset(self) -> None:
        self._write_file({"count": 0, "updated_at": datetime.now(timezone.utc).isoformat()})

    def ping(self) -> None:
        if not self.path.parent.is_dir():
            raise RuntimeError(f"Counter directory missing: {self.path.parent}")
