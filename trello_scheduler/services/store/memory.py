"""In-process action store. Used by tests and for single-process development (STORE_BACKEND=memory)."""
import threading
import time
from typing import Callable


class InMemoryActionStore:
    """Dict-backed store; entries expire lazily when read or listed after their TTL."""

    backend_id = "memory"

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.time
        self._data: dict[str, tuple[str, float]] = {}  # key -> (value, expires_at epoch seconds)
        self._lock = threading.Lock()

    def _live(self, key: str, now: float) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= now:
            del self._data[key]
            return None
        return value

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._live(key, self._clock())

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        with self._lock:
            self._data[key] = (value, self._clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def list(self, prefix: str = "") -> list[str]:
        with self._lock:
            now = self._clock()
            return sorted(k for k in list(self._data) if k.startswith(prefix) and self._live(k, now) is not None)

    def ttl_remaining(self, key: str) -> float | None:
        """Seconds until key expires, or None if absent. Not part of the store contract; handy in tests."""
        with self._lock:
            now = self._clock()
            if self._live(key, now) is None:
                return None
            return self._data[key][1] - now
