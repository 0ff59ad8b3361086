"""Protocol for action stores. The scheduler and dispatcher only talk to this contract."""
from typing import Protocol


class ActionStore(Protocol):
    """
    Key-value store with per-key expiry (in-memory, SQL, ...). Same contract; only persistence differs.

    An absent (or expired) key is not an error: get returns None and delete is a no-op.
    No operation is transactional with any other; callers doing read-modify-write own that race.
    """

    @property
    def backend_id(self) -> str:
        """Short name (e.g. 'memory', 'sql') for logs and /health."""
        ...

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent or expired."""
        ...

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Write value under key; replaces any prior value and any prior TTL."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...

    def list(self, prefix: str = "") -> list[str]:
        """Live keys starting with prefix, sorted. Diagnostics only; never on the sweep path."""
        ...
