"""Scheduled action record and sweep summary types."""
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ActionKind(str, Enum):
    COMMENT = "comment"
    STATUS = "status"
    BOTH = "both"

    @classmethod
    def from_payload(cls, comment: str | None, mark_complete: bool | None) -> "ActionKind | None":
        has_comment = bool(comment)
        has_status = mark_complete is not None
        if has_comment and has_status:
            return cls.BOTH
        if has_comment:
            return cls.COMMENT
        if has_status:
            return cls.STATUS
        return None


def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant (browser toISOString() output included). Raises ValueError."""
    raw = value.strip()
    if raw.endswith("Z") or raw.endswith("z"):
        raw = raw[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(raw))


@dataclass(frozen=True)
class ScheduledAction:
    """One deferred card action. Never updated in place: created by schedule, deleted on success or cancel."""

    key: str
    target_id: str
    kind: ActionKind
    scheduled_at: datetime
    created_at: datetime
    credential: str
    ttl_seconds: int
    comment: str | None = None
    mark_complete: bool | None = None

    @property
    def scheduled_ms(self) -> int:
        return int(self.scheduled_at.timestamp() * 1000)

    def to_json(self) -> str:
        return json.dumps(
            {
                "key": self.key,
                "target_id": self.target_id,
                "kind": self.kind.value,
                "comment": self.comment,
                "mark_complete": self.mark_complete,
                "scheduled_at": self.scheduled_at.isoformat(),
                "created_at": self.created_at.isoformat(),
                "credential": self.credential,
                "ttl_seconds": self.ttl_seconds,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "ScheduledAction":
        """Raises ValueError (or KeyError) on a malformed record."""
        data = json.loads(raw)
        return cls(
            key=data["key"],
            target_id=data["target_id"],
            kind=ActionKind(data["kind"]),
            comment=data.get("comment"),
            mark_complete=data.get("mark_complete"),
            scheduled_at=parse_instant(data["scheduled_at"]),
            created_at=parse_instant(data["created_at"]),
            credential=data["credential"],
            ttl_seconds=int(data["ttl_seconds"]),
        )


@dataclass
class SweepResult:
    """Summary of one dispatcher sweep (what GET /process returns)."""

    timestamp: datetime
    minute: int
    processed: list[str] = field(default_factory=list)
    pending: list[dict[str, Any]] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": len(self.processed),
            "pending": len(self.pending),
            "errors": len(self.errors),
            "details": {
                "processed": list(self.processed),
                "pending": list(self.pending),
                "errors": list(self.errors),
                "dropped": list(self.dropped),
            },
            "timestamp": self.timestamp.isoformat(),
            "minute": self.minute,
        }
