"""
Scheduling core: minute-bucket index, schedule/cancel, and the dispatcher sweep.
Everything here talks to the store only through the ActionStore contract.
"""
from trello_scheduler.services.scheduling.buckets import bucket_key, minute_index
from trello_scheduler.services.scheduling.dispatcher import sweep
from trello_scheduler.services.scheduling.scheduler_service import cancel, list_pending, schedule
from trello_scheduler.services.scheduling.types import ActionKind, ScheduledAction, SweepResult

__all__ = [
    "ActionKind",
    "ScheduledAction",
    "SweepResult",
    "bucket_key",
    "cancel",
    "list_pending",
    "minute_index",
    "schedule",
    "sweep",
]
