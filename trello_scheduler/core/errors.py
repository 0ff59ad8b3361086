"""
Centralized error handling for scheduler/API failures.
Exception types plus a reusable helper so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

MSG_MISSING_FIELDS = "Missing required fields"
MSG_SWEEP_RUNNING = "Sweep already running"

STATUS_BAD_REQUEST = 400
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


class SchedulerError(Exception):
    """Base class for errors raised by the scheduling core."""

    status_code = STATUS_INTERNAL_ERROR


class ScheduleRequestError(SchedulerError):
    """Caller input rejected before anything was written to the store."""

    status_code = STATUS_BAD_REQUEST


class SweepInProgressError(SchedulerError):
    """A sweep is already running in this process; the trigger was skipped."""

    status_code = STATUS_CONFLICT

    def __init__(self, message: str = MSG_SWEEP_RUNNING) -> None:
        super().__init__(message)


class ActionExecutionError(SchedulerError):
    """The external call for a due action failed; the action stays queued for the next sweep."""

    def __init__(self, message: str, *, sub_action: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.sub_action = sub_action
        self.http_status = status_code


class StoreError(SchedulerError):
    """The action store could not complete an operation."""


def error_to_response(exc: Exception) -> JSONResponse:
    """
    Map an exception raised while serving a request into a JSON error body.
    SchedulerError subclasses carry their own status code; anything else becomes 500 with the message.
    """
    status_code = exc.status_code if isinstance(exc, SchedulerError) else STATUS_INTERNAL_ERROR
    return JSONResponse(status_code=status_code, content={"error": str(exc)})
