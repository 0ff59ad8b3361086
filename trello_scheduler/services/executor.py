"""
Run a due action against Trello.

A "both" action posts the comment first, then sets the status. If the comment succeeds and
the status call fails, the whole action fails and is retried on the next sweep, which
posts the comment again. Callers must treat execution as at-least-once.
"""
import logging
from typing import Protocol

from trello_scheduler.core.errors import ActionExecutionError
from trello_scheduler.services.scheduling.types import ScheduledAction
from trello_scheduler.services.trello.client import TrelloClient

logger = logging.getLogger(__name__)


class ActionExecutor(Protocol):
    """Performs the side effect of one action. Returns on full success, raises ActionExecutionError otherwise."""

    def execute(self, action: ScheduledAction) -> None:
        ...


class TrelloExecutor:
    def __init__(self, client: TrelloClient | None = None) -> None:
        self._client = client or TrelloClient()

    def execute(self, action: ScheduledAction) -> None:
        if action.comment:
            result = self._client.add_comment(action.target_id, action.comment, action.credential)
            if result.get("error"):
                raise ActionExecutionError(
                    _describe(result), sub_action="comment", status_code=result.get("status_code")
                )
            logger.debug("Posted comment for %s on card %s", action.key, action.target_id)
        if action.mark_complete is not None:
            result = self._client.set_due_complete(action.target_id, bool(action.mark_complete), action.credential)
            if result.get("error"):
                raise ActionExecutionError(
                    _describe(result), sub_action="status", status_code=result.get("status_code")
                )
            logger.debug("Set dueComplete=%s for %s on card %s", action.mark_complete, action.key, action.target_id)


def _describe(result: dict) -> str:
    detail = result.get("detail")
    return f"{result['error']}: {detail}" if detail else str(result["error"])


_executor: ActionExecutor | None = None


def get_executor() -> ActionExecutor:
    global _executor
    if _executor is None:
        _executor = TrelloExecutor()
    return _executor


def set_executor(executor: ActionExecutor | None) -> None:
    """Replace the shared executor (None resets to Trello on next get_executor)."""
    global _executor
    _executor = executor
