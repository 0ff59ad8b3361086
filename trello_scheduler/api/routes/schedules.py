"""
Scheduling API: schedule and cancel card actions, trigger a sweep by hand.

Field names follow the browser extension (cardId, trelloToken); targetId and credential are
accepted as aliases. Errors come back as {"error": message} with 400/409/500.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field

from trello_scheduler.core.errors import ScheduleRequestError, error_to_response
from trello_scheduler.scheduler.dispatch_job import run_sweep
from trello_scheduler.services.scheduling import cancel, list_pending, schedule
from trello_scheduler.services.scheduling.types import parse_instant
from trello_scheduler.services.store import ActionStore, get_store

router = APIRouter()
logger = logging.getLogger(__name__)


class ScheduleBody(BaseModel):
    target_id: str | None = Field(None, validation_alias=AliasChoices("cardId", "targetId"))
    comment: str | None = None
    mark_complete: bool | None = Field(None, validation_alias=AliasChoices("markComplete", "mark_complete"))
    scheduled_time: str | None = Field(
        None,
        validation_alias=AliasChoices("scheduledTime", "scheduled_time"),
        description="ISO-8601 instant, e.g. 2026-10-20T09:00:00.000Z",
    )
    credential: str | None = Field(None, validation_alias=AliasChoices("trelloToken", "credential"))


class CancelBody(BaseModel):
    key: str | None = None
    credential: str | None = Field(None, validation_alias=AliasChoices("trelloToken", "credential"))


@router.post("/schedule")
def schedule_action(body: ScheduleBody, store: ActionStore = Depends(get_store)) -> Any:
    """
    Schedule a comment and/or due-complete change on a card.
    Returns the key; keep it, it is the only way to cancel.
    """
    try:
        scheduled_at = None
        if body.scheduled_time:
            try:
                scheduled_at = parse_instant(body.scheduled_time)
            except ValueError:
                raise ScheduleRequestError(f"Invalid scheduledTime: {body.scheduled_time!r}") from None
        key = schedule(
            store,
            body.target_id,
            scheduled_at,
            body.credential,
            comment=body.comment,
            mark_complete=body.mark_complete,
        )
    except Exception as e:
        if not isinstance(e, ScheduleRequestError):
            logger.exception("Schedule failed: %s", e)
        return error_to_response(e)
    return {"success": True, "key": key}


@router.post("/cancel")
def cancel_action(body: CancelBody, store: ActionStore = Depends(get_store)) -> Any:
    """Cancel a scheduled action. Succeeds for keys that already ran or expired."""
    try:
        cancel(store, body.key, body.credential)
    except Exception as e:
        if not isinstance(e, ScheduleRequestError):
            logger.exception("Cancel failed: %s", e)
        return error_to_response(e)
    return {"success": True}


@router.get("/process")
def process_now(store: ActionStore = Depends(get_store)) -> Any:
    """Run one sweep now, same as the periodic trigger. 409 if a sweep is already running."""
    try:
        result = run_sweep(store=store)
    except Exception as e:
        return error_to_response(e)
    return result.to_dict()


@router.get("/pending")
def pending_actions(store: ActionStore = Depends(get_store)) -> Any:
    """Diagnostic: every live action in the store (full key scan; not used by the sweep)."""
    try:
        items = list_pending(store)
    except Exception as e:
        logger.exception("Listing pending actions failed: %s", e)
        return error_to_response(e)
    return {"pending": items, "count": len(items)}
