"""
Hourly: delete expired rows from the SQL store. The SQL table has no native TTL, so without
this job expired actions and buckets would only be hidden by reads, never removed.
"""
import logging

from trello_scheduler.services.store import get_store

logger = logging.getLogger(__name__)


def run_store_prune_job() -> None:
    store = get_store()
    prune = getattr(store, "prune_expired", None)
    if prune is None:
        logger.debug("Store backend %s expires entries itself; nothing to prune", store.backend_id)
        return
    try:
        prune()
    except Exception as e:
        logger.exception("Store prune job failed: %s", e)
