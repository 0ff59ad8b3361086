"""
Action stores: in-memory and SQL.
Each store persists values its own way but honours the same get/put-with-TTL/delete/list
contract so scheduling and dispatch stay backend-agnostic.
"""
from trello_scheduler.services.store.base import ActionStore
from trello_scheduler.services.store.memory import InMemoryActionStore
from trello_scheduler.services.store.registry import get_store, set_store

__all__ = [
    "ActionStore",
    "InMemoryActionStore",
    "get_store",
    "set_store",
]
