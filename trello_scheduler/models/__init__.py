from trello_scheduler.models.kv_entry import KvEntry

__all__ = ["KvEntry"]
