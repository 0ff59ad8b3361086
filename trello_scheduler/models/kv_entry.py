"""One key-value entry of the action store (scheduled action or minute bucket), with its expiry."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from trello_scheduler.db.base import Base


class KvEntry(Base):
    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)  # e.g. "schedule_1767225600000_k3j9x0a1b" or "bucket_29453760"
    value = Column(Text, nullable=False)  # JSON document (action record or list of action keys)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
