"""
Usage counter model
"""
from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime

from promosync.db.base import Base


class UsageCounter(Base):
    """
    Per-subscriber usage counters for the current calendar month
    """
    __tablename__ = "usage"

    user_id = Column(String(36), primary_key=True, index=True)

    # Month key the counts apply to, e.g. '2024-1'
    month = Column(String(7), nullable=False)

    # Counter name -> count
    counts = Column(JSON, nullable=False, default=dict)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UsageCounter(user_id={self.user_id}, month={self.month})>"
