"""
Saved rate model
"""
from sqlalchemy import Column, String, Integer, Float, DateTime
from datetime import datetime
import uuid

from promosync.db.base import Base


class SavedRate(Base):
    """
    Sponsorship rate computed by the rate calculator and kept for comparison
    """
    __tablename__ = "saved_rates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(36), nullable=False, index=True)

    followers = Column(Integer, nullable=False, default=0)
    avg_viewers = Column(Integer, nullable=False, default=0)
    engagement_rate = Column(Float, nullable=False, default=0)
    niche = Column(String(100), nullable=True)
    platform = Column(String(50), nullable=True)
    calculated_rate = Column(Float, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<SavedRate(id={self.id}, rate={self.calculated_rate})>"
