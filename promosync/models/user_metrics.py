"""
User metrics model
"""
from sqlalchemy import Column, String, Integer, Float, DateTime
from datetime import datetime

from promosync.db.base import Base


class UserMetrics(Base):
    """
    Denormalized dashboard totals, recalculated after contract changes
    """
    __tablename__ = "user_metrics"

    user_id = Column(String(36), primary_key=True, index=True)

    total_revenue = Column(Float, default=0, nullable=False)
    active_deals = Column(Integer, default=0, nullable=False)
    brand_matches = Column(Integer, default=0, nullable=False)
    avg_deal_value = Column(Float, default=0, nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UserMetrics(user_id={self.user_id}, active_deals={self.active_deals})>"
