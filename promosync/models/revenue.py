"""
Revenue entry model
"""
from sqlalchemy import Column, String, Float, DateTime
from datetime import datetime
import uuid

from promosync.db.base import Base


class RevenueEntry(Base):
    """
    Money received, optionally tied to the contract that paid it
    """
    __tablename__ = "revenue"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(36), nullable=False, index=True)
    contract_id = Column(String(36), nullable=True, index=True)

    amount = Column(Float, nullable=False)
    description = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<RevenueEntry(id={self.id}, amount={self.amount})>"
