"""
Marketplace application model
"""
from sqlalchemy import Column, String, DateTime, Text
from datetime import datetime
import uuid
import enum

from promosync.db.base import Base


class ApplicationStatus(str, enum.Enum):
    """Outcome of an application to a brand campaign"""
    ACCEPTED = "accepted"
    PENDING = "pending"
    REJECTED = "rejected"

    def __str__(self):
        return self.value


class Application(Base):
    """
    Application sent to a brand campaign from the marketplace
    """
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(36), nullable=False, index=True)

    brand_name = Column(String(255), nullable=False)
    campaign = Column(String(255), nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(20), default='pending', nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Application(id={self.id}, brand={self.brand_name}, status={self.status})>"
