"""
Contract model
"""
from sqlalchemy import Column, String, Float, DateTime
from datetime import datetime
import uuid
import enum

from promosync.db.base import Base


class ContractStatus(str, enum.Enum):
    """Deal lifecycle states"""
    ACTIVE = "active"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def __str__(self):
        return self.value


class Contract(Base):
    """
    Brand deal between the creator and a sponsor
    """
    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(36), nullable=False, index=True)

    brand_name = Column(String(255), nullable=False)
    deal_value = Column(Float, default=0, nullable=False)

    # Stored as plain string so unknown legacy statuses survive round trips
    status = Column(String(20), default='pending', nullable=False, index=True)

    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Contract(id={self.id}, brand={self.brand_name}, status={self.status})>"
