"""
Profile model
"""
from sqlalchemy import Column, String, DateTime
from datetime import datetime
import uuid

from promosync.db.base import Base


class Profile(Base):
    """
    Creator profile, including the subscribed plan
    """
    __tablename__ = "profiles"

    # Primary key - the hosted auth provider's user id
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)

    email = Column(String(255), nullable=True, index=True)
    display_name = Column(String(255), nullable=True)
    platform = Column(String(50), nullable=True)
    niche = Column(String(100), nullable=True)

    # Plan id from the tier catalog, stored as plain string
    plan = Column(String(20), default='free', nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email}, plan={self.plan})>"
