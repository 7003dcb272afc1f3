"""
Pitch model
"""
from sqlalchemy import Column, String, DateTime, Text
from datetime import datetime
import uuid

from promosync.db.base import Base


class Pitch(Base):
    __tablename__ = "pitches"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(36), nullable=False, index=True)

    brand_name = Column(String(255), nullable=False)
    template = Column(String(50), nullable=True)
    pitch_text = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Pitch(id={self.id}, brand={self.brand_name})>"
