"""
Media kit model
"""
from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime
import uuid

from promosync.db.base import Base


class MediaKit(Base):
    __tablename__ = "media_kits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(36), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    template = Column(String(50), default='modern', nullable=False)
    data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<MediaKit(id={self.id}, name={self.name})>"
