"""DJ set model"""
from sqlalchemy import Column, String, Text, JSON, DateTime
from sqlalchemy.sql import func
import uuid

from trackmanager.database import Base
from trackmanager.models.track import utcnow


class DJSet(Base):
    """A named, ordered list of track references for a planned or played set"""
    
    __tablename__ = "sets"
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    track_ids = Column(JSON, nullable=False, default=list)  # Ordered track UUIDs; weak references
    created_at = Column(DateTime, default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, server_default=func.now())
    
    def __repr__(self):
        return f"<DJSet(id={self.id}, name='{self.name}', tracks={len(self.track_ids or [])})>"
