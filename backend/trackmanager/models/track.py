"""Track model"""
from sqlalchemy import Column, String, Float, Text, JSON, DateTime
from sqlalchemy.sql import func
from datetime import datetime, timezone
import uuid

from trackmanager.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Track(Base):
    """Track model representing a recording in the DJ's library"""
    
    __tablename__ = "tracks"
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False, index=True)
    artist = Column(String, nullable=False, index=True)
    bpm = Column(Float, nullable=False, index=True)
    key = Column(String, nullable=False, index=True)  # Camelot code, e.g. "8A"
    genre = Column(String, nullable=False, index=True)
    subgenre = Column(String, nullable=True)
    duration = Column(String, nullable=False)  # Display text, e.g. "6:42"
    links = Column(JSON, nullable=False, default=dict)  # {"spotify": url, ...}
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, server_default=func.now())
    
    def __repr__(self):
        return f"<Track(id={self.id}, artist='{self.artist}', title='{self.title}', bpm={self.bpm})>"
