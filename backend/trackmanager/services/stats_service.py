"""Library statistics for the dashboard"""
from dataclasses import dataclass
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional

from trackmanager.models.dj_set import DJSet
from trackmanager.models.track import Track, utcnow

RECENT_TRACKS = 4
RECENT_SETS = 3


@dataclass(frozen=True)
class LibrarySummary:
    total_tracks: int
    total_sets: int
    tracks_this_month: int
    recent_tracks: List[Track]
    recent_sets: List[DJSet]


class LibraryStatsService:
    """Counts and recent items across tracks and sets"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def summary(self, now: Optional[datetime] = None) -> LibrarySummary:
        """
        Build the dashboard summary
        
        Args:
            now: Reference time for "this month" (defaults to current UTC time)
            
        Returns:
            LibrarySummary
        """
        now = now or utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        if month_start.month == 12:
            next_month = month_start.replace(year=month_start.year + 1, month=1)
        else:
            next_month = month_start.replace(month=month_start.month + 1)
        
        return LibrarySummary(
            total_tracks=self.db.query(func.count(Track.id)).scalar() or 0,
            total_sets=self.db.query(func.count(DJSet.id)).scalar() or 0,
            tracks_this_month=self.db.query(func.count(Track.id)).filter(
                Track.created_at >= month_start,
                Track.created_at < next_month,
            ).scalar() or 0,
            recent_tracks=self.db.query(Track).order_by(
                Track.created_at.desc(), Track.id.asc()
            ).limit(RECENT_TRACKS).all(),
            recent_sets=self.db.query(DJSet).order_by(
                DJSet.created_at.desc(), DJSet.id.asc()
            ).limit(RECENT_SETS).all(),
        )
