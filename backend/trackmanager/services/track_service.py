"""Track service for managing track operations"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from trackmanager.database import commit_or_rollback
from trackmanager.errors import NotFoundError, StoreError
from trackmanager.models.track import Track
from trackmanager.services.fields import TrackFields, TrackPatch
from trackmanager.services.filters import TrackCriteria, build_track_filter

logger = logging.getLogger(__name__)


class TrackService:
    """Service for track-related operations"""
    
    def __init__(self, db: Session):
        """
        Initialize track service
        
        Args:
            db: Database session
        """
        self.db = db
    
    def list_tracks(self, criteria: Optional[TrackCriteria] = None) -> List[Track]:
        """
        List tracks matching every supplied criterion, newest first
        
        Args:
            criteria: Optional filters; None returns every track
            
        Returns:
            List of Track instances ordered by creation time (newest first, ties by id)
        """
        return self.db.query(Track).filter(
            build_track_filter(criteria)
        ).order_by(Track.created_at.desc(), Track.id.asc()).all()
    
    def get_track(self, track_id: str) -> Track:
        """
        Get track by ID
        
        Args:
            track_id: Track UUID
            
        Returns:
            Track instance
            
        Raises:
            NotFoundError: No track has this id
        """
        track = self.db.query(Track).filter(Track.id == track_id).first()
        if track is None:
            raise NotFoundError("Track", track_id)
        return track
    
    def create_track(self, fields: TrackFields) -> Track:
        """
        Create a new track
        
        Args:
            fields: Track fields; validated before anything is written
            
        Returns:
            Created Track instance with id and timestamps assigned
            
        Raises:
            FieldValidationError: A required field is missing or out of range
        """
        track = fields.validated().to_track()
        self.db.add(track)
        commit_or_rollback(self.db, "create track")
        self.db.refresh(track)
        
        logger.info(f"Created track: {track.artist} - {track.title} ({track.id})")
        return track
    
    def update_track(self, track_id: str, patch: TrackPatch) -> Track:
        """
        Apply a partial update to a track
        
        Args:
            track_id: Track UUID
            patch: Fields to change; unset fields keep their current value
            
        Returns:
            Updated Track instance
        """
        patch = patch.validated()
        track = self.get_track(track_id)
        patch.apply_to(track)
        commit_or_rollback(self.db, "update track")
        self.db.refresh(track)
        
        logger.info(f"Updated track: {track.artist} - {track.title} ({track.id})")
        return track
    
    def delete_track(self, track_id: str) -> None:
        """
        Delete a track and remove it from every set, in one transaction
        
        Args:
            track_id: Track UUID
            
        Raises:
            NotFoundError: No track has this id
        """
        # set_service imports this module
        from trackmanager.services.set_service import SetService
        
        track = self.get_track(track_id)
        label = f"{track.artist} - {track.title}"
        self.db.delete(track)
        try:
            touched = SetService(self.db).remove_track_everywhere(track_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Failed to remove track {track_id} from sets")
            raise StoreError(f"Failed to delete track '{track_id}'") from e
        commit_or_rollback(self.db, "delete track")
        
        logger.info(f"Deleted track: {label} ({track_id}), removed from {touched} set(s)")
