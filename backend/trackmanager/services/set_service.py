"""Set service for managing DJ sets and their track lists"""
from collections import Counter
from dataclasses import dataclass
from sqlalchemy import String, cast
from sqlalchemy.orm import Session
from typing import List, Optional, Sequence, Union
import logging

from trackmanager.database import commit_or_rollback
from trackmanager.errors import NotFoundError
from trackmanager.models.dj_set import DJSet
from trackmanager.models.track import Track
from trackmanager.services.fields import SetFields, SetPatch
from trackmanager.services.filters import TrackCriteria
from trackmanager.services.track_service import TrackService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTrack:
    """A set entry whose id points at an existing track"""
    track: Track

    @property
    def track_id(self) -> str:
        return self.track.id


@dataclass(frozen=True)
class MissingTrack:
    """A set entry whose id no longer resolves to a track"""
    track_id: str


TrackRef = Union[ResolvedTrack, MissingTrack]


@dataclass(frozen=True)
class ResolvedSet:
    """A set together with its track references, resolved in order"""
    dj_set: DJSet
    tracks: List[TrackRef]

    @property
    def missing_track_ids(self) -> List[str]:
        return [ref.track_id for ref in self.tracks if isinstance(ref, MissingTrack)]


def resolve_track_refs(db: Session, track_ids: Sequence[str]) -> List[TrackRef]:
    """
    Resolve track ids to tracks with a single query, keeping the given order

    Args:
        db: Database session
        track_ids: Ordered track UUIDs, possibly including dangling ones

    Returns:
        One ResolvedTrack or MissingTrack per input id
    """
    if not track_ids:
        return []
    tracks_by_id = {
        track.id: track
        for track in db.query(Track).filter(Track.id.in_(set(track_ids))).all()
    }
    return [
        ResolvedTrack(tracks_by_id[track_id]) if track_id in tracks_by_id else MissingTrack(track_id)
        for track_id in track_ids
    ]


class SetService:
    """Service for set-related operations"""

    def __init__(self, db: Session):
        """
        Initialize set service

        Args:
            db: Database session
        """
        self.db = db

    def list_sets(self) -> List[DJSet]:
        """
        Get all sets, newest first; track ids are left unresolved

        Returns:
            List of DJSet instances
        """
        return self.db.query(DJSet).order_by(DJSet.created_at.desc(), DJSet.id.asc()).all()

    def get_set(self, set_id: str) -> ResolvedSet:
        """
        Get a set with its track references resolved

        Args:
            set_id: Set UUID

        Returns:
            ResolvedSet; ids of deleted tracks come back as MissingTrack entries

        Raises:
            NotFoundError: No set has this id
        """
        return self._resolve(self._get_row(set_id))

    def create_set(self, fields: SetFields) -> DJSet:
        """
        Create a new set

        Args:
            fields: Name, optional description and optional initial track ids

        Returns:
            Created DJSet instance
        """
        dj_set = fields.validated().to_set()
        self.db.add(dj_set)
        commit_or_rollback(self.db, "create set")
        self.db.refresh(dj_set)

        logger.info(f"Created set: {dj_set.name} ({dj_set.id}) with {len(dj_set.track_ids)} track(s)")
        return dj_set

    def update_set(self, set_id: str, patch: SetPatch) -> ResolvedSet:
        """
        Apply a partial update to a set

        Args:
            set_id: Set UUID
            patch: Fields to change; a supplied track list replaces the current one

        Returns:
            Updated ResolvedSet
        """
        patch = patch.validated()
        dj_set = self._get_row(set_id, for_update=True)
        patch.apply_to(dj_set)
        commit_or_rollback(self.db, "update set")

        logger.info(f"Updated set: {dj_set.name} ({dj_set.id})")
        return self.get_set(set_id)

    def delete_set(self, set_id: str) -> None:
        """
        Delete a set; its tracks are left alone

        Args:
            set_id: Set UUID

        Raises:
            NotFoundError: No set has this id
        """
        dj_set = self._get_row(set_id)
        name = dj_set.name
        self.db.delete(dj_set)
        commit_or_rollback(self.db, "delete set")

        logger.info(f"Deleted set: {name} ({set_id})")

    def add_track(self, set_id: str, track_id: str) -> ResolvedSet:
        """
        Append a track to a set; adding a track that is already there changes nothing

        Args:
            set_id: Set UUID
            track_id: Track UUID

        Returns:
            Updated ResolvedSet

        Raises:
            NotFoundError: The track or the set does not exist
        """
        TrackService(self.db).get_track(track_id)
        dj_set = self._get_row(set_id, for_update=True)

        current = list(dj_set.track_ids or [])
        if track_id in current:
            logger.debug(f"Track {track_id} already in set {set_id}, skipping duplicate")
        else:
            # Assign a new list so the JSON column is marked dirty
            dj_set.track_ids = current + [track_id]
            commit_or_rollback(self.db, "add track to set")
            logger.info(f"Added track {track_id} to set {dj_set.name} at position {len(current) + 1}")

        return self.get_set(set_id)

    def remove_track(self, set_id: str, track_id: str) -> ResolvedSet:
        """
        Remove a track from a set; removing a track that is not there is a no-op

        Args:
            set_id: Set UUID
            track_id: Track UUID

        Returns:
            Updated ResolvedSet

        Raises:
            NotFoundError: The set does not exist
        """
        dj_set = self._get_row(set_id, for_update=True)

        current = list(dj_set.track_ids or [])
        remaining = [existing for existing in current if existing != track_id]
        if len(remaining) != len(current):
            dj_set.track_ids = remaining
            commit_or_rollback(self.db, "remove track from set")
            logger.info(f"Removed track {track_id} from set {dj_set.name}")

        return self.get_set(set_id)

    def reorder_tracks(self, set_id: str, ordered_ids: Sequence[str]) -> ResolvedSet:
        """
        Replace a set's track list with the given ordering

        The list is taken as-is. Callers normally pass a permutation of the
        current members; a shorter list also prunes membership.

        Args:
            set_id: Set UUID
            ordered_ids: Track UUIDs in the desired order

        Returns:
            Updated ResolvedSet
        """
        dj_set = self._get_row(set_id, for_update=True)

        new_order = list(ordered_ids)
        if Counter(new_order) != Counter(dj_set.track_ids or []):
            logger.warning(
                f"Reorder of set {set_id} is not a permutation of its members "
                f"({len(dj_set.track_ids or [])} -> {len(new_order)} tracks)"
            )
        dj_set.track_ids = new_order
        commit_or_rollback(self.db, "reorder set")

        logger.info(f"Reordered set {dj_set.name}: {len(new_order)} tracks")
        return self.get_set(set_id)

    def remove_track_everywhere(self, track_id: str) -> int:
        """
        Remove a track id from every set that lists it

        Runs inside the caller's transaction and only flushes; the caller
        commits, so this lands together with the track delete.

        Args:
            track_id: Track UUID

        Returns:
            Number of sets that were changed
        """
        # Text prefilter, then an exact check on the decoded list
        candidates = self.db.query(DJSet).filter(
            cast(DJSet.track_ids, String).contains(track_id, autoescape=True)
        ).with_for_update().all()

        touched = 0
        for dj_set in candidates:
            current = list(dj_set.track_ids or [])
            if track_id not in current:
                continue
            dj_set.track_ids = [existing for existing in current if existing != track_id]
            touched += 1

        self.db.flush()
        return touched

    def list_available_tracks(self, set_id: str, search: Optional[str] = None) -> List[Track]:
        """
        Tracks that could still be added to a set

        Args:
            set_id: Set UUID
            search: Optional title/artist substring

        Returns:
            Tracks not already in the set, newest first
        """
        dj_set = self._get_row(set_id)
        criteria = TrackCriteria(search=search, exclude_ids=frozenset(dj_set.track_ids or []))
        return TrackService(self.db).list_tracks(criteria)

    def _get_row(self, set_id: str, for_update: bool = False) -> DJSet:
        query = self.db.query(DJSet).filter(DJSet.id == set_id)
        if for_update:
            query = query.with_for_update()
        dj_set = query.first()
        if dj_set is None:
            raise NotFoundError("Set", set_id)
        return dj_set

    def _resolve(self, dj_set: DJSet) -> ResolvedSet:
        refs = resolve_track_refs(self.db, list(dj_set.track_ids or []))
        resolved = ResolvedSet(dj_set=dj_set, tracks=refs)
        if resolved.missing_track_ids:
            logger.warning(
                f"Set {dj_set.id} references {len(resolved.missing_track_ids)} missing track(s): "
                f"{', '.join(resolved.missing_track_ids)}"
            )
        return resolved
