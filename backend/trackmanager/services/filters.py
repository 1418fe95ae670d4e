"""Query filter builder for track listings"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from trackmanager.models.track import Track


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class TrackCriteria:
    """
    Optional, independently combinable track filters.
    
    Every supplied criterion must hold (logical AND). Blank strings are
    treated as not supplied.
    """
    
    search: Optional[str] = None
    bpm_min: Optional[float] = None
    bpm_max: Optional[float] = None
    key: Optional[str] = None
    genre: Optional[str] = None
    exclude_ids: FrozenSet[str] = field(default_factory=frozenset)
    
    def is_empty(self) -> bool:
        return (
            _blank_to_none(self.search) is None
            and self.bpm_min is None
            and self.bpm_max is None
            and _blank_to_none(self.key) is None
            and _blank_to_none(self.genre) is None
            and not self.exclude_ids
        )


def build_track_filter(criteria: Optional[TrackCriteria] = None) -> ColumnElement:
    """
    Translate criteria into a single boolean clause over Track.
    
    Args:
        criteria: Filters to apply; None or empty criteria match every track
        
    Returns:
        SQLAlchemy boolean expression suitable for ``Query.filter``
    """
    if criteria is None:
        return true()
    
    clauses = []
    
    search = _blank_to_none(criteria.search)
    if search is not None:
        # Literal substring: % and _ in the input are escaped
        clauses.append(or_(
            Track.title.icontains(search, autoescape=True),
            Track.artist.icontains(search, autoescape=True),
        ))
    
    if criteria.bpm_min is not None:
        clauses.append(Track.bpm >= criteria.bpm_min)
    if criteria.bpm_max is not None:
        clauses.append(Track.bpm <= criteria.bpm_max)
    
    key = _blank_to_none(criteria.key)
    if key is not None:
        clauses.append(Track.key == key.upper())
    
    genre = _blank_to_none(criteria.genre)
    if genre is not None:
        clauses.append(Track.genre == genre)
    
    if criteria.exclude_ids:
        clauses.append(Track.id.not_in(sorted(criteria.exclude_ids)))
    
    if not clauses:
        return true()
    return and_(*clauses)
