"""Tracks API endpoints"""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session
from typing import List, Optional

from trackmanager.database import get_db
from trackmanager.errors import FieldValidationError, NotFoundError
from trackmanager.services.fields import TrackFields, TrackPatch
from trackmanager.services.filters import TrackCriteria
from trackmanager.services.track_service import TrackService

router = APIRouter(prefix="/api/tracks", tags=["tracks"])


class TrackLinks(BaseModel):
    spotify: str | None = None
    soundcloud: str | None = None
    beatport: str | None = None
    youtube: str | None = None

    class Config:
        extra = "forbid"
        from_attributes = True


class TrackResponse(BaseModel):
    id: str
    title: str
    artist: str
    bpm: float
    key: str
    genre: str
    subgenre: str | None = None
    duration: str
    links: TrackLinks = TrackLinks()
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class CreateTrackRequest(BaseModel):
    # Required fields are checked by the service so every problem is reported together
    title: str | None = None
    artist: str | None = None
    bpm: float | None = None
    key: str | None = None
    genre: str | None = None
    subgenre: str | None = None
    duration: str | None = None
    links: TrackLinks | None = None
    notes: str | None = None


class UpdateTrackRequest(CreateTrackRequest):
    """Only the fields present in the body are changed"""


def invalid_fields(e: FieldValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": "Invalid fields", "errors": e.errors})


@router.get("", response_model=List[TrackResponse])
def list_tracks(
    search: Optional[str] = Query(None, description="Substring of title or artist"),
    bpm_min: Optional[float] = Query(None, alias="bpmMin"),
    bpm_max: Optional[float] = Query(None, alias="bpmMax"),
    key: Optional[str] = Query(None, description="Camelot key code, e.g. 8A"),
    genre: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """List tracks, newest first, filtered by any combination of criteria"""
    criteria = TrackCriteria(search=search, bpm_min=bpm_min, bpm_max=bpm_max, key=key, genre=genre)
    return TrackService(db).list_tracks(criteria)


@router.get("/{track_id}", response_model=TrackResponse)
def get_track(track_id: str, db: Session = Depends(get_db)):
    """Get a single track"""
    try:
        return TrackService(db).get_track(track_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=TrackResponse, status_code=201)
def create_track(request: CreateTrackRequest, db: Session = Depends(get_db)):
    """Create a track"""
    fields = TrackFields(
        title=request.title,
        artist=request.artist,
        bpm=request.bpm,
        key=request.key,
        genre=request.genre,
        duration=request.duration,
        subgenre=request.subgenre,
        links=request.links.model_dump() if request.links else None,
        notes=request.notes,
    )
    try:
        return TrackService(db).create_track(fields)
    except FieldValidationError as e:
        raise invalid_fields(e)


@router.put("/{track_id}", response_model=TrackResponse)
def update_track(track_id: str, request: UpdateTrackRequest, db: Session = Depends(get_db)):
    """Update the supplied fields of a track"""
    patch = TrackPatch.from_mapping(request.model_dump(exclude_unset=True))
    try:
        return TrackService(db).update_track(track_id, patch)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FieldValidationError as e:
        raise invalid_fields(e)


@router.delete("/{track_id}")
def delete_track(track_id: str, db: Session = Depends(get_db)):
    """Delete a track and remove it from every set"""
    try:
        TrackService(db).delete_track(track_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Track deleted"}
