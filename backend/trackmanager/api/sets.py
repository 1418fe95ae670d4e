"""Sets API endpoints"""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session
from typing import List, Literal, Optional, Union

from trackmanager.api.tracks import TrackResponse, invalid_fields
from trackmanager.database import get_db
from trackmanager.errors import FieldValidationError, NotFoundError
from trackmanager.models.dj_set import DJSet
from trackmanager.services.fields import SetFields, SetPatch
from trackmanager.services.set_service import MissingTrack, ResolvedSet, SetService

router = APIRouter(prefix="/api/sets", tags=["sets"])

UNKNOWN_TITLE = "Unknown Track"
UNKNOWN_ARTIST = "Unknown Artist"


class SetTrackResponse(TrackResponse):
    missing: Literal[False] = False


class MissingTrackResponse(BaseModel):
    """Placeholder for a set entry whose track has been deleted"""
    id: str
    title: str = UNKNOWN_TITLE
    artist: str = UNKNOWN_ARTIST
    missing: Literal[True] = True


class SetResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    tracks: List[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SetDetailResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    tracks: List[Union[SetTrackResponse, MissingTrackResponse]]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CreateSetRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    tracks: List[str] | None = None


class UpdateSetRequest(CreateSetRequest):
    """Only the fields present in the body are changed; tracks replaces the whole list"""


class AddTrackRequest(BaseModel):
    track_id: str = Field(alias="trackId")


class ReorderTracksRequest(BaseModel):
    track_ids: List[str] = Field(alias="trackIds")


def to_set_response(dj_set: DJSet) -> SetResponse:
    return SetResponse(
        id=dj_set.id,
        name=dj_set.name,
        description=dj_set.description,
        tracks=list(dj_set.track_ids or []),
        created_at=dj_set.created_at,
        updated_at=dj_set.updated_at,
    )


def to_set_detail_response(resolved: ResolvedSet) -> SetDetailResponse:
    dj_set = resolved.dj_set
    tracks = []
    for ref in resolved.tracks:
        if isinstance(ref, MissingTrack):
            tracks.append(MissingTrackResponse(id=ref.track_id))
        else:
            tracks.append(SetTrackResponse.model_validate(ref.track))
    return SetDetailResponse(
        id=dj_set.id,
        name=dj_set.name,
        description=dj_set.description,
        tracks=tracks,
        created_at=dj_set.created_at,
        updated_at=dj_set.updated_at,
    )


@router.get("", response_model=List[SetResponse])
def list_sets(db: Session = Depends(get_db)):
    """List sets, newest first, with track ids only"""
    return [to_set_response(dj_set) for dj_set in SetService(db).list_sets()]


@router.get("/{set_id}", response_model=SetDetailResponse)
def get_set(set_id: str, db: Session = Depends(get_db)):
    """Get a set with its tracks resolved"""
    try:
        return to_set_detail_response(SetService(db).get_set(set_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=SetResponse, status_code=201)
def create_set(request: CreateSetRequest, db: Session = Depends(get_db)):
    """Create a set"""
    fields = SetFields(name=request.name, description=request.description, track_ids=request.tracks or [])
    try:
        return to_set_response(SetService(db).create_set(fields))
    except FieldValidationError as e:
        raise invalid_fields(e)


@router.put("/{set_id}", response_model=SetDetailResponse)
def update_set(set_id: str, request: UpdateSetRequest, db: Session = Depends(get_db)):
    """Update the supplied fields of a set"""
    values = request.model_dump(exclude_unset=True)
    if "tracks" in values:
        values["track_ids"] = values.pop("tracks")
    try:
        return to_set_detail_response(SetService(db).update_set(set_id, SetPatch.from_mapping(values)))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FieldValidationError as e:
        raise invalid_fields(e)


@router.delete("/{set_id}")
def delete_set(set_id: str, db: Session = Depends(get_db)):
    """Delete a set (its tracks are kept)"""
    try:
        SetService(db).delete_set(set_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Set deleted"}


@router.post("/{set_id}/tracks", response_model=SetDetailResponse)
def add_track_to_set(set_id: str, request: AddTrackRequest, db: Session = Depends(get_db)):
    """Add a track to the end of a set; no-op if it is already there"""
    try:
        return to_set_detail_response(SetService(db).add_track(set_id, request.track_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{set_id}/tracks/{track_id}", response_model=SetDetailResponse)
def remove_track_from_set(set_id: str, track_id: str, db: Session = Depends(get_db)):
    """Remove a track from a set; no-op if it is not there"""
    try:
        return to_set_detail_response(SetService(db).remove_track(set_id, track_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{set_id}/reorder", response_model=SetDetailResponse)
def reorder_set_tracks(set_id: str, request: ReorderTracksRequest, db: Session = Depends(get_db)):
    """Replace the set's track order with the given list of ids"""
    try:
        return to_set_detail_response(SetService(db).reorder_tracks(set_id, request.track_ids))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{set_id}/available-tracks", response_model=List[TrackResponse])
def list_available_tracks(
    set_id: str,
    search: Optional[str] = Query(None, description="Substring of title or artist"),
    db: Session = Depends(get_db)
):
    """Tracks not yet in the set, for the add-track picker"""
    try:
        return SetService(db).list_available_tracks(set_id, search)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
