"""Library-wide endpoints: metadata vocabularies and dashboard stats"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session
from typing import List

from trackmanager.api.sets import SetResponse, to_set_response
from trackmanager.api.tracks import TrackResponse
from trackmanager.catalog import BPM_MAX, BPM_MIN, GENRES, LINK_PLATFORMS, key_options
from trackmanager.database import get_db
from trackmanager.services.stats_service import LibraryStatsService

router = APIRouter(prefix="/api", tags=["library"])


class KeyOption(BaseModel):
    value: str
    label: str


class CatalogResponse(BaseModel):
    keys: List[KeyOption]
    genres: List[str]
    link_platforms: List[str]
    bpm_min: int
    bpm_max: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StatsResponse(BaseModel):
    total_tracks: int
    total_sets: int
    tracks_this_month: int
    recent_tracks: List[TrackResponse]
    recent_sets: List[SetResponse]

    class Config:
        alias_generator = to_camel
        populate_by_name = True


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog():
    """Key codes, genres and link platforms accepted by the track endpoints"""
    return CatalogResponse(
        keys=[KeyOption(**option) for option in key_options()],
        genres=GENRES,
        link_platforms=LINK_PLATFORMS,
        bpm_min=BPM_MIN,
        bpm_max=BPM_MAX,
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    """Counts and most recent items for the dashboard"""
    summary = LibraryStatsService(db).summary()
    return StatsResponse(
        total_tracks=summary.total_tracks,
        total_sets=summary.total_sets,
        tracks_this_month=summary.tracks_this_month,
        recent_tracks=[TrackResponse.model_validate(track) for track in summary.recent_tracks],
        recent_sets=[to_set_response(dj_set) for dj_set in summary.recent_sets],
    )
