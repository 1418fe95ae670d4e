"""Database models"""
from trackmanager.models.track import Track
from trackmanager.models.dj_set import DJSet

__all__ = [
    "Track",
    "DJSet",
]
