"""Create and patch structures for tracks and sets, with field validation.

A *fields* object carries everything needed to create a record. A *patch*
object carries a partial update: every attribute defaults to ``UNSET`` and only
attributes that were actually supplied are validated and merged. ``None`` on an
optional attribute clears it; ``None`` on a required attribute is rejected.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
import enum
import re

from trackmanager.catalog import BPM_MAX, BPM_MIN, GENRES, KEY_CODES, LINK_PLATFORMS
from trackmanager.errors import FieldValidationError
from trackmanager.models.dj_set import DJSet
from trackmanager.models.track import Track


class _Unset(enum.Enum):
    UNSET = "UNSET"

    def __repr__(self):
        return "UNSET"


UNSET = _Unset.UNSET

# M:SS or H:MM:SS
_DURATION_RE = re.compile(r"^\d{1,3}:[0-5]\d(:[0-5]\d)?$")


def _required_text(value: Any) -> str:
    if value is None or not str(value).strip():
        raise ValueError("is required")
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def _bpm(value: Any) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("is required")
    if isinstance(value, bool):
        raise ValueError("must be a number")
    try:
        bpm = float(value)
    except (TypeError, ValueError):
        raise ValueError("must be a number")
    if not BPM_MIN <= bpm <= BPM_MAX:
        raise ValueError(f"must be between {BPM_MIN} and {BPM_MAX}")
    return bpm


def _key(value: Any) -> str:
    code = _required_text(value).upper()
    if code not in KEY_CODES:
        raise ValueError(f"'{value}' is not a Camelot key code (1A-12A, 1B-12B)")
    return code


def _genre(value: Any) -> str:
    genre = _required_text(value)
    if genre not in GENRES:
        raise ValueError(f"'{genre}' is not a known genre (use 'Other')")
    return genre


def _duration(value: Any) -> str:
    duration = _required_text(value)
    if not _DURATION_RE.match(duration):
        raise ValueError("must look like M:SS or H:MM:SS")
    return duration


def _links(value: Any) -> Dict[str, str]:
    """Blank URLs are dropped; unknown platforms are rejected"""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError("must be a mapping of platform to URL")
    unknown = sorted(set(value) - set(LINK_PLATFORMS))
    if unknown:
        raise ValueError(f"unknown platform(s): {', '.join(unknown)}")
    links = {}
    for platform in LINK_PLATFORMS:
        url = value.get(platform)
        if url is None:
            continue
        if not isinstance(url, str):
            raise ValueError(f"{platform} must be a URL string")
        if url.strip():
            links[platform] = url.strip()
    return links


def _track_ids(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValueError("must be a list of track ids")
    ids = []
    for track_id in value:
        if not isinstance(track_id, str) or not track_id.strip():
            raise ValueError("must contain only non-empty track ids")
        ids.append(track_id.strip())
    return ids


def unique_ids(track_ids: Sequence[str]) -> List[str]:
    """Drop repeated ids, keeping the first occurrence"""
    seen = set()
    result = []
    for track_id in track_ids:
        if track_id not in seen:
            seen.add(track_id)
            result.append(track_id)
    return result


class _Errors:
    """Collects per-field errors so every bad field is reported at once"""

    def __init__(self):
        self.errors: Dict[str, str] = {}

    def clean(self, name: str, cleaner: Callable[[Any], Any], value: Any) -> Any:
        if value is UNSET:
            return UNSET
        try:
            return cleaner(value)
        except ValueError as e:
            self.errors[name] = str(e)
            return value

    def raise_if_any(self):
        if self.errors:
            raise FieldValidationError(self.errors)


@dataclass(frozen=True)
class TrackFields:
    """All fields needed to create a track"""

    title: Any
    artist: Any
    bpm: Any
    key: Any
    genre: Any
    duration: Any
    subgenre: Any = None
    links: Any = None
    notes: Any = None

    def validated(self) -> "TrackFields":
        errors = _Errors()
        cleaned = TrackFields(
            title=errors.clean("title", _required_text, self.title),
            artist=errors.clean("artist", _required_text, self.artist),
            bpm=errors.clean("bpm", _bpm, self.bpm),
            key=errors.clean("key", _key, self.key),
            genre=errors.clean("genre", _genre, self.genre),
            duration=errors.clean("duration", _duration, self.duration),
            subgenre=errors.clean("subgenre", _optional_text, self.subgenre),
            links=errors.clean("links", _links, self.links),
            notes=errors.clean("notes", _optional_text, self.notes),
        )
        errors.raise_if_any()
        return cleaned

    def to_track(self) -> Track:
        return Track(
            title=self.title,
            artist=self.artist,
            bpm=self.bpm,
            key=self.key,
            genre=self.genre,
            duration=self.duration,
            subgenre=self.subgenre,
            links=dict(self.links or {}),
            notes=self.notes,
        )


@dataclass(frozen=True)
class TrackPatch:
    """Partial track update; links are replaced as a whole, not merged per platform"""

    title: Any = UNSET
    artist: Any = UNSET
    bpm: Any = UNSET
    key: Any = UNSET
    genre: Any = UNSET
    duration: Any = UNSET
    subgenre: Any = UNSET
    links: Any = UNSET
    notes: Any = UNSET

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "TrackPatch":
        """Build a patch from the keys present in ``values``; unknown keys are ignored"""
        known = {name: values[name] for name in cls.__dataclass_fields__ if name in values}
        return cls(**known)

    def validated(self) -> "TrackPatch":
        errors = _Errors()
        cleaned = TrackPatch(
            title=errors.clean("title", _required_text, self.title),
            artist=errors.clean("artist", _required_text, self.artist),
            bpm=errors.clean("bpm", _bpm, self.bpm),
            key=errors.clean("key", _key, self.key),
            genre=errors.clean("genre", _genre, self.genre),
            duration=errors.clean("duration", _duration, self.duration),
            subgenre=errors.clean("subgenre", _optional_text, self.subgenre),
            links=errors.clean("links", _links, self.links),
            notes=errors.clean("notes", _optional_text, self.notes),
        )
        errors.raise_if_any()
        return cleaned

    def apply_to(self, track: Track) -> Track:
        """Merge supplied fields onto ``track``; call on a validated patch"""
        if self.title is not UNSET:
            track.title = self.title
        if self.artist is not UNSET:
            track.artist = self.artist
        if self.bpm is not UNSET:
            track.bpm = self.bpm
        if self.key is not UNSET:
            track.key = self.key
        if self.genre is not UNSET:
            track.genre = self.genre
        if self.duration is not UNSET:
            track.duration = self.duration
        if self.subgenre is not UNSET:
            track.subgenre = self.subgenre
        if self.links is not UNSET:
            track.links = dict(self.links)
        if self.notes is not UNSET:
            track.notes = self.notes
        return track


@dataclass(frozen=True)
class SetFields:
    """Fields needed to create a set; a caller-supplied track list is de-duplicated"""

    name: Any
    description: Any = None
    track_ids: Any = field(default_factory=list)

    def validated(self) -> "SetFields":
        errors = _Errors()
        cleaned = SetFields(
            name=errors.clean("name", _required_text, self.name),
            description=errors.clean("description", _optional_text, self.description),
            track_ids=errors.clean("tracks", _track_ids, self.track_ids),
        )
        errors.raise_if_any()
        return replace(cleaned, track_ids=unique_ids(cleaned.track_ids))

    def to_set(self) -> DJSet:
        return DJSet(
            name=self.name,
            description=self.description,
            track_ids=list(self.track_ids),
        )


@dataclass(frozen=True)
class SetPatch:
    """Partial set update; ``track_ids`` replaces the whole list, in order"""

    name: Any = UNSET
    description: Any = UNSET
    track_ids: Any = UNSET

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SetPatch":
        known = {name: values[name] for name in cls.__dataclass_fields__ if name in values}
        return cls(**known)

    def validated(self) -> "SetPatch":
        errors = _Errors()
        cleaned = SetPatch(
            name=errors.clean("name", _required_text, self.name),
            description=errors.clean("description", _optional_text, self.description),
            track_ids=errors.clean("tracks", _track_ids, self.track_ids),
        )
        errors.raise_if_any()
        if cleaned.track_ids is not UNSET:
            cleaned = replace(cleaned, track_ids=unique_ids(cleaned.track_ids))
        return cleaned

    def apply_to(self, dj_set: DJSet) -> DJSet:
        if self.name is not UNSET:
            dj_set.name = self.name
        if self.description is not UNSET:
            dj_set.description = self.description
        if self.track_ids is not UNSET:
            dj_set.track_ids = list(self.track_ids)
        return dj_set
