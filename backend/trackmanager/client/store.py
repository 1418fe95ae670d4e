"""Client-side state store for tracks and sets.

State only changes by dispatching an action through ``reduce``. Store methods
call the API and, on success, dispatch an action that replaces, removes or
appends the affected record by id, so views stay current without refetching.
On failure nothing but the collection's error flag changes; there is no retry.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union
import logging

from trackmanager.client.api import ApiError, TrackManagerClient

logger = logging.getLogger(__name__)

TRACKS = "tracks"
SETS = "sets"


@dataclass(frozen=True)
class CollectionStatus:
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class LibraryState:
    tracks: Tuple[dict, ...] = ()
    sets: Tuple[dict, ...] = ()
    current_track: Optional[dict] = None
    current_set: Optional[dict] = None
    filters: Mapping[str, Any] = field(default_factory=dict)
    status: Mapping[str, CollectionStatus] = field(
        default_factory=lambda: {TRACKS: CollectionStatus(), SETS: CollectionStatus()}
    )

    def is_loading(self, collection: str) -> bool:
        return self.status[collection].loading

    def error(self, collection: str) -> Optional[str]:
        return self.status[collection].error


# Actions


@dataclass(frozen=True)
class RequestStarted:
    collection: str


@dataclass(frozen=True)
class RequestFailed:
    collection: str
    message: str


@dataclass(frozen=True)
class TracksLoaded:
    tracks: Sequence[dict]


@dataclass(frozen=True)
class TrackLoaded:
    track: dict


@dataclass(frozen=True)
class TrackCreated:
    track: dict


@dataclass(frozen=True)
class TrackUpdated:
    track: dict


@dataclass(frozen=True)
class TrackDeleted:
    track_id: str


@dataclass(frozen=True)
class FiltersChanged:
    filters: Mapping[str, Any]


@dataclass(frozen=True)
class FiltersCleared:
    pass


@dataclass(frozen=True)
class SetsLoaded:
    sets: Sequence[dict]


@dataclass(frozen=True)
class SetLoaded:
    dj_set: dict


@dataclass(frozen=True)
class SetCreated:
    dj_set: dict


@dataclass(frozen=True)
class SetUpdated:
    dj_set: dict


@dataclass(frozen=True)
class SetDeleted:
    set_id: str


Action = Union[
    RequestStarted, RequestFailed,
    TracksLoaded, TrackLoaded, TrackCreated, TrackUpdated, TrackDeleted,
    FiltersChanged, FiltersCleared,
    SetsLoaded, SetLoaded, SetCreated, SetUpdated, SetDeleted,
]


def track_ref_id(entry: Union[str, dict]) -> str:
    """Id of a set entry, whether it is a bare id or a resolved track"""
    return entry if isinstance(entry, str) else entry["id"]


def shallow_set(dj_set: dict) -> dict:
    """The list-view shape of a set: tracks as ids only"""
    return {**dj_set, "tracks": [track_ref_id(entry) for entry in dj_set.get("tracks", [])]}


def _with_status(state: LibraryState, collection: str, loading: bool, error: Optional[str] = None) -> LibraryState:
    status = dict(state.status)
    status[collection] = CollectionStatus(loading=loading, error=error)
    return replace(state, status=status)


def _replace_by_id(items: Sequence[dict], item: dict) -> Tuple[dict, ...]:
    return tuple(item if existing["id"] == item["id"] else existing for existing in items)


def _remove_by_id(items: Sequence[dict], item_id: str) -> Tuple[dict, ...]:
    return tuple(existing for existing in items if existing["id"] != item_id)


def _strip_track(dj_set: dict, track_id: str) -> dict:
    entries = dj_set.get("tracks", [])
    kept = [entry for entry in entries if track_ref_id(entry) != track_id]
    if len(kept) == len(entries):
        return dj_set
    return {**dj_set, "tracks": kept}


def reduce(state: LibraryState, action: Action) -> LibraryState:
    """Return the state that results from applying ``action``; never mutates ``state``"""
    if isinstance(action, RequestStarted):
        return _with_status(state, action.collection, loading=True)
    if isinstance(action, RequestFailed):
        return _with_status(state, action.collection, loading=False, error=action.message)

    if isinstance(action, TracksLoaded):
        state = replace(state, tracks=tuple(action.tracks))
        return _with_status(state, TRACKS, loading=False)
    if isinstance(action, TrackLoaded):
        state = replace(state, current_track=action.track)
        return _with_status(state, TRACKS, loading=False)
    if isinstance(action, TrackCreated):
        state = replace(state, tracks=state.tracks + (action.track,))
        return _with_status(state, TRACKS, loading=False)
    if isinstance(action, TrackUpdated):
        current = state.current_track
        if current is not None and current["id"] == action.track["id"]:
            current = action.track
        state = replace(state, tracks=_replace_by_id(state.tracks, action.track), current_track=current)
        return _with_status(state, TRACKS, loading=False)
    if isinstance(action, TrackDeleted):
        current = state.current_track
        if current is not None and current["id"] == action.track_id:
            current = None
        # The server drops the id from every set; mirror that locally
        current_set = state.current_set
        if current_set is not None:
            current_set = _strip_track(current_set, action.track_id)
        state = replace(
            state,
            tracks=_remove_by_id(state.tracks, action.track_id),
            current_track=current,
            sets=tuple(_strip_track(dj_set, action.track_id) for dj_set in state.sets),
            current_set=current_set,
        )
        return _with_status(state, TRACKS, loading=False)

    if isinstance(action, FiltersChanged):
        return replace(state, filters={**state.filters, **action.filters})
    if isinstance(action, FiltersCleared):
        return replace(state, filters={})

    if isinstance(action, SetsLoaded):
        state = replace(state, sets=tuple(shallow_set(dj_set) for dj_set in action.sets))
        return _with_status(state, SETS, loading=False)
    if isinstance(action, SetLoaded):
        state = replace(state, current_set=action.dj_set)
        return _with_status(state, SETS, loading=False)
    if isinstance(action, SetCreated):
        state = replace(state, sets=state.sets + (shallow_set(action.dj_set),))
        return _with_status(state, SETS, loading=False)
    if isinstance(action, SetUpdated):
        current = state.current_set
        if current is not None and current["id"] == action.dj_set["id"]:
            current = action.dj_set
        state = replace(
            state,
            sets=_replace_by_id(state.sets, shallow_set(action.dj_set)),
            current_set=current,
        )
        return _with_status(state, SETS, loading=False)
    if isinstance(action, SetDeleted):
        current = state.current_set
        if current is not None and current["id"] == action.set_id:
            current = None
        state = replace(state, sets=_remove_by_id(state.sets, action.set_id), current_set=current)
        return _with_status(state, SETS, loading=False)

    raise TypeError(f"Unknown action: {action!r}")


Listener = Callable[[LibraryState, Action], None]


class LibraryStore:
    """Holds the client state and runs API calls that update it"""

    def __init__(self, client: Optional[TrackManagerClient] = None, state: Optional[LibraryState] = None):
        self.client = client or TrackManagerClient()
        self._state = state or LibraryState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> LibraryState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(state, action)`` after every dispatch; returns an unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> LibraryState:
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener(self._state, action)
        return self._state

    # Tracks

    def fetch_tracks(self) -> Optional[List[dict]]:
        return self._run(TRACKS, "Failed to fetch tracks",
                         lambda: self.client.list_tracks(self._state.filters), TracksLoaded)

    def fetch_track(self, track_id: str) -> Optional[dict]:
        return self._run(TRACKS, "Failed to fetch track",
                         lambda: self.client.get_track(track_id), TrackLoaded)

    def create_track(self, fields: Mapping[str, Any]) -> Optional[dict]:
        return self._run(TRACKS, "Failed to create track",
                         lambda: self.client.create_track(fields), TrackCreated)

    def update_track(self, track_id: str, fields: Mapping[str, Any]) -> Optional[dict]:
        return self._run(TRACKS, "Failed to update track",
                         lambda: self.client.update_track(track_id, fields), TrackUpdated)

    def delete_track(self, track_id: str) -> bool:
        result = self._run(TRACKS, "Failed to delete track",
                           lambda: self.client.delete_track(track_id), lambda _: TrackDeleted(track_id))
        return result is not None

    def set_filters(self, **filters: Any) -> None:
        """Merge filters (search, bpmMin, bpmMax, key, genre); takes effect on the next fetch"""
        self.dispatch(FiltersChanged(filters))

    def clear_filters(self) -> None:
        self.dispatch(FiltersCleared())

    # Sets

    def fetch_sets(self) -> Optional[List[dict]]:
        return self._run(SETS, "Failed to fetch sets", self.client.list_sets, SetsLoaded)

    def fetch_set(self, set_id: str) -> Optional[dict]:
        return self._run(SETS, "Failed to fetch set",
                         lambda: self.client.get_set(set_id), SetLoaded)

    def create_set(self, fields: Mapping[str, Any]) -> Optional[dict]:
        return self._run(SETS, "Failed to create set",
                         lambda: self.client.create_set(fields), SetCreated)

    def update_set(self, set_id: str, fields: Mapping[str, Any]) -> Optional[dict]:
        return self._run(SETS, "Failed to update set",
                         lambda: self.client.update_set(set_id, fields), SetUpdated)

    def delete_set(self, set_id: str) -> bool:
        result = self._run(SETS, "Failed to delete set",
                           lambda: self.client.delete_set(set_id), lambda _: SetDeleted(set_id))
        return result is not None

    def add_track_to_set(self, set_id: str, track_id: str) -> Optional[dict]:
        return self._run(SETS, "Failed to add track to set",
                         lambda: self.client.add_track_to_set(set_id, track_id), SetUpdated)

    def remove_track_from_set(self, set_id: str, track_id: str) -> Optional[dict]:
        return self._run(SETS, "Failed to remove track from set",
                         lambda: self.client.remove_track_from_set(set_id, track_id), SetUpdated)

    def reorder_tracks(self, set_id: str, track_ids: Sequence[str]) -> Optional[dict]:
        return self._run(SETS, "Failed to reorder tracks",
                         lambda: self.client.reorder_tracks(set_id, track_ids), SetUpdated)

    def _run(self, collection: str, failure: str, call: Callable[[], Any], on_success: Callable[[Any], Action]) -> Any:
        self.dispatch(RequestStarted(collection))
        try:
            result = call()
        except ApiError as e:
            logger.error(f"{failure}: {e}")
            self.dispatch(RequestFailed(collection, f"{failure} ({e})"))
            return None
        self.dispatch(on_success(result))
        return result
