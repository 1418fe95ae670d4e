"""Tests for TrackService."""
from datetime import datetime

import pytest

from trackmanager.errors import FieldValidationError, NotFoundError
from trackmanager.models.dj_set import DJSet
from trackmanager.services.fields import SetFields, TrackFields, TrackPatch
from trackmanager.services.set_service import SetService
from trackmanager.services.track_service import TrackService

from conftest import STROBE


class TestCreateAndGet:
    """Test create_track and get_track."""

    def test_round_trip(self, db):
        """A created track reads back with its fields plus id and timestamps."""
        service = TrackService(db)
        created = service.create_track(TrackFields(**STROBE, notes="Long intro"))

        fetched = service.get_track(created.id)

        assert fetched.id == created.id
        assert fetched.title == "Strobe"
        assert fetched.artist == "deadmau5"
        assert fetched.bpm == 128
        assert fetched.key == "8A"
        assert fetched.genre == "Progressive House"
        assert fetched.duration == "10:33"
        assert fetched.notes == "Long intro"
        assert fetched.links == {}
        assert isinstance(fetched.created_at, datetime)
        assert isinstance(fetched.updated_at, datetime)

    def test_invalid_track_is_not_written(self, db):
        """Validation failures leave the table untouched."""
        service = TrackService(db)
        with pytest.raises(FieldValidationError):
            service.create_track(TrackFields(**{**STROBE, "bpm": 5000}))

        assert service.list_tracks() == []

    def test_get_missing_raises(self, db):
        with pytest.raises(NotFoundError):
            TrackService(db).get_track("nope")


class TestListTracks:
    """Test list_tracks ordering."""

    def test_newest_first_with_id_tie_break(self, db, make_track):
        """Tracks come back newest first; equal timestamps order by id."""
        old = make_track(title="Old")
        new = make_track(title="New")
        tie_a = make_track(title="Tie A")
        tie_b = make_track(title="Tie B")

        old.created_at = datetime(2024, 1, 1)
        new.created_at = datetime(2024, 3, 1)
        tie_a.created_at = datetime(2024, 2, 1)
        tie_b.created_at = datetime(2024, 2, 1)
        db.commit()

        ties = sorted([tie_a.id, tie_b.id])
        ids = [track.id for track in TrackService(db).list_tracks()]

        assert ids == [new.id, ties[0], ties[1], old.id]


class TestUpdateTrack:
    """Test update_track."""

    def test_partial_update_keeps_other_fields(self, db, make_track):
        track = make_track(subgenre="Prog", links={"spotify": "https://open.spotify.com/track/x"})

        updated = TrackService(db).update_track(track.id, TrackPatch(bpm=127, notes="Edit"))

        assert updated.bpm == 127
        assert updated.notes == "Edit"
        assert updated.title == "Strobe"
        assert updated.subgenre == "Prog"
        assert updated.links == {"spotify": "https://open.spotify.com/track/x"}

    def test_update_missing_raises(self, db):
        with pytest.raises(NotFoundError):
            TrackService(db).update_track("nope", TrackPatch(bpm=120))

    def test_invalid_update_changes_nothing(self, db, make_track):
        track = make_track()

        with pytest.raises(FieldValidationError):
            TrackService(db).update_track(track.id, TrackPatch(bpm=127, key="Z9"))

        assert TrackService(db).get_track(track.id).bpm == 128


class TestDeleteTrack:
    """Test delete_track and its cascade into sets."""

    def test_delete_removes_track_from_every_set(self, db, make_track):
        """After deletion no set lists the track id."""
        doomed = make_track(title="Doomed")
        survivor = make_track(title="Survivor")
        set_service = SetService(db)
        first = set_service.create_set(SetFields(name="First", track_ids=[doomed.id, survivor.id]))
        second = set_service.create_set(SetFields(name="Second", track_ids=[survivor.id, doomed.id]))
        third = set_service.create_set(SetFields(name="Third", track_ids=[doomed.id]))
        untouched = set_service.create_set(SetFields(name="Untouched", track_ids=[survivor.id]))

        TrackService(db).delete_track(doomed.id)
        db.expire_all()

        assert db.get(DJSet, first.id).track_ids == [survivor.id]
        assert db.get(DJSet, second.id).track_ids == [survivor.id]
        assert db.get(DJSet, third.id).track_ids == []
        assert db.get(DJSet, untouched.id).track_ids == [survivor.id]
        for dj_set in (first, second, third):
            assert set_service.get_set(dj_set.id).missing_track_ids == []

    def test_delete_track_in_no_sets(self, db, make_track):
        track = make_track()

        TrackService(db).delete_track(track.id)

        assert TrackService(db).list_tracks() == []

    def test_delete_missing_raises(self, db):
        with pytest.raises(NotFoundError):
            TrackService(db).delete_track("nope")
