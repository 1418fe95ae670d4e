"""Tests for sets API endpoints."""
import pytest

from conftest import STROBE


@pytest.fixture
def track(client):
    return client.post("/api/tracks", json=STROBE).json()


@pytest.fixture
def dj_set(client):
    response = client.post("/api/sets", json={"name": "Peak Hour"})
    assert response.status_code == 201, response.text
    return response.json()


def make_track(client, title):
    return client.post("/api/tracks", json={**STROBE, "title": title}).json()


class TestSetCrud:
    """Test set create/list/get/update/delete."""

    def test_create_defaults_to_no_tracks(self, dj_set):
        assert dj_set["name"] == "Peak Hour"
        assert dj_set["tracks"] == []

    def test_create_without_name_is_400(self, client):
        assert client.post("/api/sets", json={"description": "no name"}).status_code == 400

    def test_list_returns_track_ids(self, client, track):
        client.post("/api/sets", json={"name": "With track", "tracks": [track["id"]]})

        sets = client.get("/api/sets").json()

        assert sets[0]["tracks"] == [track["id"]]

    def test_update_returns_resolved_set(self, client, dj_set, track):
        client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": track["id"]})

        response = client.put(f"/api/sets/{dj_set['id']}", json={"description": "Main room"})

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Peak Hour"
        assert body["description"] == "Main room"
        assert body["tracks"][0]["title"] == "Strobe"

    def test_delete_set_keeps_tracks(self, client, dj_set, track):
        client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": track["id"]})

        response = client.delete(f"/api/sets/{dj_set['id']}")

        assert response.json() == {"message": "Set deleted"}
        assert client.get(f"/api/sets/{dj_set['id']}").status_code == 404
        assert client.get(f"/api/tracks/{track['id']}").status_code == 200

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/sets/nope"),
        ("delete", "/api/sets/nope"),
        ("delete", "/api/sets/nope/tracks/whatever"),
    ])
    def test_unknown_set_is_404(self, client, method, path):
        assert getattr(client, method)(path).status_code == 404

    def test_update_unknown_set_is_404(self, client):
        assert client.put("/api/sets/nope", json={"name": "x"}).status_code == 404


class TestMembership:
    """Test adding, removing and reordering tracks in a set."""

    def test_peak_hour_scenario(self, client, dj_set, track):
        """Add a track, read it back resolved, delete it, read an empty set."""
        client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": track["id"]})

        body = client.get(f"/api/sets/{dj_set['id']}").json()
        assert len(body["tracks"]) == 1
        assert body["tracks"][0]["title"] == "Strobe"
        assert body["tracks"][0]["missing"] is False

        client.delete(f"/api/tracks/{track['id']}")

        assert client.get(f"/api/sets/{dj_set['id']}").json()["tracks"] == []

    def test_add_twice_keeps_one_entry(self, client, dj_set, track):
        url = f"/api/sets/{dj_set['id']}/tracks"
        client.post(url, json={"trackId": track["id"]})

        response = client.post(url, json={"trackId": track["id"]})

        assert response.status_code == 200
        assert [t["id"] for t in response.json()["tracks"]] == [track["id"]]

    def test_add_unknown_track_is_404(self, client, dj_set):
        response = client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": "nope"})
        assert response.status_code == 404

    def test_add_to_unknown_set_is_404(self, client, track):
        response = client.post("/api/sets/nope/tracks", json={"trackId": track["id"]})
        assert response.status_code == 404

    def test_remove_absent_track_is_noop(self, client, dj_set, track):
        client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": track["id"]})

        response = client.delete(f"/api/sets/{dj_set['id']}/tracks/not-in-set")

        assert response.status_code == 200
        assert [t["id"] for t in response.json()["tracks"]] == [track["id"]]

    def test_remove_track(self, client, dj_set, track):
        client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": track["id"]})

        response = client.delete(f"/api/sets/{dj_set['id']}/tracks/{track['id']}")

        assert response.json()["tracks"] == []

    def test_reorder(self, client, dj_set):
        a, b, c = (make_track(client, title) for title in ("A", "B", "C"))
        for t in (a, b, c):
            client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": t["id"]})

        response = client.put(f"/api/sets/{dj_set['id']}/reorder", json={"trackIds": [c["id"], a["id"], b["id"]]})

        assert response.status_code == 200
        assert [t["title"] for t in response.json()["tracks"]] == ["C", "A", "B"]
        assert [t["title"] for t in client.get(f"/api/sets/{dj_set['id']}").json()["tracks"]] == ["C", "A", "B"]

    def test_reorder_unknown_set_is_404(self, client):
        assert client.put("/api/sets/nope/reorder", json={"trackIds": []}).status_code == 404

    def test_dangling_reference_is_placeholder(self, client):
        """An id that does not resolve comes back as an explicit placeholder."""
        created = client.post("/api/sets", json={"name": "Ghostly", "tracks": ["ghost-id"]}).json()

        body = client.get(f"/api/sets/{created['id']}").json()

        assert body["tracks"] == [
            {"id": "ghost-id", "title": "Unknown Track", "artist": "Unknown Artist", "missing": True}
        ]

    def test_available_tracks(self, client, dj_set, track):
        other = make_track(client, "Other")
        client.post(f"/api/sets/{dj_set['id']}/tracks", json={"trackId": track["id"]})

        response = client.get(f"/api/sets/{dj_set['id']}/available-tracks")

        assert [t["id"] for t in response.json()] == [other["id"]]
