"""Tests for tracks API endpoints."""
from conftest import STROBE


def create(client, **overrides):
    response = client.post("/api/tracks", json={**STROBE, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTrack:
    """Test POST /api/tracks."""

    def test_create_returns_entity_with_id(self, client):
        body = create(client, links={"spotify": "https://open.spotify.com/track/abc"})

        assert body["id"]
        assert body["title"] == "Strobe"
        assert body["bpm"] == 128
        assert body["links"]["spotify"] == "https://open.spotify.com/track/abc"
        assert body["links"]["youtube"] is None
        assert "createdAt" in body and "updatedAt" in body

    def test_missing_required_fields_is_400(self, client):
        response = client.post("/api/tracks", json={"title": "Only a title"})

        assert response.status_code == 400
        errors = response.json()["detail"]["errors"]
        assert {"artist", "bpm", "key", "genre", "duration"} <= set(errors)

    def test_out_of_range_bpm_is_400(self, client):
        response = client.post("/api/tracks", json={**STROBE, "bpm": 1200})
        assert response.status_code == 400

    def test_malformed_body_is_400(self, client):
        """Type errors caught by request parsing are also client errors."""
        response = client.post("/api/tracks", json={**STROBE, "bpm": "fast"})
        assert response.status_code == 400

    def test_unknown_link_platform_is_400(self, client):
        response = client.post("/api/tracks", json={**STROBE, "links": {"bandcamp": "x"}})
        assert response.status_code == 400


class TestReadTracks:
    """Test GET /api/tracks and /api/tracks/{id}."""

    def test_get_round_trip(self, client):
        created = create(client)

        response = client.get(f"/api/tracks/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_is_404(self, client):
        response = client.get("/api/tracks/does-not-exist")
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_bpm_filter_scenario(self, client):
        """Only the 128 BPM track is inside 125-130."""
        for title, bpm in (("Slow", 120), ("Mid", 128), ("Fast", 132)):
            create(client, title=title, bpm=bpm)

        response = client.get("/api/tracks", params={"bpmMin": 125, "bpmMax": 130})

        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["Mid"]

    def test_combined_query_params(self, client):
        create(client, title="Match", artist="Adam Beyer", key="5A", genre="Techno")
        create(client, title="Wrong genre", artist="Adam Beyer", key="5A", genre="House")

        response = client.get("/api/tracks", params={"search": "beyer", "key": "5A", "genre": "Techno"})

        assert [t["title"] for t in response.json()] == ["Match"]

    def test_no_filters_lists_everything(self, client):
        create(client, title="One")
        create(client, title="Two")

        assert len(client.get("/api/tracks").json()) == 2

    def test_bad_bpm_param_is_400(self, client):
        assert client.get("/api/tracks", params={"bpmMin": "low"}).status_code == 400


class TestUpdateTrack:
    """Test PUT /api/tracks/{id}."""

    def test_partial_update(self, client):
        created = create(client, notes="Original")

        response = client.put(f"/api/tracks/{created['id']}", json={"bpm": 126})

        assert response.status_code == 200
        body = response.json()
        assert body["bpm"] == 126
        assert body["notes"] == "Original"
        assert body["title"] == "Strobe"

    def test_null_clears_optional_field(self, client):
        created = create(client, notes="Original")

        body = client.put(f"/api/tracks/{created['id']}", json={"notes": None}).json()

        assert body["notes"] is None

    def test_update_unknown_is_404(self, client):
        assert client.put("/api/tracks/nope", json={"bpm": 126}).status_code == 404

    def test_invalid_update_is_400(self, client):
        created = create(client)
        assert client.put(f"/api/tracks/{created['id']}", json={"key": "99Z"}).status_code == 400


class TestDeleteTrack:
    """Test DELETE /api/tracks/{id}."""

    def test_delete_confirms(self, client):
        created = create(client)

        response = client.delete(f"/api/tracks/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Track deleted"}
        assert client.get(f"/api/tracks/{created['id']}").status_code == 404

    def test_delete_unknown_is_404(self, client):
        assert client.delete("/api/tracks/nope").status_code == 404
