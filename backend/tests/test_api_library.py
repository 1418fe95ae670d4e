"""Tests for catalog, stats and health endpoints."""
from conftest import STROBE


class TestCatalog:
    """Test GET /api/catalog."""

    def test_catalog_lists_vocabularies(self, client):
        body = client.get("/api/catalog").json()

        assert len(body["keys"]) == 24
        assert {"value": "8A", "label": "8A - A# Minor"} in body["keys"]
        assert "Other" in body["genres"]
        assert body["linkPlatforms"] == ["spotify", "soundcloud", "beatport", "youtube"]
        assert (body["bpmMin"], body["bpmMax"]) == (20, 999)


class TestStats:
    """Test GET /api/stats."""

    def test_empty_library(self, client):
        body = client.get("/api/stats").json()

        assert body["totalTracks"] == 0
        assert body["totalSets"] == 0
        assert body["recentTracks"] == []

    def test_counts_and_recent_items(self, client):
        for n in range(5):
            client.post("/api/tracks", json={**STROBE, "title": f"Track {n}"})
        client.post("/api/sets", json={"name": "Set"})

        body = client.get("/api/stats").json()

        assert body["totalTracks"] == 5
        assert body["totalSets"] == 1
        assert body["tracksThisMonth"] == 5
        assert len(body["recentTracks"]) == 4
        assert body["recentSets"][0]["name"] == "Set"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
