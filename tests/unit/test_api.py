"""Tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from chuuana import __version__
from chuuana.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy", "version": __version__}

    def test_tracks(self, client):
        tracks = client.get("/api/tracks").json()["tracks"]
        assert len(tracks) == 10
        assert "中山" in tracks and "小倉" in tracks


class TestAnalyzeEndpoint:
    def test_picks(self, client, multi_race_paste):
        resp = client.post("/api/analyze", json={"text": multi_race_paste})
        assert resp.status_code == 200
        data = resp.json()
        assert data["outcome"] == "picks"
        assert [c["key"] for c in data["recommended"]] == ["中山_1_アオゾラ", "阪神_2_ホシゾラ"]
        assert data["recommended"][0]["race_label"] == "中山 1R"
        assert data["recommended"][0]["place_range_text"] == "3.1–4.5"
        assert data["stats"]["detected_headers"] == 3
        assert data["rank_counts"] == {"S": 1, "A": 1, "B": 0, "C": 0}

    def test_unparsed(self, client):
        data = client.post("/api/analyze", json={"text": "こんにちは"}).json()
        assert data["outcome"] == "unparsed"
        assert data["cards"] == []

    def test_missing_text(self, client):
        assert client.post("/api/analyze", json={}).status_code == 422


def _card_payload():
    return {
        "rank": "B",
        "race_no": 7,
        "track_name": "中山",
        "horse_name": "タイコウ",
        "win_popularity": 5,
        "win_odds": 3.2,
        "place_range_text": "推定2.0+",
        "place_low": 2.0,
        "tags": ["中穴(5人気)", "相手弱め", "要更新"],
    }


class TestCorrectEndpoint:
    def test_upgrade(self, client):
        resp = client.post("/api/correct", json={"card": _card_payload(), "text": "タイコウ 複勝2.2-3.0"})
        assert resp.status_code == 200
        card = resp.json()["card"]
        assert card["rank"] == "A"
        assert card["place_range_text"] == "2.2–3.0"
        assert card["tags"] == ["中穴(5人気)", "妙味あり", "相手弱め"]
        assert card["key"] == "中山_7_タイコウ"
        assert resp.json()["update"]["place_low"] == 2.2

    def test_empty_text(self, client):
        resp = client.post("/api/correct", json={"card": _card_payload(), "text": "  "})
        assert resp.status_code == 400

    def test_no_pick_card_rejected(self, client):
        payload = {"rank": "C", "race_no": 7, "track_name": "中山", "reason": "相手強すぎ（1・2番人気が2頭以上）"}
        resp = client.post("/api/correct", json={"card": payload, "text": "複勝3.1-4.0"})
        assert resp.status_code == 400
        assert "見送り" in resp.json()["detail"]

    def test_range_not_found(self, client):
        resp = client.post("/api/correct", json={"card": _card_payload(), "text": "タイコウ 5人気"})
        assert resp.status_code == 422
        assert "複勝レンジ" in resp.json()["detail"]

    def test_race_no_out_of_range(self, client):
        payload = _card_payload() | {"race_no": 13}
        resp = client.post("/api/correct", json={"card": payload, "text": "タイコウ 複勝2.2-3.0"})
        assert resp.status_code == 422
