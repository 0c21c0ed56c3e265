"""Tests for the review API."""

import pytest
from fastapi.testclient import TestClient

import scoresheet_ocr.app as service
from scoresheet_ocr.app import app
from scoresheet_ocr.review import ReviewSession

from conftest import UndoFailsOracle


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _tokens(*texts: str, confidence: float = 0.95) -> list[dict]:
    return [{"text": t, "confidence": confidence, "index": i} for i, t in enumerate(texts)]


class TestService:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_transcribe(self, client: TestClient) -> None:
        response = client.post("/api/transcribe", json={"tokens": _tokens("e4", "e5", "N f3", "zz9")})
        assert response.status_code == 200
        body = response.json()
        assert [m["source"] for m in body["moves"]] == ["direct", "direct", "direct", "manual-required"]
        assert body["moves"][3]["confidence"] == "failed"
        assert body["moves"][3]["legal_moves"]
        assert body["history"] == ["e4", "e5", "Nf3"]
        assert body["needs_review"] == 1
        assert body["result"] == "*"

    def test_rejects_bad_confidence(self, client: TestClient) -> None:
        response = client.post("/api/transcribe", json={"tokens": [{"text": "e4", "confidence": 1.5}]})
        assert response.status_code == 422

    def test_rejects_bad_start_position(self, client: TestClient) -> None:
        response = client.post("/api/transcribe", json={"tokens": [], "start_fen": "not a fen"})
        assert response.status_code == 400

    def test_transcribe_text(self, client: TestClient) -> None:
        response = client.post("/api/transcribe-text", json={"text": "1. e4 e5 2. Nf3 8c5", "confidence": 0.95})
        assert response.status_code == 200
        moves = response.json()["moves"]
        assert [m["move"] for m in moves] == ["e4", "e5", "Nf3", "Bc5"]
        assert moves[3]["source"] == "disambiguation"

    def test_correct_then_resolve_from(self, client: TestClient) -> None:
        client.post("/api/transcribe", json={"tokens": _tokens("e4", "zz9", "Nf3", "Nc6")})

        response = client.post("/api/correct", json={"index": 1, "move": "e5"})
        assert response.status_code == 200
        body = response.json()
        assert body["moves"][1]["move"] == "e5"
        assert body["moves"][1]["confidence"] == "high"
        assert body["history"] == ["e4", "e5"]

        response = client.post("/api/resolve-from", json={"index": 2})
        assert response.status_code == 200
        assert response.json()["history"] == ["e4", "e5", "Nf3", "Nc6"]

    def test_correct_out_of_range(self, client: TestClient) -> None:
        client.post("/api/transcribe", json={"tokens": _tokens("e4")})
        response = client.post("/api/correct", json={"index": 5, "move": "e5"})
        assert response.status_code == 404

    def test_legal_moves(self, client: TestClient) -> None:
        client.post("/api/transcribe", json={"tokens": _tokens("e4")})
        response = client.get("/api/legal-moves", params={"index": 0})
        assert response.status_code == 200
        assert len(response.json()["legal_moves"]) == 20

        live = client.get("/api/legal-moves").json()
        assert live["index"] == 1
        assert "e5" in live["legal_moves"]

        assert client.get("/api/legal-moves", params={"index": 9}).status_code == 404

    def test_plies_after_failed_ply_stay_unplayed(self, client: TestClient) -> None:
        body = client.post("/api/transcribe", json={"tokens": _tokens("e4", "zz9", "Nf3", "Nc6")}).json()
        assert [m["source"] for m in body["moves"]] == ["direct"] + ["manual-required"] * 3
        assert body["moves"][2]["legal_moves"] == []
        assert body["history"] == ["e4"]

        live = client.get("/api/legal-moves").json()
        assert live["index"] == 1
        assert "e5" in live["legal_moves"]
        assert client.get("/api/legal-moves", params={"index": 3}).json()["legal_moves"] == []

    def test_rules_engine_failure_discards_review(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            service,
            "ReviewSession",
            lambda start_fen=None: ReviewSession(start_fen, oracle=UndoFailsOracle(start_fen)),
        )
        response = client.post("/api/transcribe", json={"tokens": _tokens("e4", "e5")})
        assert response.status_code == 500
        assert service.REVIEW.moves == []
        assert service.REVIEW.game.history == ()

    def test_reset(self, client: TestClient) -> None:
        client.post("/api/transcribe", json={"tokens": _tokens("e4", "e5")})
        body = client.post("/api/reset").json()
        assert body["moves"] == []
        assert body["history"] == []

    def test_upload_rejects_unknown_format(self, client: TestClient) -> None:
        response = client.post("/api/upload", files={"file": ("sheet.gif", b"GIF89a", "image/gif")})
        assert response.status_code == 415
