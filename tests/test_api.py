"""Tests for the HTTP API."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from yogaflow.api import create_app
from yogaflow.backend.openai_backend import OpenAIBackend
from yogaflow.config import LLMSettings
from yogaflow.pipeline.fallback import build_fallback_sequence
from yogaflow.store import MemoryStore

GENERATE = {
    "duration": 30,
    "difficulty": "beginner",
    "style": "hatha",
    "focusArea": "full body",
}

PARAMS = {"duration": 30, "difficulty": "beginner", "style": "hatha", "focus": "full body"}

STRUCTURE = {
    "name": "Evening Arc",
    "description": "Wind down",
    "segments": [
        {"name": "Arrive", "description": "Settle", "duration_minutes": 5, "intensity": 2},
        {"name": "Flow", "description": "Move", "duration_minutes": 20, "intensity": "7/10"},
        {"name": "Rest", "description": "Relax", "duration_minutes": 5},
    ],
}


@pytest.fixture
def stored(memory_store, catalog, params):
    """A sequence owned by user-1 already in the store."""
    sequence = build_fallback_sequence(params, catalog, user_id="user-1")
    memory_store.save_sequence(sequence)
    return sequence


class TestHealthAndPoses:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["poses"] == 16
        assert body["ai_available"] is True

    def test_list_poses(self, client):
        poses = client.get("/api/poses").json()["poses"]
        assert [p["id"] for p in poses][:3] == ["p01", "p02", "p03"]

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("difficulty=advanced", ["p15"]),
            ("category=standing", ["p01", "p05", "p06", "p07", "p09"]),
            ("category=Core&difficulty=intermediate", ["p16"]),
        ],
    )
    def test_filter_poses(self, client, query, expected):
        poses = client.get(f"/api/poses?{query}").json()["poses"]
        assert [p["id"] for p in poses] == expected

    def test_get_pose(self, client):
        resp = client.get("/api/poses/p01")
        assert resp.json()["pose"]["english_name"] == "Mountain Pose"

    def test_missing_pose(self, client):
        resp = client.get("/api/poses/nope")
        assert resp.status_code == 404
        assert "nope" in resp.json()["error"]


class TestGenerateSequence:
    def test_rule_based(self, client, memory_store):
        resp = client.post("/api/generate-sequence", json={**GENERATE, "useAi": False})
        assert resp.status_code == 200
        sequence = resp.json()["sequence"]
        assert [p["name"] for p in sequence["phases"]] == ["Warm Up", "Main Sequence", "Cool Down"]
        assert sequence["is_ai_generated"] is False
        assert memory_store.get_sequence(sequence["id"]).title == sequence["title"]

    def test_with_ai(self, client, user_headers):
        resp = client.post("/api/generate-sequence", json=GENERATE, headers=user_headers)
        sequence = resp.json()["sequence"]
        assert sequence["is_ai_generated"] is True
        assert sequence["user_id"] == "user-1"

    def test_body_user_id_used_without_header(self, client):
        resp = client.post("/api/generate-sequence", json={**GENERATE, "userId": "user-9"})
        assert resp.json()["sequence"]["user_id"] == "user-9"

    def test_user_id_mismatch(self, client, user_headers):
        resp = client.post(
            "/api/generate-sequence", json={**GENERATE, "userId": "user-2"}, headers=user_headers,
        )
        assert resp.status_code == 403

    @pytest.mark.parametrize(
        "change",
        [{"duration": 120}, {"duration": 0}, {"style": "acro"}, {"focusArea": "toes"}],
    )
    def test_invalid_parameters(self, client, change):
        resp = client.post("/api/generate-sequence", json={**GENERATE, **change})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Invalid request parameters"
        assert body["details"]

    def test_unparseable_model_output(self, client, mock_backend):
        mock_backend.queue("I'd rather not")
        resp = client.post("/api/generate-sequence", json=GENERATE)
        assert resp.status_code == 502
        assert resp.json()["details"] == "I'd rather not"

    def test_undecodable_upstream_reply(self, config, memory_store):
        backend = OpenAIBackend(LLMSettings(api_key="k", base_url="https://llm.test/v1"))
        request = httpx.Request("POST", "https://llm.test/v1/chat/completions")
        app = create_app(config, store=memory_store, backend=backend)
        with patch(
            "httpx.AsyncClient.get", new_callable=AsyncMock,
            return_value=httpx.Response(200, json={"data": []}, request=request),
        ), patch(
            "httpx.AsyncClient.post", new_callable=AsyncMock,
            return_value=httpx.Response(200, text="<html>gateway</html>", request=request),
        ), TestClient(app) as client:
            resp = client.post("/api/generate-sequence", json=GENERATE)
        assert resp.status_code == 502
        assert "unreadable" in resp.json()["error"]
        assert memory_store.list_sequences() == []

    def test_empty_catalog(self, config, mock_backend):
        app = create_app(config, store=MemoryStore(), backend=mock_backend)
        with TestClient(app) as client:
            resp = client.post("/api/generate-sequence", json=GENERATE)
        assert resp.status_code == 404
        assert "error" in resp.json()


class TestCues:
    def test_generate_cues(self, client):
        resp = client.post("/api/generate-cues", json={"poseId": "p05", "side": "left"})
        assert resp.status_code == 200
        assert resp.json()["cues"].startswith("Root down")

    def test_missing_pose_id(self, client):
        assert client.post("/api/generate-cues", json={}).status_code == 400

    def test_unknown_pose(self, client):
        assert client.post("/api/generate-cues", json={"poseId": "nope"}).status_code == 404


class TestTwoPhase:
    def test_structure_requires_user(self, client):
        resp = client.post("/api/sequence/structure", json={"params": PARAMS})
        assert resp.status_code == 401

    def test_structure(self, client, user_headers, memory_store):
        resp = client.post("/api/sequence/structure", json={"params": PARAMS}, headers=user_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["structure"]["segments"]) == 3
        assert "sequenceId" not in body
        assert memory_store.list_sequences() == []

    def test_structure_saved_as_skeleton(self, client, user_headers, memory_store):
        resp = client.post(
            "/api/sequence/structure", json={"params": PARAMS, "save": True}, headers=user_headers,
        )
        skeleton = memory_store.get_sequence(resp.json()["sequenceId"])
        assert skeleton.structure_only
        assert skeleton.user_id == "user-1"

    def test_fill_poses(self, client, user_headers):
        resp = client.post(
            "/api/sequence/fill-poses",
            json={"structure": STRUCTURE, "params": PARAMS},
            headers=user_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["sequence"]["user_id"] == "user-1"

    def test_fill_poses_requires_user(self, client):
        resp = client.post(
            "/api/sequence/fill-poses", json={"structure": STRUCTURE, "params": PARAMS},
        )
        assert resp.status_code == 401

    def test_fill_poses_invalid_params(self, client, user_headers):
        resp = client.post(
            "/api/sequence/fill-poses",
            json={"structure": STRUCTURE, "params": {**PARAMS, "duration": 120}},
            headers=user_headers,
        )
        assert resp.status_code == 400

    def test_complete_poses(self, client, user_headers, memory_store):
        created = client.post(
            "/api/sequence/structure", json={"params": PARAMS, "save": True}, headers=user_headers,
        ).json()
        sequence_id = created["sequenceId"]
        skeleton = memory_store.get_sequence(sequence_id)

        resp = client.post(
            "/api/sequences/complete-poses",
            json={
                "sequenceId": sequence_id,
                "difficulty": "beginner",
                "style": "hatha",
                "focus": "full body",
                "structure": created["structure"],
            },
            headers=user_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == sequence_id
        assert body["structure_only"] is False
        assert [p["id"] for p in body["phases"]] == [p.id for p in skeleton.phases]
        assert memory_store.get_sequence(sequence_id).pose_count == 7

    def test_complete_poses_other_user(self, client, user_headers):
        created = client.post(
            "/api/sequence/structure", json={"params": PARAMS, "save": True}, headers=user_headers,
        ).json()
        resp = client.post(
            "/api/sequences/complete-poses",
            json={
                "sequenceId": created["sequenceId"],
                "difficulty": "beginner",
                "style": "hatha",
                "focus": "full body",
                "structure": STRUCTURE,
            },
            headers={"X-User-Id": "user-2"},
        )
        assert resp.status_code == 403


class TestSequences:
    def test_list_requires_user(self, client):
        assert client.get("/api/sequences").status_code == 401

    def test_list_own(self, client, user_headers, stored, memory_store, catalog, params):
        memory_store.save_sequence(build_fallback_sequence(params, catalog, user_id="user-2"))
        sequences = client.get("/api/sequences", headers=user_headers).json()["sequences"]
        assert [s["id"] for s in sequences] == [stored.id]

    def test_create(self, client, user_headers, stored, memory_store):
        payload = stored.model_dump(mode="json")
        payload["id"] = "client-built"
        payload["user_id"] = "someone-else"
        resp = client.post("/api/sequences", json=payload, headers=user_headers)
        assert resp.status_code == 201
        assert memory_store.get_sequence("client-built").user_id == "user-1"

    def test_get(self, client, user_headers, stored):
        resp = client.get(f"/api/sequences/{stored.id}", headers=user_headers)
        assert resp.json()["sequence"]["title"] == stored.title

    def test_get_requires_owner(self, client, stored):
        assert client.get(f"/api/sequences/{stored.id}").status_code == 401
        resp = client.get(f"/api/sequences/{stored.id}", headers={"X-User-Id": "user-2"})
        assert resp.status_code == 403

    def test_get_ownerless(self, client, memory_store, catalog, params):
        sequence = build_fallback_sequence(params, catalog)
        memory_store.save_sequence(sequence)
        assert client.get(f"/api/sequences/{sequence.id}").status_code == 200

    def test_get_missing(self, client, user_headers):
        assert client.get("/api/sequences/nope", headers=user_headers).status_code == 404

    def test_patch(self, client, user_headers, stored, memory_store):
        resp = client.patch(
            f"/api/sequences/{stored.id}",
            json={"title": "Sunday Flow", "isFavorite": True},
            headers=user_headers,
        )
        assert resp.status_code == 200
        saved = memory_store.get_sequence(stored.id)
        assert saved.title == "Sunday Flow"
        assert saved.is_favorite

    def test_patch_by_other_user(self, client, stored):
        resp = client.patch(
            f"/api/sequences/{stored.id}", json={"title": "Mine now"},
            headers={"X-User-Id": "user-2"},
        )
        assert resp.status_code == 403
        assert client.patch(f"/api/sequences/{stored.id}", json={}).status_code == 401

    def test_delete(self, client, user_headers, stored):
        resp = client.delete(f"/api/sequences/{stored.id}", headers=user_headers)
        assert resp.status_code == 204
        resp = client.get(f"/api/sequences/{stored.id}", headers=user_headers)
        assert resp.status_code == 404


class TestEditor:
    def test_add_pose(self, client, user_headers, stored, memory_store):
        phase_id = stored.phases[0].id
        resp = client.post(
            f"/api/sequences/{stored.id}/phases/{phase_id}/poses",
            json={"poseId": "p14", "index": 0, "durationSeconds": 60},
            headers=user_headers,
        )
        assert resp.status_code == 201
        poses = resp.json()["sequence"]["phases"][0]["poses"]
        assert poses[0]["pose_id"] == "p14"
        assert [p["position"] for p in poses] == [0, 1, 2, 3]
        assert memory_store.get_sequence(stored.id).phases[0].poses[0].duration_seconds == 60

    def test_add_unknown_pose(self, client, user_headers, stored):
        resp = client.post(
            f"/api/sequences/{stored.id}/phases/{stored.phases[0].id}/poses",
            json={"poseId": "nope"},
            headers=user_headers,
        )
        assert resp.status_code == 404

    def test_update_pose(self, client, user_headers, stored):
        placement = stored.phases[1].poses[1]
        resp = client.patch(
            f"/api/sequences/{stored.id}/poses/{placement.id}",
            json={"durationSeconds": 75, "cues": "Sink the hips"},
            headers=user_headers,
        )
        assert resp.status_code == 200
        updated = resp.json()["sequence"]["phases"][1]["poses"][1]
        assert updated["duration_seconds"] == 75
        assert updated["cues"] == "Sink the hips"
        assert updated["side"] == "left"

    def test_update_pose_invalid_duration(self, client, user_headers, stored):
        placement = stored.phases[0].poses[0]
        resp = client.patch(
            f"/api/sequences/{stored.id}/poses/{placement.id}",
            json={"durationSeconds": -1},
            headers=user_headers,
        )
        assert resp.status_code == 400

    def test_move_pose(self, client, user_headers, stored):
        placement = stored.phases[2].poses[0]
        resp = client.post(
            f"/api/sequences/{stored.id}/poses/{placement.id}/move",
            json={"index": 0, "phaseId": stored.phases[0].id},
            headers=user_headers,
        )
        phases = resp.json()["sequence"]["phases"]
        assert phases[0]["poses"][0]["id"] == placement.id
        assert len(phases[2]["poses"]) == 1

    def test_remove_pose(self, client, user_headers, stored):
        placement = stored.phases[0].poses[0]
        resp = client.delete(
            f"/api/sequences/{stored.id}/poses/{placement.id}", headers=user_headers,
        )
        poses = resp.json()["sequence"]["phases"][0]["poses"]
        assert [p["position"] for p in poses] == [0, 1]

    def test_phase_operations(self, client, user_headers, stored):
        base = f"/api/sequences/{stored.id}/phases"
        resp = client.post(
            base, json={"name": "Pranayama", "index": 0, "intensity": 1}, headers=user_headers,
        )
        assert resp.status_code == 201
        phases = resp.json()["sequence"]["phases"]
        assert [p["name"] for p in phases][0] == "Pranayama"
        assert phases[1]["poses"][0]["position"] == 100

        ids = [p["id"] for p in reversed(phases)]
        resp = client.post(f"{base}/reorder", json={"phaseIds": ids}, headers=user_headers)
        assert [p["id"] for p in resp.json()["sequence"]["phases"]] == ids

        resp = client.delete(f"{base}/{ids[0]}", headers=user_headers)
        assert len(resp.json()["sequence"]["phases"]) == 3

    def test_reorder_unknown_phase(self, client, user_headers, stored):
        resp = client.post(
            f"/api/sequences/{stored.id}/phases/reorder",
            json={"phaseIds": ["nope"]},
            headers=user_headers,
        )
        assert resp.status_code == 404

    def test_reorder_incomplete(self, client, user_headers, stored):
        resp = client.post(
            f"/api/sequences/{stored.id}/phases/reorder",
            json={"phaseIds": [stored.phases[0].id]},
            headers=user_headers,
        )
        assert resp.status_code == 400
