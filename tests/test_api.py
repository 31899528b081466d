"""
HTTP tests against the FastAPI app with stubbed collaborators.
"""
import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_controller, get_registry
from app.main import app

PROFILE = {
    "industry_sector": "Semiconductors",
    "country": "Taiwan",
    "region": "Hsinchu",
    "water_disruptions_past_5y": True,
}


@pytest.fixture
def client(controller, registry):
    app.dependency_overrides[get_controller] = lambda: controller
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_in_review(client) -> str:
    resp = client.post("/v1/assessments", json={"profile": PROFILE})
    assert resp.status_code == 201
    assert resp.json()["state"] == "review"
    return resp.json()["session_id"]


class TestRiskEndpoint:
    def test_evaluate(self, client):
        resp = client.post("/v1/risk/evaluate", json=PROFILE)

        assert resp.status_code == 200
        body = resp.json()
        assert body["risk_profile"]["physical"]["score"] == 75
        assert body["risk_profile"]["physical_lookup_tier"] == "region match"
        assert body["profile"]["provenance"]["current_treatment"] == "inferred"
        assert len(body["recommendations"]) <= 4
        assert body["benchmark"]["status"] == "average"

    def test_missing_country(self, client):
        resp = client.post("/v1/risk/evaluate", json={"industry_sector": "Mining"})
        assert resp.status_code == 422

    def test_unknown_vocabulary_value(self, client):
        resp = client.post("/v1/risk/evaluate", json={**PROFILE, "current_treatment": "Partial"})
        assert resp.status_code == 422

    def test_health(self, client):
        resp = client.get("/v1/risk/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestAssessmentEndpoints:
    def test_create_with_description(self, client, extractor):
        resp = client.post(
            "/v1/assessments",
            json={"description": "Two chip fabs in Hsinchu that struggled through the 2021 drought."},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["state"] == "review"
        assert body["input_mode"] == "free_text"
        assert len(extractor.calls) == 1

    def test_create_empty_then_submit(self, client):
        resp = client.post("/v1/assessments")
        assert resp.status_code == 201
        session_id = resp.json()["session_id"]
        assert resp.json()["state"] == "input"

        resp = client.post(f"/v1/assessments/{session_id}/submit", json={"profile": PROFILE})
        assert resp.status_code == 200
        assert resp.json()["state"] == "review"

    def test_short_description_stays_in_input(self, client):
        resp = client.post("/v1/assessments", json={"description": "a fab"})
        assert resp.status_code == 201
        assert resp.json()["state"] == "input"
        assert resp.json()["error_message"]

    def test_submit_needs_one_input(self, client):
        session_id = client.post("/v1/assessments").json()["session_id"]
        resp = client.post(f"/v1/assessments/{session_id}/submit", json={})
        assert resp.status_code == 422

    def test_submit_in_review_conflicts(self, client):
        session_id = _create_in_review(client)
        resp = client.post(f"/v1/assessments/{session_id}/submit", json={"profile": PROFILE})
        assert resp.status_code == 409

    def test_unknown_session(self, client):
        assert client.get("/v1/assessments/nope").status_code == 404

    def test_edit_field(self, client):
        session_id = _create_in_review(client)
        resp = client.patch(f"/v1/assessments/{session_id}/fields", json={"field": "region", "value": "Taichung"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["result"]["profile"]["region"] == "Taichung"
        assert body["result"]["profile"]["provenance"]["region"] == "stated"

    def test_edit_unknown_field(self, client):
        session_id = _create_in_review(client)
        resp = client.patch(f"/v1/assessments/{session_id}/fields", json={"field": "ceo", "value": "x"})
        assert resp.status_code == 422

    def test_edit_invalid_value(self, client):
        session_id = _create_in_review(client)
        resp = client.patch(
            f"/v1/assessments/{session_id}/fields",
            json={"field": "facilities_count", "value": -1},
        )
        assert resp.status_code == 422

    def test_save(self, client, store):
        session_id = _create_in_review(client)
        resp = client.post(f"/v1/assessments/{session_id}/save")

        assert resp.status_code == 200
        assert resp.json()["state"] == "complete"
        assert resp.json()["assessment_id"] in store.records

    def test_save_failure_keeps_result(self, client, store):
        session_id = _create_in_review(client)
        store.fail = True

        resp = client.post(f"/v1/assessments/{session_id}/save")
        assert resp.status_code == 503

        body = client.get(f"/v1/assessments/{session_id}").json()
        assert body["state"] == "review"
        assert body["result"] is not None

    def test_reset(self, client):
        session_id = _create_in_review(client)
        resp = client.post(f"/v1/assessments/{session_id}/reset")
        assert resp.json()["state"] == "input"
        assert resp.json()["result"] is None

    def test_abandon(self, client):
        session_id = _create_in_review(client)
        assert client.delete(f"/v1/assessments/{session_id}").status_code == 204
        assert client.get(f"/v1/assessments/{session_id}").status_code == 404
