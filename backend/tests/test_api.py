import json

import pytest
from fastapi.testclient import TestClient

from api import dependencies
from api.router import limiter
from main import app
from models.schemas.layers import ALL_LAYERS

pytestmark = pytest.mark.api

client = TestClient(app)

LAYER_WEIGHTS = {
    "frontend": 0.3,
    "backend": 0.4,
    "database": 0.1,
    "cloud": 0.1,
    "devops": 0.05,
    "others": 0.05,
}


@pytest.fixture(autouse=True)
def fresh_app():
    """Every test gets empty in-memory stores and no rate limiting."""
    dependencies.clear()
    limiter.enabled = False
    yield
    limiter.enabled = True
    dependencies.clear()


def jd_payload(role="Senior Backend Engineer", layer_weights=None, **layers):
    return {
        "role": role,
        "layer_weights": layer_weights or LAYER_WEIGHTS,
        "skills": {
            layer: [{"skill": s, "weight": w} for s, w in layers.get(layer, [])]
            for layer in ALL_LAYERS
        },
    }


def create_jd(**kwargs):
    response = client.post("/jd", json=jd_payload(**kwargs))
    assert response.status_code == 201, response.text
    return response.json()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["storage_backend"] == "memory"
    assert data["dictionary_version"] == "2024.1"


class TestJDEndpoints:
    def test_create_maps_skills(self):
        data = create_jd(frontend=[("ReactJS", 0.6), ("TS", 0.4)], backend=[("Elixir", 1.0)])

        profile = data["profile"]
        assert profile["id"].startswith("jd_")
        assert [s["skill"] for s in profile["skills"]["frontend"]] == ["react", "typescript"]
        assert profile["dictionary_version"] == "2024.1"
        assert data["unknown_skills"] == ["elixir"]

    def test_weight_sum_error(self):
        weights = dict(LAYER_WEIGHTS, frontend=0.5, backend=0.3)
        response = client.post("/jd", json=jd_payload(layer_weights=weights))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "must sum to 1.0" in body["message"]

    def test_nan_weight_rejected(self):
        # Python's json module reads the bare NaN literal.
        body = json.dumps(jd_payload(layer_weights=dict(LAYER_WEIGHTS, cloud=float("nan"))))
        response = client.post("/jd", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert client.get("/jd").json() == []

    def test_empty_skill_name(self):
        response = client.post("/jd", json=jd_payload(backend=[("  ", 1.0)]))
        assert response.status_code == 400
        assert response.json()["error"] == "input_error"

    def test_crud(self):
        jd_id = create_jd(backend=[("python", 1.0)])["profile"]["id"]

        assert client.get(f"/jd/{jd_id}").json()["role"] == "Senior Backend Engineer"
        assert [p["id"] for p in client.get("/jd").json()] == [jd_id]

        response = client.put(f"/jd/{jd_id}", json=jd_payload(role="Lead Backend Engineer", backend=[("go", 1.0)]))
        assert response.status_code == 200
        assert response.json()["profile"]["role"] == "Lead Backend Engineer"

        assert client.delete(f"/jd/{jd_id}").status_code == 204
        response = client.get(f"/jd/{jd_id}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_correlation(self):
        current = create_jd(frontend=[("react", 0.6), ("typescript", 0.4)], backend=[("node", 1.0)])
        past = create_jd(frontend=[("react.js", 0.7), ("vue", 0.3)], backend=[("nodejs", 1.0)])

        response = client.get(
            "/jd/correlation",
            params={"current_id": current["profile"]["id"], "past_id": past["profile"]["id"]},
        )

        assert response.status_code == 200
        result = response.json()
        # frontend 0.6 * 0.7 * 0.3 + backend 1.0 * 0.4
        assert result["overall_score"] == pytest.approx(0.526, abs=1e-4)
        assert set(result["layer_breakdown"]) == set(ALL_LAYERS)
        assert result["layer_breakdown"]["frontend"]["missing_skills"] == ["typescript"]

    def test_correlation_missing_past(self):
        current = create_jd()
        response = client.get(
            "/jd/correlation", params={"current_id": current["profile"]["id"], "past_id": "jd_missing"}
        )
        assert response.status_code == 404
        assert "Past JD" in response.json()["message"]


class TestDictionaryEndpoints:
    def test_current_and_category(self):
        data = client.get("/dictionary/current").json()
        assert data["version"] == "2024.1"
        assert set(data["skills"]) == set(ALL_LAYERS)

        data = client.get("/dictionary/current", params={"category": "database"}).json()
        assert list(data["skills"]) == ["database"]
        assert "postgresql" in [s["name"] for s in data["skills"]["database"]]

    def test_skill_lifecycle(self):
        response = client.post("/dictionary/skills", json={"name": "Qwik", "category": "frontend"})
        assert response.status_code == 201
        added_version = response.json()["dictionary_version"]

        response = client.post("/dictionary/variations", json={"variation": "qwikjs", "canonical_name": "qwik"})
        assert response.status_code == 201
        assert client.get("/dictionary/variations/qwik").json()["variations"] == ["qwikjs"]

        response = client.put("/dictionary/skills/qwik", json={"new_name": "qwik-city", "category": "others"})
        assert response.status_code == 200
        assert client.get("/dictionary/variations/qwik-city").json()["variations"] == ["qwikjs"]

        response = client.delete("/dictionary/skills/qwik-city")
        assert response.status_code == 200
        assert client.get("/dictionary/variations/qwik-city").status_code == 404

        versions = client.get("/dictionary/versions").json()
        assert versions[0] == "2024.1"
        assert added_version in versions
        assert len(versions) == 5

    def test_duplicate_skill(self):
        response = client.post("/dictionary/skills", json={"name": "React", "category": "frontend"})
        assert response.status_code == 409
        assert response.json()["error"] == "duplicate"

    def test_invalid_category_rejected_by_schema(self):
        response = client.post("/dictionary/skills", json={"name": "flutter3", "category": "mobile"})
        assert response.status_code == 422

    def test_version_lookup(self):
        assert client.get("/dictionary/versions/2024.1").json()["version"] == "2024.1"
        response = client.get("/dictionary/versions/1999.1")
        assert response.status_code == 404

    def test_export_import_round_trip(self):
        exported = client.post("/dictionary/export").json()
        assert exported["success"]

        document = dict(exported["data"], version="2024.9")
        response = client.post("/dictionary/import", json={"data": document, "mode": "replace"})
        assert response.json()["imported_version"] == "2024.9"
        assert client.get("/health").json()["dictionary_version"] == "2024.9"

        response = client.post("/dictionary/import", json={"data": exported["data"]})
        assert response.json()["success"] is False


class TestReviewQueueEndpoints:
    def test_approve_and_reject(self):
        create_jd(backend=[("Elixir", 0.5), ("Gleam", 0.5)])

        items = client.get("/review-queue", params={"status": "pending"}).json()
        assert sorted(i["skill_name"] for i in items) == ["elixir", "gleam"]

        response = client.post(
            "/review-queue/approve", json={"skill_name": "elixir", "decision": "canonical", "category": "backend"}
        )
        assert response.status_code == 200
        assert response.json()["decision"]["canonical_name"] == "elixir"

        response = client.post("/review-queue/reject", json={"skill_name": "gleam", "reason": "too niche"})
        assert response.status_code == 200

        response = client.post("/review-queue/reject", json={"skill_name": "gleam", "reason": "again"})
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state_transition"

        assert client.get("/review-queue", params={"status": "pending"}).json() == []
        data = client.get("/dictionary/current", params={"category": "backend"}).json()
        assert "elixir" in [s["name"] for s in data["skills"]["backend"]]

    def test_approve_variation_needs_existing_canonical(self):
        create_jd(backend=[("Phoenix", 1.0)])

        response = client.post(
            "/review-queue/approve",
            json={"skill_name": "phoenix", "decision": "variation", "canonical_name": "elixir"},
        )
        assert response.status_code == 404

    def test_canonical_approval_needs_category(self):
        create_jd(backend=[("Phoenix", 1.0)])
        response = client.post("/review-queue/approve", json={"skill_name": "phoenix"})
        assert response.status_code == 400


class TestStatisticsAndResumes:
    def test_statistics(self):
        create_jd(frontend=[("react", 1.0)])
        response = client.post(
            "/resumes", json={"company": "Acme", "role": "Frontend Developer", "tech_stack": ["ReactJS", "Bun"]}
        )
        assert response.status_code == 201

        data = client.get("/statistics/skills", params={"sort_by": "name", "sort_order": "asc"}).json()

        assert data["success"]
        names = [s["skill_name"] for s in data["statistics"]]
        assert names == ["bun", "react"]
        react = data["statistics"][1]
        assert react["total_usage"] == 2
        assert react["variations"] == ["ReactJS"]

    def test_resume_match_rate(self):
        current = create_jd(backend=[("python", 1.0)])["profile"]["id"]
        original = create_jd(backend=[("python", 0.5), ("go", 0.5)])["profile"]["id"]
        resume = client.post(
            "/resumes",
            json={"company": "Acme", "role": "Backend Developer", "tech_stack": ["Python"], "original_jd_id": original},
        ).json()
        assert resume["original_jd_id"] == original

        response = client.get(f"/resumes/{resume['id']}/match-rate", params={"current_jd_id": current})
        assert response.status_code == 200
        assert response.json()["match_rate_percentage"] == pytest.approx(20.0)

        [result] = client.get("/resumes/match-rate", params={"current_jd_id": current}).json()
        assert result["resume_id"] == resume["id"]

        response = client.get("/resumes/resume_missing/match-rate", params={"current_jd_id": current})
        assert response.status_code == 404
        assert response.json()["message"] == "Resume not found: resume_missing"

    def test_invalid_sort(self):
        assert client.get("/statistics/skills", params={"sort_by": "popularity"}).status_code == 422


class TestBidEndpoints:
    def bid(self, company, **layers):
        payload = {
            "company": company,
            "client": "Jane Roe",
            "role": "Senior Backend Engineer",
            "link": f"https://jobs.example.com/{company.lower()}",
            "main_stacks": {
                layer: [{"skill": s, "weight": w} for s, w in layers.get(layer, [])]
                for layer in ALL_LAYERS
            },
        }
        response = client.post("/bids", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    def test_match_rate(self):
        current = self.bid("Acme", backend=[("Python", 1.0)])
        other = self.bid("Globex", backend=[("python", 1.0)])

        response = client.get(f"/bids/{current['id']}/match-rate")

        assert response.status_code == 200
        [result] = response.json()
        assert result["bid_id"] == other["id"]
        assert result["match_rate_percentage"] == pytest.approx(60.0)

    def test_unknown_bid(self):
        assert client.get("/bids/bid_missing/match-rate").status_code == 404

    def test_role_layer_weights(self):
        data = client.get("/roles/Senior Data Engineer/layer-weights").json()
        assert data["basic_title"] == "Data Engineer"
        assert data["layer_weights"]["database"] == 0.5

        response = client.get("/roles/Senior Astronaut/layer-weights")
        assert response.status_code == 400
        assert response.json()["message"] == "Unknown role: Astronaut"
