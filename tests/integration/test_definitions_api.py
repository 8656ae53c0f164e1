"""
Integration tests for the definitions endpoints and service wiring.
"""

import pytest
from fastapi.testclient import TestClient

import api.deps
from api.deps import get_current_user, get_settings
from tests.conftest import mock_get_current_user
from tests.definitions import gzclp_definition, ladder_definition, with_slot


@pytest.mark.integration
class TestGetDefinition:
    """Tests for GET /definitions/{id}."""

    def test_latest_version(self, client, fake_definition_repo):
        fake_definition_repo.seed([gzclp_definition(version=2)])

        response = client.get("/definitions/gzclp")

        assert response.status_code == 200
        body = response.json()
        assert body["definition"]["version"] == 2
        assert body["reference_errors"] == {}

    def test_exact_version(self, client, fake_definition_repo):
        fake_definition_repo.seed([gzclp_definition(version=2)])

        body = client.get("/definitions/gzclp", params={"version": 1}).json()

        assert body["definition"]["version"] == 1

    def test_serialized_with_camel_case_keys(self, client):
        body = client.get("/definitions/ladder-test").json()

        slot = body["definition"]["days"][0]["slots"][0]
        assert slot["onMidStageFail"]["type"] == "advance_stage"
        assert slot["onFinalStageFail"] == {"type": "deload_percent", "percent": 10.0}

    def test_reports_dangling_references(self, client, fake_definition_repo):
        orphan = {
            "id": "orphan",
            "exercise_id": "squat",
            "tier": "t3",
            "stages": [{"sets": 3, "reps": 10}],
            "start_weight_key": "deadlift",
            "on_success": {"type": "add_weight"},
            "on_mid_stage_fail": {"type": "advance_stage"},
            "on_final_stage_fail": {"type": "no_change"},
        }
        fake_definition_repo.seed([with_slot(gzclp_definition(version=4), 0, orphan)])

        body = client.get("/definitions/gzclp").json()

        assert list(body["reference_errors"]) == ["orphan"]

    def test_not_found(self, client):
        assert client.get("/definitions/nope").status_code == 404


@pytest.mark.integration
class TestListDefinitions:
    """Tests for GET /definitions."""

    def test_latest_revision_of_each_definition(self, client, fake_definition_repo):
        fake_definition_repo.seed([gzclp_definition(version=2)])

        response = client.get("/definitions")

        assert response.status_code == 200
        definitions = response.json()["definitions"]
        assert [d["id"] for d in definitions] == ["gzclp", "ladder-test", "percent-test", "tm-test"]
        assert definitions[0]["version"] == 2
        assert definitions[0]["name"] == "GZCLP"
        assert definitions[0]["total_workouts"] == 8

    def test_pagination(self, client):
        body = client.get("/definitions", params={"limit": 2, "offset": 1}).json()

        assert [d["id"] for d in body["definitions"]] == ["ladder-test", "percent-test"]

    def test_invalid_stored_definition_skipped(self, client, fake_definition_repo):
        fake_definition_repo.seed([{"id": "broken", "version": 1, "days": []}])

        body = client.get("/definitions").json()

        assert "broken" not in [d["id"] for d in body["definitions"]]


@pytest.mark.integration
class TestCreateDefinition:
    """Tests for POST /definitions."""

    def test_stores_next_version(self, client):
        response = client.post("/definitions", json={"definition": gzclp_definition(version=7)})

        assert response.status_code == 201
        assert response.json()["definition"]["version"] == 2
        assert client.get("/definitions/gzclp").json()["definition"]["version"] == 2
        assert client.get("/definitions/gzclp", params={"version": 1}).status_code == 200

    def test_new_definition_starts_at_version_one(self, client):
        document = dict(ladder_definition(), id="ladder-custom", name="Custom Ladder")

        response = client.post("/definitions", json={"definition": document})

        assert response.status_code == 201
        assert response.json()["definition"]["version"] == 1
        assert client.get("/definitions/ladder-custom").status_code == 200

    def test_rejects_repeated_slot_id_in_another_mode(self, client):
        gpp = {"id": "sq", "exercise_id": "squat", "tier": "gpp", "is_gpp": True}
        stage = {
            "id": "sq",
            "exercise_id": "squat",
            "tier": "t1",
            "stages": [{"sets": 5, "reps": 3}],
            "start_weight_key": "squat",
            "on_success": {"type": "add_weight"},
            "on_mid_stage_fail": {"type": "advance_stage"},
            "on_final_stage_fail": {"type": "no_change"},
        }
        document = with_slot(with_slot(gzclp_definition(), 0, gpp), 1, stage)

        response = client.post("/definitions", json={"definition": document})

        assert response.status_code == 422
        assert "declared differently" in response.json()["detail"]
        assert client.get("/definitions/gzclp").json()["definition"]["version"] == 1

    def test_dangling_reference_reported_not_rejected(self, client):
        orphan = {
            "id": "orphan",
            "exercise_id": "squat",
            "tier": "t3",
            "stages": [{"sets": 3, "reps": 10}],
            "start_weight_key": "deadlift",
            "on_success": {"type": "add_weight"},
            "on_mid_stage_fail": {"type": "advance_stage"},
            "on_final_stage_fail": {"type": "no_change"},
        }
        document = with_slot(gzclp_definition(), 0, orphan)

        response = client.post("/definitions", json={"definition": document})

        assert response.status_code == 201
        assert list(response.json()["reference_errors"]) == ["orphan"]


@pytest.mark.integration
def test_missing_database_returns_503(app, test_settings, monkeypatch):
    monkeypatch.setattr(api.deps, "get_supabase_client", lambda: None)
    app.dependency_overrides[get_current_user] = mock_get_current_user
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        response = TestClient(app).get("/definitions/gzclp")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503


@pytest.mark.integration
def test_missing_auth_header_returns_401(app, test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        response = TestClient(app).get("/programs/abc")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
