"""Tests for the JSON API."""
import pytest

from desert_pulse.security import create_session_token


@pytest.fixture
def bearer(test_user):
    return {"Authorization": f"Bearer {create_session_token(test_user.id)}"}


class TestPlans:

    def test_get_plan(self, client):
        response = client.get("/api/plans/strength/medium")
        assert response.status_code == 200
        body = response.json()
        assert [e["name"] for e in body["exercises"]] == ["Push-ups", "Squats"]
        assert body["nominal_duration_minutes"] == 8

    def test_unknown_plan_is_404(self, client):
        assert client.get("/api/plans/yoga/high").status_code == 404


class TestCompose:

    def test_requires_auth(self, client):
        response = client.post("/api/workouts/compose", json={"energy_level": "high"})
        assert response.status_code == 401

    def test_compose_for_user(self, client, bearer):
        response = client.post("/api/workouts/compose", json={"energy_level": "high"}, headers=bearer)
        assert response.status_code == 200
        body = response.json()
        assert body["goal"] == "strength"
        assert body["energy_level"] == "high"
        assert body["total_duration_minutes"] == 24
        assert [e["sets"] for e in body["exercises"]] == [3, 3, 3]

    def test_compose_uses_available_time(self, client, bearer, user_store, test_user):
        user_store.update_profile(test_user.id, "strength", 10)
        body = client.post("/api/workouts/compose", json={"energy_level": "high"}, headers=bearer).json()
        assert [e["sets"] for e in body["exercises"]] == [1, 1, 1]
        assert body["total_duration_minutes"] == 8

    def test_invalid_energy_level_is_422(self, client, bearer):
        response = client.post("/api/workouts/compose", json={"energy_level": "extreme"}, headers=bearer)
        assert response.status_code == 422

    def test_unknown_user_is_401(self, client):
        headers = {"Authorization": f"Bearer {create_session_token('ghost')}"}
        response = client.post("/api/workouts/compose", json={"energy_level": "high"}, headers=headers)
        assert response.status_code == 401


class TestProgress:

    def test_empty_progress(self, client, bearer, test_user):
        body = client.get("/api/progress", headers=bearer).json()
        assert body["user_id"] == test_user.id
        assert body["completed_sessions"] == 0
        assert body["history"] == []

    def test_record_sessions(self, client, bearer):
        for day in ("2024-03-01", "2024-03-02", "2024-03-04"):
            response = client.post(
                "/api/progress/sessions",
                json={
                    "workout_type": "strength",
                    "duration_minutes": 20,
                    "energy_level": "medium",
                    "date": f"{day}T07:00:00Z",
                },
                headers=bearer,
            )
            assert response.status_code == 200
        body = client.get("/api/progress", headers=bearer).json()
        assert body["completed_sessions"] == 3
        assert body["total_minutes"] == 60
        assert body["streak"] == 1
        assert len(body["history"]) == 3

    def test_negative_duration_is_422(self, client, bearer, progress_store, test_user):
        response = client.post(
            "/api/progress/sessions",
            json={"workout_type": "strength", "duration_minutes": -1, "energy_level": "low"},
            headers=bearer,
        )
        assert response.status_code == 422
        assert progress_store.get(test_user.id).history == []

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_duration_is_422(self, client, bearer, progress_store, test_user, literal):
        body = (
            '{"workout_type": "strength", "energy_level": "low", '
            f'"duration_minutes": {literal}}}'
        )
        response = client.post(
            "/api/progress/sessions",
            content=body,
            headers={**bearer, "Content-Type": "application/json"},
        )
        assert response.status_code == 422
        record = progress_store.get(test_user.id)
        assert record.history == []
        assert record.total_minutes == 0
