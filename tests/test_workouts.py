"""Tests for workouts: CRUD, ownership, pagination, stats and exercises."""

from datetime import datetime, timedelta

import pytest

from fitfusion import db
from fitfusion.errors import Conflict
from fitfusion.models.workout import Workout
from fitfusion.routes.utils import commit


@pytest.fixture
def workout_body():
    return {
        "type": "strength",
        "title": "Push day",
        "total_duration": 45,
        "calories_burned": 320,
        "intensity": "high",
        "exercises": [
            {"name": "Bench press", "sets": 4, "reps": 8, "weight": {"value": 80, "unit": "kg"}},
            {"name": "Dips", "sets": 3, "reps": 12},
        ],
    }


def _create(client, headers, body):
    res = client.post("/api/workouts", headers=headers, json=body)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]


class TestWorkoutCrud:
    def test_create_and_get(self, client, user, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.get(f"/api/workouts/{created['id']}", headers=headers)
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["title"] == "Push day"
        assert data["user_id"] == user.id
        assert [e["name"] for e in data["exercises"]] == ["Bench press", "Dips"]
        assert data["is_completed"] is False

    def test_client_user_id_is_ignored(self, client, user, make_user, headers, workout_body):
        other = make_user()
        workout_body["user_id"] = other.id

        created = _create(client, headers, workout_body)

        assert created["user_id"] == user.id

    def test_missing_required_field(self, client, headers, workout_body):
        del workout_body["total_duration"]
        res = client.post("/api/workouts", headers=headers, json=workout_body)
        assert res.status_code == 400
        assert "total_duration" in res.get_json()["message"]

    def test_partial_update_keeps_other_fields(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.put(
            f"/api/workouts/{created['id']}", headers=headers, json={"mood": "energized"}
        )

        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["mood"] == "energized"
        assert data["title"] == "Push day"
        assert len(data["exercises"]) == 2

    def test_update_runs_validation(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)
        res = client.put(f"/api/workouts/{created['id']}", headers=headers, json={"type": "yoga"})
        assert res.status_code == 400

    def test_delete(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.delete(f"/api/workouts/{created['id']}", headers=headers)
        assert res.status_code == 200
        assert res.get_json()["data"] is None

        res = client.get(f"/api/workouts/{created['id']}", headers=headers)
        assert res.status_code == 404

    def test_malformed_id(self, client, headers):
        res = client.get("/api/workouts/not-an-id", headers=headers)
        assert res.status_code == 400
        assert res.get_json()["message"] == "Invalid workout ID"

    def test_complete(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.post(
            f"/api/workouts/{created['id']}/complete",
            headers=headers,
            json={"performance_score": 88, "calories_burned": 400},
        )

        data = res.get_json()["data"]
        assert res.status_code == 200
        assert data["is_completed"] is True
        assert data["performance_score"] == 88
        assert data["calories_burned"] == 400


class TestOwnership:
    def test_other_users_workout_is_not_found(
        self, client, make_user, auth_headers, headers, workout_body
    ):
        created = _create(client, headers, workout_body)
        intruder = auth_headers(make_user())

        url = f"/api/workouts/{created['id']}"
        assert client.get(url, headers=intruder).status_code == 404
        assert client.put(url, headers=intruder, json={"title": "mine"}).status_code == 404
        assert client.delete(url, headers=intruder).status_code == 404
        assert client.post(f"{url}/complete", headers=intruder, json={}).status_code == 404

        # still intact for the owner
        res = client.get(url, headers=headers)
        assert res.get_json()["data"]["title"] == "Push day"

    def test_list_only_shows_own(self, client, make_user, auth_headers, headers, workout_body):
        _create(client, headers, workout_body)
        intruder = auth_headers(make_user())

        res = client.get("/api/workouts", headers=intruder)
        assert res.get_json()["data"]["workouts"] == []


class TestListing:
    def test_pagination(self, client, user, headers):
        base = datetime(2024, 1, 1)
        for i in range(25):
            db.session.add(
                Workout(
                    user_id=user.id,
                    date=base + timedelta(days=i),
                    type="cardio",
                    title=f"Run {i}",
                    total_duration=30,
                )
            )
        db.session.commit()

        res = client.get("/api/workouts?page=2&limit=10", headers=headers)

        data = res.get_json()["data"]
        assert len(data["workouts"]) == 10
        assert data["pagination"] == {"current": 2, "pages": 3, "total": 25, "limit": 10}
        # newest first: page 2 starts at the 11th most recent
        assert data["workouts"][0]["title"] == "Run 14"

    def test_filters(self, client, headers, workout_body):
        _create(client, headers, workout_body)
        _create(client, headers, dict(workout_body, type="cardio", title="Run", is_completed=True))

        res = client.get("/api/workouts?type=cardio", headers=headers)
        assert [w["title"] for w in res.get_json()["data"]["workouts"]] == ["Run"]

        res = client.get("/api/workouts?is_completed=false", headers=headers)
        assert [w["title"] for w in res.get_json()["data"]["workouts"]] == ["Push day"]

    def test_date_range(self, client, headers, workout_body):
        _create(client, headers, dict(workout_body, date="2024-03-01T10:00:00", title="March"))
        _create(client, headers, dict(workout_body, date="2024-05-01T10:00:00", title="May"))

        res = client.get(
            "/api/workouts?start_date=2024-02-01&end_date=2024-03-01", headers=headers
        )
        assert [w["title"] for w in res.get_json()["data"]["workouts"]] == ["March"]


class TestStats:
    def test_zero_defaults(self, client, headers):
        res = client.get("/api/workouts/stats", headers=headers)

        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["total_workouts"] == 0
        assert data["completed_workouts"] == 0
        assert data["total_duration"] == 0
        assert data["total_calories"] == 0
        assert data["avg_performance"] == 0

    def test_aggregates(self, client, headers, workout_body):
        _create(client, headers, dict(workout_body, is_completed=True, performance_score=80))
        _create(client, headers, dict(workout_body, total_duration=15, performance_score=90))

        data = client.get("/api/workouts/stats?period=7", headers=headers).get_json()["data"]

        assert data["total_workouts"] == 2
        assert data["completed_workouts"] == 1
        assert data["total_duration"] == 60
        assert data["total_calories"] == 640
        assert data["avg_performance"] == 85


class TestExercises:
    def test_append(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.post(
            f"/api/workouts/{created['id']}/exercises",
            headers=headers,
            json={"name": "Push-ups", "reps": 20},
        )

        assert res.status_code == 201
        assert [e["name"] for e in res.get_json()["data"]["exercises"]] == [
            "Bench press",
            "Dips",
            "Push-ups",
        ]

    def test_replace_at_index_merges(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.put(
            f"/api/workouts/{created['id']}/exercises/0", headers=headers, json={"reps": 6}
        )

        exercise = res.get_json()["data"]["exercises"][0]
        assert exercise["name"] == "Bench press"
        assert exercise["reps"] == 6
        assert exercise["sets"] == 4

    def test_remove_at_index(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.delete(f"/api/workouts/{created['id']}/exercises/0", headers=headers)

        assert [e["name"] for e in res.get_json()["data"]["exercises"]] == ["Dips"]

    def test_bad_index(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.delete(f"/api/workouts/{created['id']}/exercises/5", headers=headers)

        assert res.status_code == 404
        assert res.get_json()["message"] == "Exercise not found"

    def test_version_bumps_on_change(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)

        res = client.post(
            f"/api/workouts/{created['id']}/exercises", headers=headers, json={"name": "Plank"}
        )

        assert res.get_json()["data"]["version"] == created["version"] + 1

    def test_stale_version_is_a_conflict(self, client, headers, workout_body):
        created = _create(client, headers, workout_body)
        workout = Workout.query.filter_by(id=created["id"]).one()

        # another writer saves first
        db.session.execute(
            db.text("UPDATE workouts SET version = version + 1 WHERE id = :id"), {"id": workout.id}
        )
        workout.title = "Changed"

        with pytest.raises(Conflict) as exc_info:
            commit("update workout")

        assert exc_info.value.status_code == 409
        assert "modified concurrently" in exc_info.value.message
        db.session.expire_all()
        stored = Workout.query.filter_by(id=created["id"]).one()
        assert stored.title == "Push day"
        assert stored.version == created["version"]
