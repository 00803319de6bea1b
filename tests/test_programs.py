"""Tests for training programs and their progress counters."""

from datetime import datetime

import pytest

from fitfusion.models.program import Program


@pytest.fixture
def program_body():
    return {
        "title": "Beginner strength",
        "description": "Three full-body sessions",
        "goal": "strength",
        "difficulty": "beginner",
        "duration": {"weeks": 4, "days_per_week": 3},
        "weeks": [
            {
                "week_number": 1,
                "focus": "Technique",
                "workouts": [
                    {"day": 1, "title": "Full body A", "type": "strength"},
                    {"day": 3, "title": "Full body B", "type": "strength"},
                    {"day": 5, "title": "Easy run", "type": "cardio"},
                ],
            }
        ],
    }


def _create(client, headers, body):
    res = client.post("/api/workouts/programs", headers=headers, json=body)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]


def _complete(client, headers, program_id, week_number, workout_index):
    return client.post(
        f"/api/workouts/programs/{program_id}/complete-workout",
        headers=headers,
        json={"week_number": week_number, "workout_index": workout_index},
    )


class TestProgramCrud:
    def test_create_computes_totals(self, client, headers, program_body):
        created = _create(client, headers, program_body)

        assert created["status"] == "draft"
        assert created["progress"] == {
            "completed_workouts": 0,
            "total_workouts": 3,
            "completion_percentage": 0,
        }

    def test_sharing_fields_are_not_stored(self, client, headers, program_body):
        program_body.update(
            is_public=True,
            reviews=[{"rating": 5, "comment": "great"}],
            average_rating=5,
            likes=[1],
        )

        created = _create(client, headers, program_body)

        assert created["is_public"] is True
        for key in ("reviews", "average_rating", "likes", "used_by"):
            assert key not in created

    def test_filters(self, client, headers, program_body):
        _create(client, headers, program_body)
        _create(client, headers, dict(program_body, title="Cut", goal="fat-loss"))

        res = client.get("/api/workouts/programs?goal=fat-loss", headers=headers)

        assert [p["title"] for p in res.get_json()["data"]["programs"]] == ["Cut"]

    def test_update_recomputes_progress(self, client, headers, program_body):
        created = _create(client, headers, program_body)
        weeks = created["weeks"]
        weeks[0]["workouts"][0]["completed"] = True
        weeks[0]["workouts"].append({"day": 6, "title": "Mobility", "type": "rest"})

        res = client.put(
            f"/api/workouts/programs/{created['id']}", headers=headers, json={"weeks": weeks}
        )

        progress = res.get_json()["data"]["progress"]
        assert progress == {
            "completed_workouts": 1,
            "total_workouts": 4,
            "completion_percentage": 25,
        }

    def test_other_user_cannot_see(self, client, headers, make_user, auth_headers, program_body):
        created = _create(client, headers, program_body)
        intruder = auth_headers(make_user())

        res = client.get(f"/api/workouts/programs/{created['id']}", headers=intruder)
        assert res.status_code == 404

        res = _complete(client, intruder, created["id"], 1, 0)
        assert res.status_code == 404

    def test_delete(self, client, headers, program_body):
        created = _create(client, headers, program_body)

        res = client.delete(f"/api/workouts/programs/{created['id']}", headers=headers)

        assert res.status_code == 200
        assert Program.query.count() == 0


class TestProgramLifecycle:
    def test_start(self, client, headers, program_body):
        created = _create(client, headers, program_body)

        res = client.post(f"/api/workouts/programs/{created['id']}/start", headers=headers)

        data = res.get_json()["data"]
        assert data["status"] == "active"
        assert data["current_week"] == 1
        start = datetime.fromisoformat(data["start_date"])
        end = datetime.fromisoformat(data["end_date"])
        assert (end - start).days == 28

    def test_complete_workout_rounds_percentage(self, client, headers, program_body):
        created = _create(client, headers, program_body)

        first = _complete(client, headers, created["id"], 1, 0).get_json()["data"]
        assert first["progress"]["completed_workouts"] == 1
        assert first["progress"]["completion_percentage"] == 33
        slot = first["weeks"][0]["workouts"][0]
        assert slot["completed"] is True
        assert slot["completed_at"]

        second = _complete(client, headers, created["id"], 1, 1).get_json()["data"]
        assert second["progress"]["completion_percentage"] == 67
        assert second["status"] == "draft"

    def test_last_slot_completes_program(self, client, headers, program_body):
        created = _create(client, headers, program_body)
        for index in range(3):
            res = _complete(client, headers, created["id"], 1, index)

        data = res.get_json()["data"]
        assert data["progress"]["completion_percentage"] == 100
        assert data["status"] == "completed"

    def test_current_week_only_moves_forward(self, client, headers, program_body):
        program_body["weeks"].append(
            {"week_number": 2, "workouts": [{"day": 1, "title": "Full body C", "type": "strength"}]}
        )
        created = _create(client, headers, program_body)
        assert created["current_week"] == 1

        data = _complete(client, headers, created["id"], 2, 0).get_json()["data"]
        assert data["current_week"] == 2

        data = _complete(client, headers, created["id"], 1, 0).get_json()["data"]
        assert data["current_week"] == 2
        assert data["status"] == "draft"

    @pytest.mark.parametrize("week_number,workout_index", [(2, 0), (1, 3)])
    def test_unknown_slot(self, client, headers, program_body, week_number, workout_index):
        created = _create(client, headers, program_body)

        res = _complete(client, headers, created["id"], week_number, workout_index)

        assert res.status_code == 404

    def test_invalid_body(self, client, headers, program_body):
        created = _create(client, headers, program_body)

        res = client.post(
            f"/api/workouts/programs/{created['id']}/complete-workout",
            headers=headers,
            json={"week_number": 0},
        )

        assert res.status_code == 400


def test_calculate_progress_without_slots():
    program = Program(weeks=[])
    program.calculate_progress()
    assert program.completion_percentage == 0
    assert program.total_workouts == 0
