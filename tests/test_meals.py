"""Tests for the /api/food (meal) routes."""

from datetime import datetime, timedelta

import pytest

from fitfusion import db
from fitfusion.models.meal import Meal


@pytest.fixture
def meal_body():
    return {
        "meal_type": "lunch",
        "name": "Chicken bowl",
        "calories": 650,
        "macros": {"protein": 45, "carbs": 70, "fats": 18},
        "foods": [{"name": "Chicken", "quantity": 150, "unit": "g"}],
    }


def _create(client, headers, body):
    res = client.post("/api/food", headers=headers, json=body)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]


def test_create_and_get(client, user, headers, meal_body):
    created = _create(client, headers, meal_body)

    res = client.get(f"/api/food/{created['id']}", headers=headers)

    data = res.get_json()["data"]
    assert data["user_id"] == user.id
    assert data["macros"] == {"protein": 45, "carbs": 70, "fats": 18}
    assert data["foods"][0]["name"] == "Chicken"


def test_invalid_meal_type(client, headers, meal_body):
    res = client.post("/api/food", headers=headers, json=dict(meal_body, meal_type="brunch"))
    assert res.status_code == 400


def test_partial_update(client, headers, meal_body):
    created = _create(client, headers, meal_body)

    res = client.put(f"/api/food/{created['id']}", headers=headers, json={"calories": 700})

    data = res.get_json()["data"]
    assert data["calories"] == 700
    assert data["name"] == "Chicken bowl"
    assert data["macros"]["protein"] == 45


def test_delete_and_ownership(client, headers, make_user, auth_headers, meal_body):
    created = _create(client, headers, meal_body)
    intruder = auth_headers(make_user())

    assert client.delete(f"/api/food/{created['id']}", headers=intruder).status_code == 404
    assert client.delete(f"/api/food/{created['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/food/{created['id']}", headers=headers).status_code == 404


def test_default_page_size(client, user, headers):
    now = datetime.utcnow()
    for i in range(12):
        db.session.add(
            Meal(
                user_id=user.id,
                date=now - timedelta(hours=i),
                meal_type="snack",
                name=f"Snack {i}",
                calories=100,
            )
        )
    db.session.commit()

    data = client.get("/api/food", headers=headers).get_json()["data"]

    assert len(data["meals"]) == 10
    assert data["pagination"] == {"current": 1, "pages": 2, "total": 12, "limit": 10}


def test_meal_type_filter(client, headers, meal_body):
    _create(client, headers, meal_body)
    _create(client, headers, dict(meal_body, meal_type="dinner", name="Salmon"))

    data = client.get("/api/food?meal_type=dinner", headers=headers).get_json()["data"]

    assert [m["name"] for m in data["meals"]] == ["Salmon"]


class TestMealStats:
    def test_zeroed_when_empty(self, client, headers):
        res = client.get("/api/food/stats", headers=headers)

        assert res.status_code == 200
        assert res.get_json()["data"] == {
            "total_meals": 0,
            "total_calories": 0,
            "avg_calories": 0,
            "total_protein": 0,
            "total_carbs": 0,
            "total_fats": 0,
            "meal_type_counts": {"breakfast": 0, "lunch": 0, "dinner": 0, "snack": 0},
        }

    def test_totals(self, client, headers, meal_body):
        _create(client, headers, meal_body)
        _create(
            client,
            headers,
            dict(meal_body, meal_type="breakfast", calories=401, macros={"protein": 20}),
        )

        data = client.get("/api/food/stats", headers=headers).get_json()["data"]

        assert data["total_meals"] == 2
        assert data["total_calories"] == 1051
        assert data["avg_calories"] == 525.5
        assert data["total_protein"] == 65
        assert data["total_carbs"] == 70
        assert data["meal_type_counts"] == {"breakfast": 1, "lunch": 1, "dinner": 0, "snack": 0}

    def test_date_range(self, client, headers, meal_body):
        _create(client, headers, dict(meal_body, date="2024-01-10T12:00:00"))
        _create(client, headers, dict(meal_body, date="2024-02-10T12:00:00"))

        data = client.get(
            "/api/food/stats?start_date=2024-01-01&end_date=2024-01-31", headers=headers
        ).get_json()["data"]

        assert data["total_meals"] == 1
