"""Tests for the quick-reply catalog and its route."""

from fitfusion.quick_replies import (
    QUICK_REPLIES,
    get_all_quick_replies,
    get_allowed_payloads,
    get_quick_replies_by_category,
    get_quick_reply_by_payload,
)


def test_catalog_is_a_fixed_tuple():
    assert isinstance(QUICK_REPLIES, tuple)
    assert get_allowed_payloads() == [
        "GET_WORKOUT_PLAN",
        "GET_COMPLETE_DIET",
        "VIEW_RECOVERY_TIPS",
        "GET_FITNESS_TIPS",
        "GET_FULL_OVERVIEW",
    ]


def test_public_entries_hide_payload():
    for entry in get_all_quick_replies():
        assert set(entry) == {"id", "text", "category", "description"}


def test_by_category():
    assert [r["id"] for r in get_quick_replies_by_category("nutrition")] == ["GET_COMPLETE_DIET"]
    assert get_quick_replies_by_category("unknown") == []


def test_by_payload():
    reply = get_quick_reply_by_payload("VIEW_RECOVERY_TIPS")
    assert reply["category"] == "recovery"
    assert get_quick_reply_by_payload("NOPE") is None


def test_returned_entries_are_copies():
    get_quick_reply_by_payload("GET_FITNESS_TIPS")["text"] = "changed"
    assert get_quick_reply_by_payload("GET_FITNESS_TIPS")["text"] == "Fitness Tips & Advice"


def test_route(client):
    res = client.get("/api/gemini/quick-replies")
    assert res.status_code == 200
    assert len(res.get_json()["data"]) == 5

    res = client.get("/api/gemini/quick-replies?category=analytics")
    assert [r["id"] for r in res.get_json()["data"]] == ["GET_FULL_OVERVIEW"]

    res = client.get("/api/gemini/quick-replies?category=unknown")
    assert res.get_json()["data"] == []
