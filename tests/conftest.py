"""Pytest configuration and fixtures."""

import json
from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token

from config import TestConfig
from fitfusion import create_app, db, insights
from fitfusion.models.user import User


class FakeModels:
    """Stands in for `genai.Client().models`; replies are queued per test."""

    def __init__(self):
        self.calls = []
        self.replies = []

    def queue(self, reply):
        """Queue a dict (sent as JSON), a raw string, a response object or an exception."""
        self.replies.append(reply)

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        reply = self.replies.pop(0) if self.replies else {"title": "Insight", "summary": "Keep going."}
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        if isinstance(reply, str):
            return SimpleNamespace(text=reply, prompt_feedback=None, candidates=[])
        return reply


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def fake_gemini():
    """Never let a test reach the real Gemini API."""
    models = FakeModels()
    insights.client = SimpleNamespace(models=models)
    yield models
    insights.client = None


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make_user(**overrides):
        counter["n"] += 1
        fields = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "age": 30,
            "fitness_goal": "muscle-gain",
        }
        fields.update(overrides)
        password = fields.pop("password", "password123")
        user = User(**fields)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def headers(user, auth_headers):
    return auth_headers(user)
