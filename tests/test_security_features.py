"""Tests covering security and hardening features."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from flask import Flask
from flask_jwt_extended import create_access_token

from app import create_app
from config import Config
from helpers import auth_headers, get_user
from models import db
from models.user import User


class _SecurityBaseConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False


def _build_app(tmp_path: Path, **overrides) -> Flask:
    class TestConfig(_SecurityBaseConfig):
        UPLOAD_DIR = str(tmp_path / "tmp")
        AVATAR_DIR = str(tmp_path / "avatars")

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    return create_app(TestConfig)


def test_cors_allows_configured_origin(tmp_path):
    app = _build_app(tmp_path, CORS_ORIGINS=["https://client.example"])
    client = app.test_client()

    response = client.get("/health", headers={"Origin": "https://client.example"})

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "https://client.example"
    assert response.headers.get("X-Request-ID")


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_rate_limit_exceeded_returns_json(tmp_path):
    app = _build_app(tmp_path, RATE_LIMIT="2 per minute")
    client = app.test_client()

    client.get("/health")
    client.get("/health")
    response = client.get("/health")

    assert response.status_code == 429
    payload = response.get_json()
    assert payload["error"] == "Too Many Requests"
    assert "request_id" in payload


def test_json_error_shape_for_invalid_request(tmp_path):
    app = _build_app(tmp_path)
    client = app.test_client()

    response = client.post(
        "/api/users/signup",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Bad Request"
    assert "Request content type" in payload["detail"]
    assert payload["request_id"]


def test_token_not_stored_as_session_is_rejected(app, client):
    """A validly signed token is refused unless it is the user's live session."""

    auth_headers(app, client, "sec@x.com", "pw123")
    user_id = get_user(app, "sec@x.com").id

    with app.app_context():
        stray = create_access_token(identity=str(user_id))

    response = client.get(
        "/api/users/current", headers={"Authorization": f"Bearer {stray}"}
    )

    assert response.status_code == 401


def test_expired_session_is_rejected(app, client):
    auth_headers(app, client, "old@x.com", "pw123")

    with app.app_context():
        user = User.query.filter_by(email="old@x.com").one()
        expired = create_access_token(
            identity=str(user.id), expires_delta=timedelta(seconds=-1)
        )
        user.start_session(expired)
        db.session.commit()

    response = client.get(
        "/api/users/current", headers={"Authorization": f"Bearer {expired}"}
    )

    assert response.status_code == 401


def test_token_for_deleted_user_is_rejected(app, client):
    headers = auth_headers(app, client, "gone@x.com", "pw123")

    with app.app_context():
        user = User.query.filter_by(email="gone@x.com").one()
        db.session.delete(user)
        db.session.commit()

    assert client.get("/api/users/current", headers=headers).status_code == 401
