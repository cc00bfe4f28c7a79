"""Helpers shared by the endpoint tests."""

from __future__ import annotations

from flask import Flask
from flask.testing import FlaskClient

from models import db
from models.user import User


def get_user(app: Flask, email: str) -> User | None:
    with app.app_context():
        user = User.query.filter_by(email=email).first()
        if user is not None:
            db.session.expunge(user)
        return user


def signup(client: FlaskClient, email: str, password: str):
    return client.post("/api/users/signup", json={"email": email, "password": password})


def signup_verified(app: Flask, client: FlaskClient, email: str, password: str) -> None:
    """Sign up and verify an account through the public endpoints."""

    assert signup(client, email, password).status_code == 201
    token = get_user(app, email).verification_token
    assert client.get(f"/api/users/verify/{token}").status_code == 200


def signin(client: FlaskClient, email: str, password: str):
    return client.post("/api/users/signin", json={"email": email, "password": password})


def auth_headers(app: Flask, client: FlaskClient, email: str, password: str) -> dict[str, str]:
    """Create a verified account and return bearer headers for it."""

    signup_verified(app, client, email, password)
    response = signin(client, email, password)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['token']}"}
