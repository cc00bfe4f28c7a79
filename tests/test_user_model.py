"""Tests for the User model helpers."""

import hashlib

from models import db
from models.user import User, gravatar_url


def test_gravatar_url_is_derived_from_email():
    url = gravatar_url("  Someone@Example.com ")
    digest = hashlib.md5(b"someone@example.com").hexdigest()

    assert url == f"https://s.gravatar.com/avatar/{digest}?s=100&r=x&d=retro"
    assert url == gravatar_url("someone@example.com")
    assert url != gravatar_url("other@example.com")


def test_register_builds_unverified_user(app):
    with app.app_context():
        user = User.register("new@example.com", "secret")
        db.session.add(user)
        db.session.commit()

        assert user.verified is False
        assert user.verification_token
        assert user.avatar_url == gravatar_url("new@example.com")
        assert user.password_hash != "secret"
        assert user.check_password("secret")
        assert not user.check_password("Secret")
        assert user.gender == "female"
        assert user.daily_norma == 2.0


def test_verification_and_session_helpers(app):
    with app.app_context():
        user = User.register("helper@example.com", "password123")
        db.session.add(user)
        db.session.commit()

        user.mark_verified()
        db.session.commit()
        db.session.refresh(user)

        assert user.verified is True
        assert user.verification_token is None

        user.start_session("signed.token.value")
        assert user.token == "signed.token.value"
        user.end_session()
        assert user.token == ""


def test_set_password_replaces_hash(app):
    with app.app_context():
        user = User.register("hash@example.com", "first")
        original = user.password_hash

        user.set_password("second")

        assert user.password_hash != original
        assert user.check_password("second")
        assert not user.check_password("first")
