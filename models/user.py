"""User model definition."""

import hashlib
import secrets
import time
from datetime import datetime
from urllib.parse import urlencode

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


GENDERS = ("female", "male")
DEFAULT_DAILY_NORMA = 2.0
MAX_DAILY_NORMA = 15.0
GRAVATAR_BASE_URL = "https://s.gravatar.com/avatar/"


def gravatar_url(email: str, size: int = 100) -> str:
    """Return the Gravatar URL for an email address."""

    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    query = urlencode({"s": str(size), "r": "x", "d": "retro"})
    return f"{GRAVATAR_BASE_URL}{digest}?{query}"


def generate_token() -> str:
    """Return a compact random URL-safe identifier."""

    return secrets.token_urlsafe(16)


def _default_name() -> str:
    return f"User_{int(time.time() * 1000)}"


class User(db.Model):
    """Represents a registered account."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(64), nullable=False, default=_default_name)
    password_hash = db.Column(db.String(255), nullable=False)
    avatar_url = db.Column(db.String(512), nullable=False, default="")
    verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )
    verification_token = db.Column(db.String(64), unique=True, nullable=True)
    token = db.Column(db.Text, nullable=True)
    daily_norma = db.Column(db.Float, nullable=False, default=DEFAULT_DAILY_NORMA)
    gender = db.Column(
        db.Enum(*GENDERS, name="user_gender"),
        nullable=False,
        default="female",
        server_default=db.text("'female'"),
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    @classmethod
    def register(cls, email: str, password: str) -> "User":
        """Build an unverified user with a fresh verification token."""

        user = cls(
            email=email,
            name=_default_name(),
            avatar_url=gravatar_url(email),
            verified=False,
            verification_token=generate_token(),
        )
        user.set_password(password)
        return user

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def mark_verified(self) -> None:
        """Mark the email as verified and consume the verification token."""

        self.verified = True
        self.verification_token = None

    def start_session(self, token: str) -> None:
        self.token = token

    def end_session(self) -> None:
        self.token = ""

    def profile(self) -> dict:
        """Return the public profile fields."""

        return {
            "email": self.email,
            "avatarUrl": self.avatar_url,
            "name": self.name,
            "gender": self.gender,
            "dailyNorma": self.daily_norma,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
