"""Application configuration module."""

import os
from datetime import timedelta
from pathlib import Path


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BASE_URL = os.getenv("BASE_URL", "http://localhost:5000").rstrip("/")

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")

    # Mail
    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "console")
    MAIL_SENDER = os.getenv("MAIL_SENDER", "no-reply@example.com")
    SMTP_SERVER = os.getenv("SMTP_SERVER", "smtp.gmail.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS = _env_flag("SMTP_USE_TLS", "true")

    # Uploads and avatars
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path("workspace") / "tmp"))
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(5 * 1024 * 1024)))
    ALLOWED_AVATAR_TYPES = os.getenv("ALLOWED_AVATAR_TYPES", "jpg,jpeg,png,gif,webp")
    AVATAR_STORAGE = os.getenv("AVATAR_STORAGE", "local")
    AVATAR_DIR = os.getenv("AVATAR_DIR", str(Path("workspace") / "avatars"))
    S3_BUCKET = os.getenv("S3_BUCKET", "avatars")
    S3_ENDPOINT = os.getenv("S3_ENDPOINT")
    S3_REGION = os.getenv("S3_REGION", "us-east-1")
    S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY")
    S3_SECRET_KEY = os.getenv("S3_SECRET_KEY")
    S3_PUBLIC_URL = os.getenv("S3_PUBLIC_URL")

    # Password recovery
    ENFORCE_REPEAT_PASSWORD = _env_flag("ENFORCE_REPEAT_PASSWORD")
