"""Application factory."""

import json
import os
import uuid

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from jwt.exceptions import InvalidTokenError
from werkzeug.exceptions import HTTPException

from config import Config
from mail import AbstractMailer, ConsoleMailer, SmtpMailer
from models import db
from models.user import User
from routes.auth import auth_bp
from routes.password import password_bp
from routes.profile import avatars_bp, profile_bp
from storage import AbstractAvatarStorage, LocalAvatarStorage, S3AvatarStorage

migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(
    config_class: type[Config] = Config,
    *,
    mailer: AbstractMailer | None = None,
    avatar_storage: AbstractAvatarStorage | None = None,
) -> Flask:
    """Create and configure the Flask application.

    ``mailer`` and ``avatar_storage`` replace the backends that would
    otherwise be built from ``MAIL_BACKEND`` and ``AVATAR_STORAGE``.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    _register_jwt_callbacks()

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "60 per minute")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Temporary uploads directory
    os.makedirs(app.config["UPLOAD_DIR"], exist_ok=True)

    # Collaborators
    app.extensions["mailer"] = mailer or _build_mailer(app)
    app.extensions["avatar_storage"] = avatar_storage or _build_avatar_storage(app)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/users")
    app.register_blueprint(profile_bp, url_prefix="/api/users")
    app.register_blueprint(password_bp, url_prefix="/api/users")
    app.register_blueprint(avatars_bp, url_prefix="/avatars")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _build_mailer(app: Flask) -> AbstractMailer:
    backend = app.config.get("MAIL_BACKEND", "console")
    if backend == "smtp":
        return SmtpMailer(
            app.config["SMTP_SERVER"],
            app.config["SMTP_PORT"],
            app.config["MAIL_SENDER"],
            username=app.config.get("SMTP_USERNAME"),
            password=app.config.get("SMTP_PASSWORD"),
            use_tls=app.config.get("SMTP_USE_TLS", True),
        )
    if backend == "console":
        return ConsoleMailer()
    raise ValueError(f"Unknown MAIL_BACKEND: {backend}")


def _build_avatar_storage(app: Flask) -> AbstractAvatarStorage:
    backend = app.config.get("AVATAR_STORAGE", "local")
    if backend == "s3":
        return S3AvatarStorage(
            app.config["S3_BUCKET"],
            endpoint_url=app.config.get("S3_ENDPOINT"),
            region=app.config.get("S3_REGION"),
            access_key=app.config.get("S3_ACCESS_KEY"),
            secret_key=app.config.get("S3_SECRET_KEY"),
            public_url=app.config.get("S3_PUBLIC_URL"),
        )
    if backend == "local":
        return LocalAvatarStorage(app.config["AVATAR_DIR"], app.config["BASE_URL"])
    raise ValueError(f"Unknown AVATAR_STORAGE: {backend}")


def _register_jwt_callbacks() -> None:
    """Accept a bearer token only while it is the user's current session."""

    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        return db.session.get(User, int(jwt_data["sub"]))

    @jwt.token_in_blocklist_loader
    def _session_revoked(_jwt_header, jwt_payload) -> bool:
        user = db.session.get(User, int(jwt_payload["sub"]))
        if user is None or not user.token:
            return True
        try:
            session = decode_token(user.token, allow_expired=True)
        except (InvalidTokenError, JWTExtendedException):
            return True
        return session.get("jti") != jwt_payload.get("jti")


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        payload = {
            "error": getattr(error, "name", "Error"),
            "detail": error.description,
            "request_id": request_id,
        }
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        request_id = g.get("request_id") or str(uuid.uuid4())
        app.logger.exception("Unhandled application error", exc_info=error)
        payload = {
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred.",
            "request_id": request_id,
        }
        response = jsonify(payload)
        response.status_code = 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
