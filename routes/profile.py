"""Profile blueprint: daily norma, account settings and avatars."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, send_file
from flask_jwt_extended import current_user, jwt_required
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, NotFound, ServiceUnavailable

from models import db
from models.user import User
from storage import AbstractAvatarStorage, LocalAvatarStorage, StorageError
from utils.request_validation import parse_json_request, profile_updates, text_field
from utils.uploads import allowed_extensions, temporary_upload, unique_filename, validate_image

profile_bp = Blueprint("profile", __name__)
avatars_bp = Blueprint("avatars", __name__)


def _apply(user: User, updates: dict) -> None:
    for column, value in updates.items():
        setattr(user, column, value)


def _avatar_storage() -> AbstractAvatarStorage:
    return current_app.extensions["avatar_storage"]


@profile_bp.route("/daily-norma", methods=["PATCH"])
@jwt_required()
def daily_norma_update():
    """Store a new daily norma together with any other profile fields sent."""

    payload = parse_json_request(request, allow_empty=True)
    if not payload.get("dailyNorma"):
        raise BadRequest("Enter your dailyNorma")

    _apply(current_user, profile_updates(payload))
    db.session.commit()

    return jsonify({"dailyNorma": current_user.daily_norma})


@profile_bp.route("/settings", methods=["PATCH"])
@jwt_required()
def settings():
    """Update profile fields and optionally the password.

    The current ``password`` must be supplied and match; otherwise nothing is
    changed. ``newPassword`` replaces the stored hash when present.
    """

    payload = parse_json_request(request)
    password = text_field(payload, "password")
    if not password or not current_user.check_password(password):
        raise BadRequest("Password is wrong")

    updates = profile_updates(payload)
    new_password = text_field(payload, "newPassword")

    _apply(current_user, updates)
    if new_password:
        current_user.set_password(new_password)
    db.session.commit()
    current_app.logger.info(
        "User %s updated settings (password changed: %s)", current_user.id, bool(new_password)
    )

    return jsonify(current_user.profile())


@profile_bp.route("/avatars", methods=["PATCH"])
@jwt_required()
def update_avatar():
    """Upload a new avatar image and store its URL."""

    file = request.files.get("avatar")
    if not isinstance(file, FileStorage):
        raise BadRequest("No file")

    validate_image(
        file,
        allowed_extensions(current_app.config.get("ALLOWED_AVATAR_TYPES")),
        int(current_app.config["MAX_UPLOAD_SIZE"]),
    )

    filename = unique_filename(file.filename or "avatar", prefix=f"{current_user.id}_")
    with temporary_upload(file, current_app.config["UPLOAD_DIR"]) as path:
        try:
            avatar_url = _avatar_storage().upload(path, filename)
        except StorageError as exc:
            raise ServiceUnavailable("Avatar could not be stored, try again later.") from exc

    current_user.avatar_url = avatar_url
    db.session.commit()
    current_app.logger.info("User %s updated avatar", current_user.id)

    return jsonify({"avatarUrl": avatar_url})


@avatars_bp.route("/<path:filename>", methods=["GET"])
def serve_avatar(filename: str):
    """Serve an avatar kept by the local storage backend."""

    storage = _avatar_storage()
    if not isinstance(storage, LocalAvatarStorage):
        raise NotFound("Avatar not found.")
    path = storage.path_for(filename)
    if not path.is_file():
        raise NotFound("Avatar not found.")
    return send_file(path.resolve())
