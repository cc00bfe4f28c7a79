"""Password reset blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest, NotFound, Unauthorized

from models import db
from models.user import User, generate_token
from utils.notifications import deliver, recovery_message
from utils.request_validation import parse_json_request, text_field

password_bp = Blueprint("password", __name__)


@password_bp.route("/forget-password", methods=["POST"])
def forget_password():
    """Replace the password with a generated one and email it to the user."""

    payload = parse_json_request(request, required_keys=("email",))
    email = text_field(payload, "email")

    user = User.query.filter_by(email=email).first()
    if user is None:
        raise NotFound("User not registered")

    generated = generate_token()
    user.set_password(generated)
    db.session.commit()
    current_app.logger.info("User %s password reset by email", user.id)

    deliver(recovery_message(user.email, generated))

    return jsonify({"message": "Password recovery email sent"})


@password_bp.route("/recovery", methods=["POST"])
def recovery():
    """Set a new password for a verified account identified by email."""

    payload = parse_json_request(
        request, required_keys=("email", "newPassword", "repeatPassword")
    )
    email = text_field(payload, "email")
    new_password = text_field(payload, "newPassword")

    user = User.query.filter_by(email=email).first()
    if user is None:
        raise NotFound("Email not found")
    if not user.verified:
        raise Unauthorized("Email is wrong")

    if current_app.config.get("ENFORCE_REPEAT_PASSWORD"):
        if text_field(payload, "repeatPassword") != new_password:
            raise BadRequest("Passwords do not match")

    user.set_password(new_password)
    db.session.commit()
    current_app.logger.info("User %s recovered password", user.id)

    return jsonify({"message": "Password recovered"})
