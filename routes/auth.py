"""Authentication blueprint: signup, email verification and sessions."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, current_user, jwt_required
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import Conflict, NotFound, Unauthorized

from models import db
from models.user import User
from utils.notifications import deliver, verification_message
from utils.request_validation import parse_json_request, text_field

auth_bp = Blueprint("auth", __name__)

# Same message for unknown, unverified and wrong-password signins.
INVALID_CREDENTIALS = "Email or password is wrong"


def _credentials(payload: dict) -> tuple[str, str]:
    """Return the email and password of a request body."""
    return text_field(payload, "email"), text_field(payload, "password")


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple:
    """Register an unverified user and send the verification email."""
    payload = parse_json_request(request, required_keys=("email", "password"))
    email, password = _credentials(payload)

    if User.query.filter_by(email=email).first() is not None:
        raise Conflict("Email in use")

    user = User.register(email, password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Email in use") from None

    current_app.logger.info("User %s signed up", user.id)
    deliver(verification_message(user.email, user.verification_token), required=False)

    return (
        jsonify({"email": user.email, "avatarUrl": user.avatar_url}),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify/<verification_token>", methods=["GET"])
def verify(verification_token: str):
    """Consume a verification token and mark its owner verified."""
    user = User.query.filter_by(verification_token=verification_token).first()
    if user is None:
        raise NotFound("User not found")

    user.mark_verified()
    db.session.commit()
    current_app.logger.info("User %s verified", user.id)

    return jsonify({"message": "Verification successful"})


@auth_bp.route("/verify", methods=["POST"])
def resend_verify():
    """Send the stored verification token to an unverified user again."""
    payload = parse_json_request(request, required_keys=("email",))
    email = text_field(payload, "email")

    user = User.query.filter_by(email=email).first()
    if user is None:
        raise NotFound("Email not found")
    if user.verified:
        raise Conflict("Verification has already been passed")

    deliver(verification_message(user.email, user.verification_token))

    return jsonify({"message": "Verification email sent"})


@auth_bp.route("/signin", methods=["POST"])
def signin():
    """Authenticate a verified user and issue a 24 hour session token."""
    payload = parse_json_request(request, required_keys=("email", "password"))
    email, password = _credentials(payload)

    user = User.query.filter_by(email=email).first()
    if user is None or not user.verified or not user.check_password(password):
        raise Unauthorized(INVALID_CREDENTIALS)

    token = create_access_token(
        identity=str(user.id),
        expires_delta=current_app.config["JWT_ACCESS_TOKEN_EXPIRES"],
    )
    user.start_session(token)
    db.session.commit()
    current_app.logger.info("User %s signed in", user.id)

    return jsonify(
        {
            "token": token,
            "user": {
                "email": user.email,
                "name": user.name,
                "dailyNorma": user.daily_norma,
                "gender": user.gender,
            },
            "avatarUrl": user.avatar_url,
        }
    )


@auth_bp.route("/current", methods=["GET"])
@jwt_required()
def get_current():
    """Return the profile of the authenticated user."""
    return jsonify({"id": current_user.id, **current_user.profile()})


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    current_user.end_session()
    db.session.commit()
    current_app.logger.info("User %s logged out", current_user.id)
    return "", HTTPStatus.NO_CONTENT
