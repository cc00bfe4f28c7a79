"""Outgoing account notification emails."""

from __future__ import annotations

from flask import current_app
from werkzeug.exceptions import ServiceUnavailable

from mail import AbstractMailer, MailError, Message


def get_mailer() -> AbstractMailer:
    return current_app.extensions["mailer"]


def verification_message(email: str, verification_token: str) -> Message:
    base_url = current_app.config["BASE_URL"]
    link = f"{base_url}/api/users/verify/{verification_token}"
    return Message(
        to=email,
        subject="Verify email",
        html=f'<a target="_blank" href="{link}">Click to verify your email</a>',
        text=f"Verify your email: {link}",
    )


def recovery_message(email: str, password: str) -> Message:
    return Message(
        to=email,
        subject="Recovery password",
        text=f"Your new password {password}",
    )


def deliver(message: Message, *, required: bool = True) -> bool:
    """Send a message after the triggering change has been committed.

    When ``required`` is false a failure is only logged and False is returned;
    otherwise it surfaces as 503. Committed state is never rolled back.
    """

    try:
        get_mailer().send(message)
    except MailError as exc:
        current_app.logger.warning("Mail '%s' to %s failed: %s", message.subject, message.to, exc)
        if required:
            raise ServiceUnavailable("Email could not be sent, try again later.") from exc
        return False
    return True
