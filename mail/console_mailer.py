"""Mailer that writes messages to the log instead of sending them."""

from __future__ import annotations

import logging

from .abstract_mailer import AbstractMailer, Message

logger = logging.getLogger(__name__)


class ConsoleMailer(AbstractMailer):
    """Log outgoing mail and keep it in an in-memory outbox."""

    def __init__(self) -> None:
        self.outbox: list[Message] = []

    def send(self, message: Message) -> None:
        self.outbox.append(message)
        logger.info(
            "Mail to %s: %s\n%s",
            message.to,
            message.subject,
            message.text or message.html or "",
        )
