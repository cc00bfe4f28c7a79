"""Mail sending abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class MailError(Exception):
    """Raised when a message could not be handed to the mail transport."""


@dataclass(frozen=True)
class Message:
    """An outgoing email with an HTML and/or plain text body."""

    to: str
    subject: str
    html: str | None = None
    text: str | None = None


class AbstractMailer(ABC):
    """Interface for mail backends."""

    @abstractmethod
    def send(self, message: Message) -> None:
        """Deliver the message or raise MailError."""
