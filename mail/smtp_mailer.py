"""SMTP mail backend."""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from .abstract_mailer import AbstractMailer, MailError, Message

logger = logging.getLogger(__name__)


class SmtpMailer(AbstractMailer):
    """Send mail through an SMTP relay."""

    def __init__(
        self,
        server: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.server = server
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _build(self, message: Message) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["From"] = self.sender
        mime["To"] = message.to
        mime["Subject"] = message.subject
        if message.text:
            mime.attach(MIMEText(message.text, "plain"))
        if message.html:
            mime.attach(MIMEText(message.html, "html"))
        return mime

    def send(self, message: Message) -> None:
        mime = self._build(message)
        try:
            with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(mime)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP error sending mail to %s: %s", message.to, exc)
            raise MailError(f"Failed to send mail to {message.to}") from exc

        logger.info("Mail sent to %s: %s", message.to, message.subject)
