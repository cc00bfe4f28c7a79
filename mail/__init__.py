"""Mail backends."""

from .abstract_mailer import AbstractMailer, MailError, Message
from .console_mailer import ConsoleMailer
from .smtp_mailer import SmtpMailer

__all__ = ["AbstractMailer", "ConsoleMailer", "MailError", "Message", "SmtpMailer"]
