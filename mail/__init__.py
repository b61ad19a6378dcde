"""Outgoing mail."""

from .mailer import Mailer, MailSettings, Message
from .messages import build_verification_message, verification_link

__all__ = [
    "Mailer",
    "MailSettings",
    "Message",
    "build_verification_message",
    "verification_link",
]
