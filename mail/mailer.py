"""SMTP mailer with fire-and-forget dispatch."""

from __future__ import annotations

import logging
import smtplib
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Mapping


@dataclass(frozen=True)
class MailSettings:
    """Connection settings for the outgoing mail provider."""

    server: str
    port: int
    use_ssl: bool = True
    username: str | None = None
    password: str | None = None
    default_sender: str | None = None
    suppress_send: bool = False
    max_workers: int = 4

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "MailSettings":
        return cls(
            server=config.get("MAIL_SERVER", "smtp.gmail.com"),
            port=int(config.get("MAIL_PORT", 465)),
            use_ssl=bool(config.get("MAIL_USE_SSL", True)),
            username=config.get("EMAIL_USER"),
            password=config.get("EMAIL_PASS"),
            default_sender=config.get("EMAIL_USER"),
            suppress_send=bool(config.get("MAIL_SUPPRESS_SEND", False)),
            max_workers=int(config.get("MAIL_MAX_WORKERS", 4)),
        )


@dataclass(frozen=True)
class Message:
    sender: str | None
    recipient: str
    subject: str
    html: str

    def as_mime(self) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender or ""
        msg["To"] = self.recipient
        msg["Subject"] = self.subject
        msg.attach(MIMEText(self.html, "html"))
        return msg


class Mailer:
    """Deliver messages over SMTP, optionally in the background.

    ``dispatch`` hands a single delivery attempt to a thread pool and returns
    immediately. The outcome is only logged; failures never reach the caller.
    """

    def __init__(self, settings: MailSettings, logger: logging.Logger | None = None):
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self.outbox: list[Message] = []
        self._executor = ThreadPoolExecutor(
            max_workers=settings.max_workers, thread_name_prefix="mailer"
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def send(self, message: Message) -> None:
        """Make one synchronous delivery attempt."""

        if self.settings.suppress_send:
            self.outbox.append(message)
            return

        smtp_class = smtplib.SMTP_SSL if self.settings.use_ssl else smtplib.SMTP
        with smtp_class(self.settings.server, self.settings.port) as server:
            if self.settings.username and self.settings.password:
                server.login(self.settings.username, self.settings.password)
            server.sendmail(
                message.sender or self.settings.default_sender or "",
                [message.recipient],
                message.as_mime().as_string(),
            )

    def dispatch(self, message: Message) -> Future:
        """Send ``message`` in the background and log the outcome."""

        future = self._executor.submit(self._deliver, message)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def flush(self, timeout: float | None = None) -> None:
        """Block until in-flight dispatches finish."""

        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def _deliver(self, message: Message) -> bool:
        try:
            self.send(message)
        except Exception as exc:
            self.logger.error(
                "Error sending email to %s: %s", message.recipient, exc, exc_info=exc
            )
            return False
        self.logger.info("Email sent to %s: %s", message.recipient, message.subject)
        return True

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
