"""
Notification Senders

Out-of-band delivery of the santa disclosure email. The message names
neither the recipient nor the santa; it only carries the approved wish and
shipping address.
"""

import asyncio
import html
import smtplib
from email.message import EmailMessage
from typing import Optional
from typing import Protocol

from loguru import logger

SANTA_EMAIL_SUBJECT = "🎁 You Are a Secret Santa!"


class NotificationSender(Protocol):
    """Delivers the disclosure message to one santa."""

    async def send_santa_email(self, to: str, wish: str, address: str) -> None: ...


def build_santa_message(from_email: str, to: str, wish: str, address: str) -> EmailMessage:
    """Build the multipart (text + HTML) disclosure message."""
    message = EmailMessage()
    message["Subject"] = SANTA_EMAIL_SUBJECT
    message["From"] = from_email
    message["To"] = to

    message.set_content(
        "Hello Secret Santa,\n\n"
        "You have been assigned a gift recipient. Their name is hidden to keep the surprise.\n\n"
        f"Their wish:\n{wish}\n\n"
        f"Ship the gift to:\n{address}\n\n"
        "Remember to mark the gift as sent once it is on its way.\n"
    )
    message.add_alternative(
        "<html><body>"
        "<h2>🎁 You Are a Secret Santa!</h2>"
        "<p>You have been assigned a gift recipient. "
        "<strong>Their name is hidden</strong> to keep the surprise.</p>"
        f"<h3>Their wish</h3><p>{html.escape(wish)}</p>"
        f"<h3>Ship the gift to</h3><pre>{html.escape(address)}</pre>"
        "<p>Remember to mark the gift as sent once it is on its way.</p>"
        "</body></html>",
        subtype="html",
    )
    return message


class SmtpNotificationSender:
    """Sends disclosure emails through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_email: str = "secret-santa-noreply@example.com",
        use_tls: bool = True,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.use_tls = use_tls
        self.timeout = timeout

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send_santa_email(self, to: str, wish: str, address: str) -> None:
        """
        Send the disclosure email.

        smtplib is blocking, so delivery runs in a worker thread.

        Raises:
            smtplib.SMTPException / OSError: Delivery failed
        """
        message = build_santa_message(self.from_email, to, wish, address)
        await asyncio.to_thread(self._deliver, message)
        logger.info("Santa email delivered", to=to, smtp_host=self.host)


class LogNotificationSender:
    """Development sender: records the delivery in the log without the content."""

    async def send_santa_email(self, to: str, wish: str, address: str) -> None:
        logger.info("SMTP not configured - santa email not sent", to=to)
