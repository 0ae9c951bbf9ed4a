"""Notification gateways that deliver one-time codes by email."""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

import anyio

from app.core.config import Settings
from app.core.errors import NotificationError

logger = logging.getLogger(__name__)

OTP_EMAIL_SUBJECT = "Email verification"


@dataclass(frozen=True)
class MailOptions:
    """A single outgoing message."""

    from_address: str
    to: str
    subject: str
    html: str


class NotificationGateway(Protocol):
    async def send(self, options: MailOptions) -> None:
        """Deliver the message or raise `NotificationError`."""
        ...


def render_otp_email(otp_code: str, expire_minutes: int) -> str:
    """HTML body embedding the plaintext code and its validity window."""
    return f"""
        <h1>Your OTP for Verification</h1>
        <p>Dear User,</p>
        <p>Your OTP is <strong>{otp_code}</strong>. Please use this code to verify your email address. It expires in {expire_minutes} minutes</p>
        <p>If you didn't request this OTP, please ignore this email.</p>
        <p>Thank you!</p>
    """


class SMTPEmailGateway:
    """Send mail over SMTP with STARTTLS using credentials from `Settings`."""

    def __init__(self, config: Settings):
        self.server = config.SMTP_SERVER
        self.port = int(config.SMTP_PORT)
        self.username = config.SMTP_USERNAME
        self.password = config.SMTP_PASSWORD

    def _send(self, options: MailOptions) -> None:
        """Blocking SMTP exchange executed in a worker thread."""
        if not all([self.server, self.username, self.password, options.from_address]):
            raise RuntimeError("SMTP settings are incomplete.")

        message = MIMEMultipart()
        message["From"] = options.from_address
        message["To"] = options.to
        message["Subject"] = options.subject
        message.attach(MIMEText(options.html, "html"))

        with smtplib.SMTP(self.server, self.port, timeout=20) as server:
            server.ehlo()
            server.starttls()
            server.ehlo()
            server.login(self.username, self.password)
            server.send_message(message)

    async def send(self, options: MailOptions) -> None:
        """Run the SMTP exchange off the event loop; any failure is fatal to the caller."""
        try:
            await anyio.to_thread.run_sync(self._send, options)
        except (OSError, smtplib.SMTPException, RuntimeError) as exc:
            logger.error("Failed to send email to %s: %s", options.to, exc)
            raise NotificationError("Failed to send verification code.") from exc
        logger.info("Email sent to %s", options.to)


class ConsoleEmailGateway:
    """Development gateway: writes the message to the log instead of sending it."""

    async def send(self, options: MailOptions) -> None:
        logger.info("Email to %s [%s]:%s", options.to, options.subject, options.html)


def build_email_gateway(config: Settings) -> NotificationGateway:
    """Pick the gateway named by `EMAIL_BACKEND`."""
    if config.EMAIL_BACKEND == "console":
        return ConsoleEmailGateway()
    return SMTPEmailGateway(config)
