"""
SMTP client collaborator.

Live instances talk to a real SMTP server through smtplib, running each
blocking step in a worker thread. Null instances use an in-memory connection
that succeeds immediately or fails with a configured error.
"""
import asyncio
import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText
from typing import Callable, Optional, Protocol

from ..events import Event, EventEmitter
from .base import BaseAdapter, ConnectionMode

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class SmtpServerAddress:
    host: str
    port: int


@dataclass(frozen=True)
class Email:
    """A single-recipient plain text email."""
    sender: str
    recipient: str
    subject: str
    text: str

    def __post_init__(self):
        for name in ("sender", "recipient", "subject", "text"):
            if not getattr(self, name):
                raise ValueError(f"Email {name} must not be empty")


@dataclass(frozen=True)
class EmailSent(Event):
    type = "emailSent"

    smtp_server: SmtpServerAddress
    email: Email


class Connection(Protocol):
    """The subset of an SMTP conversation the client relies on."""

    async def connect(self) -> None:
        ...

    async def send(self, message: MIMEText) -> None:
        ...

    async def close(self) -> None:
        ...


ConnectionFactory = Callable[[SmtpServerAddress], Connection]


class SmtpClient(BaseAdapter):
    """Sends emails through connections produced by an injected factory."""

    def __init__(self, create_connection: ConnectionFactory, mode: ConnectionMode = ConnectionMode.LIVE):
        super().__init__(mode)
        self._create_connection = create_connection
        self.events = EventEmitter()

    @classmethod
    def create(cls, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> "SmtpClient":
        return cls(lambda address: SmtplibConnection(address, timeout_seconds))

    @classmethod
    def create_null(cls, error_on_send: Optional[Exception] = None) -> "SmtpClient":
        """Create a client whose sends succeed, or fail with error_on_send."""
        return cls(lambda address: NullConnection(error_on_send), mode=ConnectionMode.NULL)

    async def send_email(self, smtp_server: SmtpServerAddress, email: Email):
        """
        Connect, send one message and close the connection.

        The connection is closed on every exit path. EmailSent is emitted
        only when the message was accepted.
        """
        connection = self._create_connection(smtp_server)
        await connection.connect()

        try:
            await connection.send(compose_message(email))
            self.logger.info(f"Email sent to {email.recipient} via {smtp_server.host}:{smtp_server.port}")
            self.events.emit(EmailSent(smtp_server=smtp_server, email=email))
        finally:
            await connection.close()


def compose_message(email: Email) -> MIMEText:
    message = MIMEText(email.text, "plain", "utf-8")
    message["From"] = email.sender
    message["To"] = email.recipient
    message["Subject"] = email.subject
    return message


class SmtplibConnection:
    """Connection backed by smtplib.SMTP."""

    def __init__(self, address: SmtpServerAddress, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self._address = address
        self._smtp = smtplib.SMTP(timeout=timeout_seconds)

    async def connect(self) -> None:
        await asyncio.to_thread(self._smtp.connect, self._address.host, self._address.port)

    async def send(self, message: MIMEText) -> None:
        await asyncio.to_thread(self._smtp.send_message, message)

    async def close(self) -> None:
        await asyncio.to_thread(self._quit)

    def _quit(self):
        try:
            self._smtp.quit()
        except smtplib.SMTPServerDisconnected:
            self._smtp.close()


class NullConnection:
    """
    Embedded stub for SmtplibConnection.

    Only implements connect/send/close; sending fails with the configured
    error, everything else succeeds immediately.
    """

    def __init__(self, error_on_send: Optional[Exception] = None):
        self._error_on_send = error_on_send

    async def connect(self) -> None:
        pass

    async def send(self, message: MIMEText) -> None:
        if self._error_on_send is not None:
            raise self._error_on_send

    async def close(self) -> None:
        pass
