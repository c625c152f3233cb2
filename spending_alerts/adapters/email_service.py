"""Email service collaborator for notifying bank customers."""
from dataclasses import dataclass
from typing import Optional

from ..domain import CustomerId
from ..events import Event, EventEmitter
from .base import BaseAdapter
from .smtp_client import Email, SmtpClient, SmtpServerAddress

CUSTOMER_EMAIL_DOMAIN = "customer.my-bank.com"


@dataclass(frozen=True)
class EmailServiceConfig:
    smtp_server: SmtpServerAddress
    sender_address: str
    timeout_seconds: float = 30.0


NULL_CONFIG = EmailServiceConfig(
    smtp_server=SmtpServerAddress(host="null-smtp.example.org", port=1),
    sender_address="null-sender@example.org",
)


@dataclass(frozen=True)
class EmailSentToCustomer(Event):
    """A customer was emailed. Carries no transport details."""
    type = "emailSentToCustomer"

    customer_id: CustomerId
    subject: str
    body: str


def customer_email_address(customer_id: CustomerId) -> str:
    if not customer_id:
        raise ValueError("Customer id must not be empty")
    return f"{customer_id}@{CUSTOMER_EMAIL_DOMAIN}"


class EmailService(BaseAdapter):
    """Sends emails to customers through the SMTP client."""

    def __init__(self, config: EmailServiceConfig, smtp_client: SmtpClient):
        super().__init__(smtp_client.mode)
        self._config = config
        self._smtp_client = smtp_client
        self.events = EventEmitter()

    @classmethod
    def create(cls, config: EmailServiceConfig) -> "EmailService":
        return cls(config, SmtpClient.create(timeout_seconds=config.timeout_seconds))

    @classmethod
    def create_null(
        cls,
        config: Optional[EmailServiceConfig] = None,
        error_on_send: Optional[Exception] = None
    ) -> "EmailService":
        return cls(config or NULL_CONFIG, SmtpClient.create_null(error_on_send=error_on_send))

    @property
    def smtp_events(self) -> EventEmitter:
        """Events of the underlying SMTP client."""
        return self._smtp_client.events

    async def send_email_to_customer(self, customer_id: CustomerId, subject: str, body: str):
        """Send an email to the customer's bank address."""
        await self._smtp_client.send_email(self._config.smtp_server, Email(
            sender=self._config.sender_address,
            recipient=customer_email_address(customer_id),
            subject=subject,
            text=body
        ))
        self.events.emit(EmailSentToCustomer(customer_id=customer_id, subject=subject, body=body))
