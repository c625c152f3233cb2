"""
Infrastructure collaborators.

Each collaborator can be created live (``create``) or as a null instance
(``create_null``) that performs no real side effect:

- Calendar: current and previous billing month
- HttpClient: outbound HTTP via aiohttp
- SmtpClient: outbound mail via smtplib
- PaymentApi: payments service facade over HttpClient
- EmailService: customer notification facade over SmtpClient
"""
from .base import BaseAdapter, ConnectionMode
from .calendar import Calendar
from .http_client import HttpClient, HttpRequest, HttpResponse, NullResponse, RequestSent
from .smtp_client import Email, EmailSent, SmtpClient, SmtpServerAddress
from .payment_api import PaymentApi, PaymentApiConfig, PaymentsFixture
from .email_service import EmailService, EmailServiceConfig, EmailSentToCustomer

__all__ = [
    "BaseAdapter",
    "ConnectionMode",
    "Calendar",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "NullResponse",
    "RequestSent",
    "Email",
    "EmailSent",
    "SmtpClient",
    "SmtpServerAddress",
    "PaymentApi",
    "PaymentApiConfig",
    "PaymentsFixture",
    "EmailService",
    "EmailServiceConfig",
    "EmailSentToCustomer",
]
