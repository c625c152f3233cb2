"""
Unusual spending application service.

Connects the pure domain functions with the infrastructure collaborators.
The pure functions detect_unusual_spending and
unusual_spending_to_email_message sit between reading the calendar and
fetching payments on one side and notifying the customer on the other.
trigger_unusual_spending_email holds no business logic of its own.
"""
import logging
from typing import List, Optional, Protocol

from .adapters.calendar import Calendar
from .adapters.email_service import EmailService
from .adapters.payment_api import PaymentApi
from .config import ApplicationConfig
from .domain import (
    CustomerId,
    EmailMessage,
    MonthInYear,
    Payment,
    detect_unusual_spending,
    unusual_spending_to_email_message,
)
from .events import log_events


class CalendarProtocol(Protocol):
    def get_current_month_and_year(self) -> MonthInYear:
        ...

    def get_previous_month_and_year(self) -> MonthInYear:
        ...


class PaymentApiProtocol(Protocol):
    async def fetch_user_payments_by_month(
        self,
        customer_id: CustomerId,
        month_in_year: MonthInYear
    ) -> List[Payment]:
        ...


class EmailServiceProtocol(Protocol):
    async def send_email_to_customer(self, customer_id: CustomerId, subject: str, body: str) -> None:
        ...


class Application:
    """Checks a customer's spending and emails them when it is unusual."""

    def __init__(
        self,
        calendar: CalendarProtocol,
        payment_api: PaymentApiProtocol,
        email_service: EmailServiceProtocol
    ):
        self.calendar = calendar
        self.payment_api = payment_api
        self.email_service = email_service
        self.logger = logging.getLogger("SpendingAlerts.Application")

    @classmethod
    def create(cls, config: ApplicationConfig) -> "Application":
        """Wire live collaborators and log every effect they perform."""
        payment_api = PaymentApi.create(config.payment_api)
        email_service = EmailService.create(config.email_service)

        log_events(payment_api.http_events, payment_api.logger)
        log_events(email_service.smtp_events, email_service.logger)
        log_events(email_service.events, email_service.logger)

        return cls(Calendar.create(), payment_api, email_service)

    async def trigger_unusual_spending_email(self, customer_id: CustomerId) -> Optional[EmailMessage]:
        """
        Run one spending check for a customer.

        Returns:
            The email message that was sent, or None when no unusual
            spending was detected.
        """
        current_month = self.calendar.get_current_month_and_year()
        previous_month = self.calendar.get_previous_month_and_year()

        self.logger.info(f"Checking {customer_id}: {current_month.label} vs {previous_month.label}")

        current_payments = await self.payment_api.fetch_user_payments_by_month(customer_id, current_month)
        previous_payments = await self.payment_api.fetch_user_payments_by_month(customer_id, previous_month)

        unusual_spending = detect_unusual_spending(previous_payments, current_payments)
        if unusual_spending is None:
            self.logger.info(f"No unusual spending for {customer_id}")
            return None

        message = unusual_spending_to_email_message(current_month, unusual_spending)
        await self.email_service.send_email_to_customer(customer_id, message.subject, message.body)

        self.logger.info(f"Notified {customer_id} about {len(unusual_spending)} category(ies)")
        return message
