"""
Payments API collaborator.

Fetches a customer's payments for one month over HTTP and validates the
response body before it enters the domain. Data from the remote service is
never trusted: any shape violation raises PaymentApiError.
"""
import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from urllib.parse import urljoin

from pydantic import TypeAdapter, ValidationError

from ..domain import CustomerId, MonthInYear, Payment
from ..errors import PaymentApiError
from ..events import EventEmitter
from .base import BaseAdapter, ConnectionMode
from .http_client import WILDCARD_PATH, HttpClient, HttpRequest, NullResponse

NULL_BASE_URL = "https://example.com/"

_payments_adapter = TypeAdapter(List[Payment])


@dataclass(frozen=True)
class PaymentApiConfig:
    base_url: str
    timeout_seconds: float = 30.0


@dataclass
class PaymentsFixture:
    """Payments a null PaymentApi returns for one customer and month."""
    customer_id: CustomerId
    month_in_year: MonthInYear
    payments: List[Payment] = field(default_factory=list)


def payments_path(customer_id: CustomerId, month_in_year: MonthInYear) -> str:
    """Relative path of the payments resource, e.g. payments-by-month/c-1/2024-05."""
    return f"payments-by-month/{customer_id}/{month_in_year.label}"


class PaymentApi(BaseAdapter):
    """Domain facade over the HTTP client for the payments service."""

    def __init__(self, config: PaymentApiConfig, http_client: HttpClient):
        super().__init__(http_client.mode)
        self._config = config
        self._http_client = http_client

    @classmethod
    def create(cls, config: PaymentApiConfig) -> "PaymentApi":
        return cls(config, HttpClient.create(timeout_seconds=config.timeout_seconds))

    @classmethod
    def create_null(cls, fixtures: Optional[Sequence[PaymentsFixture]] = None) -> "PaymentApi":
        """
        Create an API that serves the given fixtures.

        The fixtures are translated into canned HTTP responses, so requests
        still run through the real request-building and validation code.
        Unconfigured customer/month pairs answer with no payments.
        """
        http_client = HttpClient.create_null(_fixtures_to_responses(fixtures or []))
        return cls(PaymentApiConfig(base_url=NULL_BASE_URL), http_client)

    @property
    def http_events(self) -> EventEmitter:
        """Events of the underlying HTTP client."""
        return self._http_client.events

    async def fetch_user_payments_by_month(
        self,
        customer_id: CustomerId,
        month_in_year: MonthInYear
    ) -> List[Payment]:
        """
        Fetch all payments of a customer in one month.

        Raises:
            PaymentApiError: If the body is not a JSON array of payments.
        """
        response = await self._http_client.send_request(HttpRequest(
            method="GET",
            url=self.payments_url(customer_id, month_in_year)
        ))

        try:
            payments = _payments_adapter.validate_json(response.body)
        except ValidationError as e:
            self.logger.error(f"Invalid payments response for {customer_id} ({month_in_year.label}): {e}")
            raise PaymentApiError(customer_id, original_error=e) from e

        self.logger.info(f"Fetched {len(payments)} payment(s) for {customer_id} in {month_in_year.label}")
        return payments

    def payments_url(self, customer_id: CustomerId, month_in_year: MonthInYear) -> str:
        return urljoin(self._config.base_url, payments_path(customer_id, month_in_year))


def _fixtures_to_responses(fixtures: Sequence[PaymentsFixture]) -> Dict[str, NullResponse]:
    responses = {
        "/" + payments_path(fixture.customer_id, fixture.month_in_year): NullResponse(
            status=200,
            body=json.dumps([payment.model_dump() for payment in fixture.payments])
        )
        for fixture in fixtures
    }
    responses[WILDCARD_PATH] = NullResponse(status=200, body="[]")
    return responses
