"""
Pytest fixtures for Spending Alerts testing.

Provides:
- Payment factory
- Sample billing periods and payment lists
- Null collaborators
"""

import pytest

from spending_alerts.adapters import Calendar, EmailService, PaymentApi, PaymentsFixture
from spending_alerts.domain import MonthInYear, Payment


# =============================================================================
# PAYMENT FIXTURES
# =============================================================================

@pytest.fixture
def payment_factory():
    """Factory for payments with sensible defaults."""
    def _create(**overrides) -> Payment:
        fields = {
            "price": 1.0,
            "category": "factory-payment",
            "description": "An example payment",
        }
        fields.update(overrides)
        return Payment(**fields)
    return _create


@pytest.fixture
def customer_id():
    return "customer-123"


@pytest.fixture
def current_month():
    return MonthInYear(month=11, year=2024)


@pytest.fixture
def previous_month():
    return MonthInYear(month=10, year=2024)


@pytest.fixture
def previous_month_payments(payment_factory):
    """Spending in October 2024."""
    return [
        payment_factory(price=99.99, category="electronics"),
        payment_factory(price=149.99, category="electronics"),
        payment_factory(price=29.99, category="home"),
        payment_factory(price=150.99, category="clothing"),
    ]


@pytest.fixture
def unusual_current_month_payments(payment_factory):
    """November 2024 with unusual electronics and new beauty spending."""
    return [
        payment_factory(price=70.89, category="electronics"),
        payment_factory(price=375.0, category="electronics"),
        payment_factory(price=39.99, category="home"),
        payment_factory(price=200.49, category="beauty"),
    ]


@pytest.fixture
def usual_current_month_payments(payment_factory):
    """November 2024 without any category reaching 150% of October."""
    return [
        payment_factory(price=70.89, category="electronics"),
        payment_factory(price=39.99, category="home"),
        payment_factory(price=200.49, category="clothing"),
    ]


# =============================================================================
# NULL COLLABORATOR FIXTURES
# =============================================================================

@pytest.fixture
def null_calendar(current_month):
    return Calendar.create_null(current_month)


@pytest.fixture
def null_payment_api_factory(customer_id, current_month, previous_month):
    """Null PaymentApi serving the given payments for November and October."""
    def _create(previous_payments, current_payments) -> PaymentApi:
        return PaymentApi.create_null([
            PaymentsFixture(customer_id, previous_month, previous_payments),
            PaymentsFixture(customer_id, current_month, current_payments),
        ])
    return _create


@pytest.fixture
def null_email_service():
    return EmailService.create_null()
