"""
Spending Alerts

Detects unusually high card spending and emails the customer about it.
Infrastructure collaborators can be created live or as null instances, so
the whole flow runs in tests without network or clock access.
"""

__version__ = "1.0.0"

from .domain import (
    EmailMessage,
    MonthInYear,
    Payment,
    SpendingChange,
    UnusualSpending,
    detect_unusual_spending,
    group_payments_by_category,
    unusual_spending_to_email_message,
)
from .errors import AdapterError, ConfigError, PaymentApiError, SpendingAlertsError
from .events import EventEmitter, OutputTracker, track_output
from .application import Application
from .config import ApplicationConfig, load_config

__all__ = [
    # Domain
    "EmailMessage",
    "MonthInYear",
    "Payment",
    "SpendingChange",
    "UnusualSpending",
    "detect_unusual_spending",
    "group_payments_by_category",
    "unusual_spending_to_email_message",
    # Errors
    "AdapterError",
    "ConfigError",
    "PaymentApiError",
    "SpendingAlertsError",
    # Events
    "EventEmitter",
    "OutputTracker",
    "track_output",
    # Application
    "Application",
    "ApplicationConfig",
    "load_config",
]
