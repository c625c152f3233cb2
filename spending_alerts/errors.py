"""Exception hierarchy for the spending alerts service."""
from typing import Any, Dict, Optional


class SpendingAlertsError(Exception):
    """Base exception for all errors raised by this package."""
    pass


class ConfigError(SpendingAlertsError):
    """Raised when the configuration file is missing or invalid."""
    pass


class AdapterError(SpendingAlertsError):
    """Base exception for collaborator errors."""

    def __init__(
        self,
        message: str,
        adapter_name: str,
        error_code: Optional[str] = None,
        recoverable: bool = True,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.adapter_name = adapter_name
        self.error_code = error_code
        self.recoverable = recoverable
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": str(self),
            "adapter": self.adapter_name,
            "code": self.error_code,
            "recoverable": self.recoverable
        }


class PaymentApiError(AdapterError):
    """Raised when the payments API returns a body that fails validation."""

    def __init__(self, customer_id: str, original_error: Optional[Exception] = None):
        super().__init__(
            message=f'Failed to fetch payments for customer "{customer_id}": Invalid response from server',
            adapter_name="PaymentApi",
            error_code="INVALID_RESPONSE",
            recoverable=False,
            original_error=original_error
        )
        self.customer_id = customer_id
