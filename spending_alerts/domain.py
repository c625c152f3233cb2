"""
Domain model and pure business rules for unusual spending detection.

Nothing in this module performs I/O. The application layer sandwiches these
functions between reading the calendar / fetching payments and sending the
notification email.
"""
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Spending counts as unusual once it reaches 150% of the previous month.
UNUSUAL_SPENDING_FACTOR = 1.5

CustomerId = str


@dataclass(frozen=True)
class MonthInYear:
    """A billing period. Months are 1-based."""
    month: int
    year: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")

    def previous(self) -> "MonthInYear":
        if self.month > 1:
            return MonthInYear(month=self.month - 1, year=self.year)
        return MonthInYear(month=12, year=self.year - 1)

    @property
    def label(self) -> str:
        """Period formatted as YYYY-MM."""
        return f"{self.year}-{self.month:02d}"


class Payment(BaseModel):
    """A single card payment as returned by the payments API."""
    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    price: float = Field(..., gt=0, allow_inf_nan=False, description="Payment amount, always positive")
    category: str = Field(..., min_length=1, description="Spending category")
    description: str = Field(..., description="Free-text description")


@dataclass(frozen=True)
class SpendingChange:
    """Spending in one category this month compared to the month before."""
    spending: float
    before: float


UnusualSpending = Dict[str, SpendingChange]


@dataclass(frozen=True)
class EmailMessage:
    """Rendered notification ready to be sent to a customer."""
    subject: str
    body: str


def group_payments_by_category(payments: Iterable[Payment]) -> Dict[str, float]:
    """Sum payment prices per category."""
    totals: Dict[str, float] = defaultdict(float)
    for payment in payments:
        totals[payment.category] += payment.price
    return dict(totals)


def is_unusual_spending(spending: float, before: float) -> bool:
    return spending >= before * UNUSUAL_SPENDING_FACTOR


def detect_unusual_spending(
    previous_payments: Iterable[Payment],
    current_payments: Iterable[Payment]
) -> Optional[UnusualSpending]:
    """
    Compare this month's spending per category with last month's.

    Only categories with payments in the current month are considered. A
    category without spending last month counts as 0 before and therefore
    always qualifies.

    Returns:
        Mapping of category to SpendingChange for every unusual category,
        or None when there is no unusual spending at all.
    """
    before_totals = group_payments_by_category(previous_payments)
    current_totals = group_payments_by_category(current_payments)

    unusual: UnusualSpending = {}
    for category, spending in current_totals.items():
        before = before_totals.get(category, 0)
        if is_unusual_spending(spending, before):
            unusual[category] = SpendingChange(spending=spending, before=before)

    return unusual or None


def format_amount(value: float) -> str:
    """Render a currency amount with exactly two decimal places."""
    return f"{value:.2f}"


def unusual_spending_to_email_message(
    month_in_year: MonthInYear,
    unusual_spending: UnusualSpending
) -> EmailMessage:
    """
    Render the notification email for detected unusual spending.

    Must only be called with a non-empty result of detect_unusual_spending.

    Raises:
        ValueError: If unusual_spending is empty.
    """
    if not unusual_spending:
        raise ValueError("Cannot create an email message from empty unusual spending")

    total = sum(change.spending for change in unusual_spending.values())
    subject = f"Unusual spending of ${format_amount(total)} detected!"

    lines: List[str] = [
        "Hello card user!",
        "",
        f"We have detected unusually high spending on your card in these categories in {month_in_year.label}:",
        "",
    ]
    lines.extend(
        f"* You spent ${format_amount(change.spending)} on {category}"
        for category, change in unusual_spending.items()
    )
    lines.extend([
        "",
        "Love,",
        "",
        "The Credit Card Company",
    ])

    return EmailMessage(subject=subject, body="\n".join(lines))
