"""Calendar collaborator reporting the current and previous billing month."""
from datetime import date
from typing import Callable, Optional, Protocol

from ..domain import MonthInYear
from .base import BaseAdapter, ConnectionMode

DEFAULT_NULL_MONTH = MonthInYear(month=1, year=1970)


class Today(Protocol):
    """The part of a date the calendar reads."""
    month: int
    year: int


TodayFactory = Callable[[], Today]


class Calendar(BaseAdapter):
    """Reads the current month from the system clock or from a fixed value."""

    def __init__(self, today: TodayFactory, mode: ConnectionMode = ConnectionMode.LIVE):
        super().__init__(mode)
        self._today = today

    @classmethod
    def create(cls) -> "Calendar":
        return cls(date.today)

    @classmethod
    def create_null(cls, month_in_year: Optional[MonthInYear] = None) -> "Calendar":
        """Calendar frozen at a month (January 1970 unless configured)."""
        fixed = month_in_year or DEFAULT_NULL_MONTH
        return cls(lambda: fixed, mode=ConnectionMode.NULL)

    def get_current_month_and_year(self) -> MonthInYear:
        today = self._today()
        return MonthInYear(month=today.month, year=today.year)

    def get_previous_month_and_year(self) -> MonthInYear:
        return self.get_current_month_and_year().previous()
