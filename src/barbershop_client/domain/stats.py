"""Domain models for booking analytics."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ChartRange(Enum):
    """Time window of the revenue chart."""

    ONE_DAY = "1D"
    FIVE_DAYS = "5D"
    ONE_MONTH = "1M"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"
    MAX = "Max"


@dataclass(frozen=True)
class BookingStats:
    """Current-month booking and revenue figures."""

    total_bookings: int
    approved_bookings: int
    pending_bookings: int
    rejected_bookings: int
    total_revenue: float
    average_revenue: int
    previous_month_revenue: float
    previous_month_bookings: int
    revenue_change: float | None
    bookings_change: float | None


@dataclass(frozen=True)
class ChartPoint:
    """One bucket of the chart series."""

    starts_at: datetime
    label: str
    count: int
    revenue: float
