"""Booking statistics for the admin analytics page."""

import calendar
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from barbershop_client.domain.bookings import BarberService, Booking, BookingStatus
from barbershop_client.domain.errors import ApiError, SessionExpiredError
from barbershop_client.domain.stats import BookingStats, ChartPoint, ChartRange
from barbershop_client.services.bookings import BookingService
from barbershop_client.services.catalog import CatalogService

DECEMBER = 12
JANUARY = 1

logger = logging.getLogger(__name__)


@dataclass
class AnalyticsService:
    """Loads bookings and services and derives revenue figures from them."""

    booking_service: BookingService
    catalog_service: CatalogService
    timeout_seconds: float = 5

    async def load(self) -> tuple[list[Booking], list[BarberService]]:
        """Fetch bookings and services; a failed fetch yields an empty list."""
        bookings: list[Booking] = []
        services: list[BarberService] = []
        try:
            bookings = await self.booking_service.list_bookings(
                timeout=self.timeout_seconds
            )
        except SessionExpiredError:
            raise
        except ApiError as exc:
            logger.warning(
                "Analytics bookings unavailable", extra={"error": exc.message}
            )
        try:
            services = await self.catalog_service.list_services(
                timeout=self.timeout_seconds
            )
        except SessionExpiredError:
            raise
        except ApiError as exc:
            logger.warning(
                "Analytics services unavailable", extra={"error": exc.message}
            )
        return bookings, services


def compute_stats(
    bookings: list[Booking], services: list[BarberService], today: date
) -> BookingStats:
    """Summarize the current month against the previous one."""
    prices = _price_index(services)
    if today.month == JANUARY:
        previous_year, previous_month = today.year - 1, DECEMBER
    else:
        previous_year, previous_month = today.year, today.month - 1

    current = [b for b in bookings if _in_month(b, today.year, today.month)]
    previous = [b for b in bookings if _in_month(b, previous_year, previous_month)]
    approved = _with_status(current, BookingStatus.APPROVED)
    revenue = _revenue(approved, prices)
    previous_revenue = _revenue(_with_status(previous, BookingStatus.APPROVED), prices)

    return BookingStats(
        total_bookings=len(current) or len(bookings),
        approved_bookings=len(approved),
        pending_bookings=len(_with_status(current, BookingStatus.PENDING)),
        rejected_bookings=len(_with_status(current, BookingStatus.REJECTED)),
        total_revenue=revenue,
        average_revenue=_round_half_up(revenue / len(approved)) if approved else 0,
        previous_month_revenue=previous_revenue,
        previous_month_bookings=len(previous),
        revenue_change=_percent_change(revenue, previous_revenue),
        bookings_change=_percent_change(len(current), len(previous)),
    )


def chart_series(
    bookings: list[Booking],
    services: list[BarberService],
    chart_range: ChartRange,
    now: datetime,
) -> list[ChartPoint]:
    """Bucket bookings over the chart range with approved revenue per bucket."""
    prices = _price_index(services)
    layout = _LAYOUTS[chart_range]
    start = _chart_start(bookings, chart_range, now)

    grouped: dict[str, tuple[int, float]] = {}
    for booking in bookings:
        moment = _booking_moment(booking)
        if moment is None or moment < start:
            continue
        bucket = moment.strftime(layout.key_format)
        count, revenue = grouped.get(bucket, (0, 0.0))
        if booking.status is BookingStatus.APPROVED:
            revenue += _booking_revenue(booking, prices)
        grouped[bucket] = (count + 1, revenue)

    series = []
    for index in range(layout.points):
        starts_at = layout.step(start, index)
        count, revenue = grouped.get(starts_at.strftime(layout.key_format), (0, 0.0))
        series.append(
            ChartPoint(
                starts_at=starts_at,
                label=starts_at.strftime(layout.label_format),
                count=count,
                revenue=revenue,
            )
        )
    return series


@dataclass(frozen=True)
class _ChartLayout:
    points: int
    step: Callable[[datetime, int], datetime]
    key_format: str
    label_format: str


def _hours(start: datetime, offset: int) -> datetime:
    return start + timedelta(hours=offset)


def _days(start: datetime, offset: int) -> datetime:
    return start + timedelta(days=offset)


def _years(start: datetime, offset: int) -> datetime:
    return _add_months(start, 12 * offset)


def _add_months(moment: datetime, months: int) -> datetime:
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return moment.replace(year=year, month=month + 1, day=min(moment.day, last_day))


_LAYOUTS: dict[ChartRange, _ChartLayout] = {
    ChartRange.ONE_DAY: _ChartLayout(24, _hours, "%Y-%m-%dT%H", "%H:00"),
    ChartRange.FIVE_DAYS: _ChartLayout(5, _days, "%Y-%m-%d", "%d %b"),
    ChartRange.ONE_MONTH: _ChartLayout(30, _days, "%Y-%m-%d", "%d %b"),
    ChartRange.ONE_YEAR: _ChartLayout(12, _add_months, "%Y-%m", "%b"),
    ChartRange.FIVE_YEARS: _ChartLayout(5, _years, "%Y", "%Y"),
    ChartRange.MAX: _ChartLayout(12, _days, "%Y-%m-%d", "%d %b"),
}


def _chart_start(
    bookings: list[Booking], chart_range: ChartRange, now: datetime
) -> datetime:
    if chart_range is ChartRange.ONE_DAY:
        return now - timedelta(days=1)
    if chart_range is ChartRange.FIVE_DAYS:
        return now - timedelta(days=5)
    if chart_range is ChartRange.ONE_YEAR:
        return _add_months(now, -12)
    if chart_range is ChartRange.FIVE_YEARS:
        return _add_months(now, -60)
    if chart_range is ChartRange.MAX:
        moments = [m for m in map(_booking_moment, bookings) if m is not None]
        return min(moments) if moments else _add_months(now, -12)
    return _add_months(now, -1)


def _booking_moment(booking: Booking) -> datetime | None:
    if not booking.date:
        return None
    try:
        day = date.fromisoformat(booking.date[:10])
    except ValueError:
        return None
    at = time()
    if booking.time:
        try:
            at = time.fromisoformat(booking.time[:5])
        except ValueError:
            at = time()
    return datetime.combine(day, at)


def _in_month(booking: Booking, year: int, month: int) -> bool:
    moment = _booking_moment(booking)
    return moment is not None and moment.year == year and moment.month == month


def _with_status(bookings: Iterable[Booking], status: BookingStatus) -> list[Booking]:
    return [booking for booking in bookings if booking.status is status]


def _price_index(services: list[BarberService]) -> dict[str, float]:
    return {service.id: service.price for service in services}


def _booking_revenue(booking: Booking, prices: dict[str, float]) -> float:
    return sum(prices.get(service_id, 0) for service_id in booking.service_ids)


def _revenue(bookings: Iterable[Booking], prices: dict[str, float]) -> float:
    return sum(_booking_revenue(booking, prices) for booking in bookings)


def _percent_change(current: float, previous: float) -> float | None:
    if previous > 0:
        return (current - previous) / previous * 100
    return None if current > 0 else 0.0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
