"""Page view state for the booking pages.

Each view owns the data one page shows. Responses that arrive after a newer
refresh was started, or after the page was left, are dropped.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field

from barbershop_client import messages
from barbershop_client.domain.bookings import (
    Barber,
    BarberService,
    Booking,
    BookingDraft,
    BookingFilter,
    BookingStatus,
)
from barbershop_client.domain.errors import (
    ApiError,
    NetworkError,
    SessionExpiredError,
)
from barbershop_client.domain.sessions import Identity
from barbershop_client.services.bookings import BookingService
from barbershop_client.services.catalog import CatalogService

logger = logging.getLogger(__name__)


@dataclass
class _RequestTracker:
    """Issues request tickets and tells whether a ticket is still current."""

    latest: int = 0
    closed: bool = False

    def issue(self) -> int:
        self.latest += 1
        return self.latest

    def is_current(self, ticket: int) -> bool:
        return not self.closed and ticket == self.latest


@dataclass
class AdminBookingsView:
    """Admin booking list with filter and status actions."""

    booking_service: BookingService
    view_filter: BookingFilter = BookingFilter.ALL
    bookings: list[Booking] = field(default_factory=list)
    loading: bool = False
    error: str = ""
    alert: str | None = None
    _tracker: _RequestTracker = field(default_factory=_RequestTracker, repr=False)

    async def refresh(self) -> None:
        """Reload the list for the current filter."""
        ticket = self._tracker.issue()
        self.loading = True
        self.error = ""
        try:
            bookings = await self.booking_service.list_bookings(self.view_filter)
        except SessionExpiredError:
            raise
        except ApiError as exc:
            logger.warning("Failed to load bookings", extra={"error": exc.message})
            if self._tracker.is_current(ticket):
                self.error = _user_message(exc, messages.LOAD_BOOKINGS_FAILED)
                self.loading = False
            return
        if self._tracker.is_current(ticket):
            self.bookings = bookings
            self.loading = False

    async def set_filter(self, view_filter: BookingFilter) -> None:
        """Switch the filter and reload."""
        self.view_filter = view_filter
        await self.refresh()

    async def approve(self, booking_id: str) -> bool:
        return await self._apply(
            self.booking_service.approve(booking_id), messages.APPROVE_FAILED
        )

    async def reject(self, booking_id: str) -> bool:
        return await self._apply(
            self.booking_service.reject(booking_id), messages.REJECT_FAILED
        )

    async def set_status(self, booking_id: str, status: BookingStatus) -> bool:
        return await self._apply(
            self.booking_service.set_status(booking_id, status),
            messages.STATUS_UPDATE_FAILED,
        )

    def close(self) -> None:
        """Detach the view; late responses no longer change it."""
        self._tracker.closed = True

    async def _apply(self, operation: Awaitable[None], fallback: str) -> bool:
        try:
            await operation
        except SessionExpiredError:
            raise
        except ApiError as exc:
            logger.warning("Booking update failed", extra={"error": exc.message})
            if not self._tracker.closed:
                self.alert = _user_message(exc, fallback)
            return False
        await self.refresh()
        return True


@dataclass
class ClientBookingView:
    """Booking form page: catalog, own bookings, and submission."""

    booking_service: BookingService
    catalog_service: CatalogService
    barbers: list[Barber] = field(default_factory=list)
    services: list[BarberService] = field(default_factory=list)
    my_bookings: list[Booking] = field(default_factory=list)
    error: str = ""
    success: bool = False
    _tracker: _RequestTracker = field(default_factory=_RequestTracker, repr=False)

    async def load(self) -> None:
        """Load barbers, services and own bookings concurrently."""
        ticket = self._tracker.issue()
        try:
            services, barbers = await asyncio.gather(
                self.catalog_service.list_services(),
                self.catalog_service.list_barbers(),
            )
        except SessionExpiredError:
            raise
        except ApiError as exc:
            logger.warning("Failed to load catalog", extra={"error": exc.message})
            if self._tracker.is_current(ticket):
                self.error = messages.LOAD_CATALOG_FAILED
        else:
            if self._tracker.is_current(ticket):
                self.services = services
                self.barbers = barbers
        await self.refresh_my_bookings()

    async def refresh_my_bookings(self) -> None:
        """Reload own bookings; failures are logged, not shown."""
        try:
            bookings = await self.booking_service.list_my_bookings()
        except SessionExpiredError:
            raise
        except ApiError as exc:
            logger.warning("Failed to load own bookings", extra={"error": exc.message})
            return
        if not self._tracker.closed:
            self.my_bookings = bookings

    async def submit(self, client: Identity, draft: BookingDraft) -> Booking | None:
        """Submit the form; returns the created booking or None on failure."""
        self.error = ""
        self.success = False
        try:
            created = await self.booking_service.create_booking(client, draft)
        except SessionExpiredError:
            raise
        except ApiError as exc:
            self.error = _user_message(exc, messages.NETWORK_ERROR)
            return None
        self.success = True
        await self.refresh_my_bookings()
        return created

    def close(self) -> None:
        """Detach the view; late responses no longer change it."""
        self._tracker.closed = True


def _user_message(exc: ApiError, fallback: str) -> str:
    if isinstance(exc, NetworkError):
        return messages.NETWORK_ERROR
    return exc.message or fallback
