"""Dependency container wiring for the client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

import httpx

from barbershop_client.adapters.api_client import (
    Audience,
    HttpxApiClient,
    base_urls_from_settings,
)
from barbershop_client.adapters.file_session_storage import JsonFileSessionStorage
from barbershop_client.config import Settings
from barbershop_client.domain.bookings import BookingFilter
from barbershop_client.services.analytics import AnalyticsService
from barbershop_client.services.auth import AuthService
from barbershop_client.services.bookings import BookingService
from barbershop_client.services.catalog import CatalogService
from barbershop_client.services.navigation import Navigator
from barbershop_client.services.session_store import SessionStore, VisitorSessions
from barbershop_client.services.views import AdminBookingsView, ClientBookingView


@dataclass
class VisitorScope:
    """Dependencies bound to one visitor's session for one request."""

    session_store: SessionStore
    navigator: Navigator
    auth_service: AuthService
    catalog_service: CatalogService
    booking_service: BookingService
    analytics_service: AnalyticsService

    def admin_bookings_view(
        self, view_filter: BookingFilter = BookingFilter.ALL
    ) -> AdminBookingsView:
        """Create view state for one visit to the admin page."""
        return AdminBookingsView(self.booking_service, view_filter=view_filter)

    def client_booking_view(self) -> ClientBookingView:
        """Create view state for one visit to the booking page."""
        return ClientBookingView(self.booking_service, self.catalog_service)


@dataclass
class AppContainer:
    """Holds client-wide dependencies."""

    settings: Settings
    sessions: VisitorSessions
    http_client: httpx.AsyncClient
    base_urls: dict[Audience, str]
    close_resources: Callable[[], Awaitable[None]]

    def visitor(self, visitor_id: str) -> VisitorScope:
        """Wire the services of one visitor around that visitor's session."""
        session_store = self.sessions.store_for(visitor_id)
        navigator = Navigator()
        api_client = HttpxApiClient(
            base_urls=self.base_urls,
            session_store=session_store,
            navigator=navigator,
            http_client=self.http_client,
            origin=self.settings.client_origin,
        )
        catalog_service = CatalogService(api_client)
        booking_service = BookingService(api_client)
        return VisitorScope(
            session_store=session_store,
            navigator=navigator,
            auth_service=AuthService(api_client, session_store),
            catalog_service=catalog_service,
            booking_service=booking_service,
            analytics_service=AnalyticsService(
                booking_service=booking_service,
                catalog_service=catalog_service,
                timeout_seconds=self.settings.analytics_timeout_seconds,
            ),
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    http_client = httpx.AsyncClient(timeout=resolved_settings.request_timeout_seconds)

    async def close_resources() -> None:
        await http_client.aclose()

    return AppContainer(
        settings=resolved_settings,
        sessions=VisitorSessions(
            partial(JsonFileSessionStorage.for_visitor, resolved_settings.session_dir)
        ),
        http_client=http_client,
        base_urls=base_urls_from_settings(resolved_settings),
        close_resources=close_resources,
    )
