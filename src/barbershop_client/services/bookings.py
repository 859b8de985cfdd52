"""Booking workflow: listing, creation, and admin status transitions."""

import logging
from dataclasses import dataclass

import httpx

from barbershop_client import messages
from barbershop_client.adapters.api_client import ApiClient, Audience, read_json
from barbershop_client.domain.bookings import (
    Booking,
    BookingDraft,
    BookingFilter,
    BookingStatus,
)
from barbershop_client.domain.errors import ServerRejectionError
from barbershop_client.domain.responses import extract_error_message, unwrap_list
from barbershop_client.domain.sessions import Identity

BOOKINGS_ENDPOINT = "/bookings"
MY_BOOKINGS_ENDPOINT = "/bookings/my"
PENDING_BOOKINGS_ENDPOINT = "/bookings/pending"

logger = logging.getLogger(__name__)


@dataclass
class BookingService:
    """Calls the bookings API group.

    Status changes are not re-authorized here; the admin pages that expose them
    are guarded by role.
    """

    api_client: ApiClient

    async def list_bookings(
        self,
        view_filter: BookingFilter = BookingFilter.ALL,
        timeout: float | None = None,
    ) -> list[Booking]:
        """Return bookings for the admin listing.

        Pending bookings come from their own server query; approved and
        rejected are filtered locally from the full list.
        """
        endpoint = (
            PENDING_BOOKINGS_ENDPOINT
            if view_filter is BookingFilter.PENDING
            else BOOKINGS_ENDPOINT
        )
        bookings = await self._list(endpoint, timeout)
        if view_filter in {BookingFilter.ALL, BookingFilter.PENDING}:
            return bookings
        return [booking for booking in bookings if view_filter.matches(booking)]

    async def list_my_bookings(self) -> list[Booking]:
        """Return the current client's bookings."""
        return await self._list(MY_BOOKINGS_ENDPOINT)

    async def create_booking(self, client: Identity, draft: BookingDraft) -> Booking:
        """Submit a new booking; it is always created as pending."""
        payload = draft.to_payload(client.id)
        logger.info("Submitting booking", extra={"client_id": client.id})
        response = await self.api_client.request(
            BOOKINGS_ENDPOINT,
            method="POST",
            json=payload,
            audience=Audience.BOOKINGS,
        )
        body = read_json(response)
        if not response.is_success:
            raise ServerRejectionError(
                extract_error_message(
                    body,
                    messages.booking_failed(response.status_code),
                    keys=("message", "error"),
                ),
                response.status_code,
            )
        created = body.get("data", body) if isinstance(body, dict) else None
        if isinstance(created, dict) and _has_id(created):
            return Booking.from_payload(created)
        return Booking.from_payload({**payload, "id": ""})

    async def approve(self, booking_id: str) -> None:
        """Move a booking to approved."""
        await self._patch(
            f"{BOOKINGS_ENDPOINT}/{booking_id}/approve", None, messages.APPROVE_FAILED
        )

    async def reject(self, booking_id: str) -> None:
        """Move a booking to rejected."""
        await self._patch(
            f"{BOOKINGS_ENDPOINT}/{booking_id}/reject", None, messages.REJECT_FAILED
        )

    async def set_status(self, booking_id: str, status: BookingStatus) -> None:
        """Overwrite a booking's status with any workflow state."""
        await self._patch(
            f"{BOOKINGS_ENDPOINT}/{booking_id}/status",
            {"status": status.value},
            messages.STATUS_UPDATE_FAILED,
        )

    async def _list(self, endpoint: str, timeout: float | None = None) -> list[Booking]:
        response = await self.api_client.request(
            endpoint, audience=Audience.BOOKINGS, timeout=timeout
        )
        if not response.is_success:
            raise ServerRejectionError(
                _failure_message(response, messages.LOAD_BOOKINGS_FAILED),
                response.status_code,
            )
        return [
            Booking.from_payload(item)
            for item in unwrap_list(read_json(response), "bookings")
            if isinstance(item, dict)
        ]

    async def _patch(
        self, endpoint: str, payload: dict[str, object] | None, fallback: str
    ) -> None:
        logger.info("Updating booking", extra={"endpoint": endpoint})
        response = await self.api_client.request(
            endpoint, method="PATCH", json=payload, audience=Audience.BOOKINGS
        )
        if not response.is_success:
            raise ServerRejectionError(
                _failure_message(response, fallback), response.status_code
            )


def _failure_message(response: httpx.Response, fallback: str) -> str:
    return extract_error_message(read_json(response), fallback)


def _has_id(payload: dict[str, object]) -> bool:
    return payload.get("id") is not None or payload.get("_id") is not None
