"""Barber and service listings."""

from dataclasses import dataclass

from barbershop_client import messages
from barbershop_client.adapters.api_client import ApiClient, Audience, read_json
from barbershop_client.domain.bookings import Barber, BarberService
from barbershop_client.domain.errors import ServerRejectionError
from barbershop_client.domain.responses import unwrap_list

BARBERS_ENDPOINT = "/users/barbers"
SERVICES_ENDPOINT = "/barber-services"


@dataclass
class CatalogService:
    """Reads the barbers and services a client can book."""

    api_client: ApiClient

    async def list_barbers(self) -> list[Barber]:
        body = await self._get(BARBERS_ENDPOINT, Audience.BARBERS)
        return [
            Barber.from_payload(item)
            for item in unwrap_list(body, "barbers")
            if isinstance(item, dict)
        ]

    async def list_services(self, timeout: float | None = None) -> list[BarberService]:
        body = await self._get(SERVICES_ENDPOINT, Audience.SERVICES, timeout)
        return [
            BarberService.from_payload(item)
            for item in unwrap_list(body, "services")
            if isinstance(item, dict)
        ]

    async def _get(
        self, endpoint: str, audience: Audience, timeout: float | None = None
    ) -> object:
        response = await self.api_client.request(
            endpoint, audience=audience, timeout=timeout
        )
        if not response.is_success:
            raise ServerRejectionError(
                messages.LOAD_CATALOG_FAILED, response.status_code
            )
        return read_json(response)
