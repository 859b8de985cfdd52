"""Barbershop REST API client."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import httpx

from barbershop_client.config import Settings
from barbershop_client.domain.errors import NetworkError, SessionExpiredError
from barbershop_client.domain.routing import LOGIN_PATH
from barbershop_client.services.navigation import Navigator
from barbershop_client.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class Audience(Enum):
    """Logical API group a request targets; each has its own base URL."""

    GENERAL = "general"
    AUTH = "auth"
    SERVICES = "services"
    BARBERS = "barbers"
    BOOKINGS = "bookings"


class ApiClient(Protocol):
    """Interface for calls to the barbershop API."""

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        json: object | None = None,
        audience: Audience = Audience.GENERAL,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send a request and return the raw response."""


@dataclass
class HttpxApiClient(ApiClient):
    """API client implemented with httpx.

    Attaches the current credential, and turns a 401 into a forced logout plus
    a navigation to the login page before reporting failure.
    """

    base_urls: dict[Audience, str]
    session_store: SessionStore
    navigator: Navigator
    http_client: httpx.AsyncClient
    origin: str | None = None

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        json: object | None = None,
        audience: Audience = Audience.GENERAL,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send a request to the audience's base URL."""
        url = f"{self.base_urls[audience]}{endpoint}"
        credential = self.session_store.credential
        headers = {"Content-Type": "application/json", "Accept": "*/*"}
        if self.origin:
            headers["Origin"] = self.origin
        if credential:
            headers["Authorization"] = f"Bearer {credential}"
        logger.info(
            "API request",
            extra={"url": url, "method": method, "has_token": bool(credential)},
        )
        extra_args: dict[str, object] = {}
        if timeout is not None:
            extra_args["timeout"] = timeout
        try:
            response = await self.http_client.request(
                method, url, headers=headers, json=json, **extra_args
            )
        except httpx.TransportError as exc:
            logger.warning("API request failed", extra={"url": url, "error": str(exc)})
            raise NetworkError(str(exc) or type(exc).__name__) from exc
        logger.info(
            "API response", extra={"url": url, "status_code": response.status_code}
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning("Credential rejected, ending session", extra={"url": url})
            self.session_store.logout()
            self.navigator.navigate(LOGIN_PATH)
            raise SessionExpiredError()
        return response


def base_urls_from_settings(settings: Settings) -> dict[Audience, str]:
    """Map each audience to its configured base URL."""
    return {
        Audience.GENERAL: settings.api_base_url.rstrip("/"),
        Audience.AUTH: settings.auth_base_url.rstrip("/"),
        Audience.SERVICES: settings.services_base_url.rstrip("/"),
        Audience.BARBERS: settings.barbers_base_url.rstrip("/"),
        Audience.BOOKINGS: settings.bookings_base_url.rstrip("/"),
    }


def read_json(response: httpx.Response) -> object:
    """Decode a JSON body; an empty or non-JSON body reads as an empty object."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {}
