"""Shared test fixtures."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from barbershop_client.adapters.api_client import (
    HttpxApiClient,
    base_urls_from_settings,
)
from barbershop_client.config import Settings
from barbershop_client.containers import AppContainer
from barbershop_client.domain.sessions import Identity, Role
from barbershop_client.services.bookings import BookingService
from barbershop_client.services.catalog import CatalogService
from barbershop_client.services.navigation import Navigator
from barbershop_client.services.session_store import (
    SessionStorage,
    SessionStore,
    VisitorSessions,
)

Handler = Callable[[httpx.Request], httpx.Response]

VISITOR = "a1b2c3d4e5f6g7h8i9j0k1l2m3n4o5p6"


@dataclass
class InMemorySessionStorage(SessionStorage):
    """In-memory session storage for tests."""

    values: dict[str, object] = field(default_factory=dict)
    writes: int = 0

    def read(self) -> dict[str, object]:
        return dict(self.values)

    def write(self, values: dict[str, object]) -> None:
        self.writes += 1
        self.values.update(values)

    def remove(self, keys: list[str]) -> None:
        self.writes += 1
        for key in keys:
            self.values.pop(key, None)


@dataclass
class InMemoryVisitorStorages:
    """One in-memory session storage per visitor id, created on first use."""

    storages: dict[str, InMemorySessionStorage] = field(default_factory=dict)

    def __call__(self, visitor_id: str) -> InMemorySessionStorage:
        return self.storages.setdefault(visitor_id, InMemorySessionStorage())


@dataclass
class FakeBarbershopApi:
    """Routes mock HTTP requests to canned responses and records them."""

    routes: dict[tuple[str, str], Handler | httpx.Response] = field(
        default_factory=dict
    )
    requests: list[httpx.Request] = field(default_factory=list)

    def add(
        self, method: str, path: str, response: Handler | httpx.Response
    ) -> None:
        self.routes[(method, path)] = response

    def json_body(self, index: int = -1) -> object:
        return json.loads(self.requests[index].content.decode())

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if isinstance(route, httpx.Response):
            return route
        return route(request)


def client_identity(role: Role = Role.CLIENT) -> Identity:
    return Identity(id="7", name="Aziz", role=role)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url="https://api.test/api",
        auth_base_url="https://auth.test",
        services_base_url="https://services.test",
        barbers_base_url="https://barbers.test",
        bookings_base_url="https://bookings.test",
    )


@pytest.fixture
def storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def session_store(storage: InMemorySessionStorage) -> SessionStore:
    store = SessionStore(storage)
    store.restore()
    return store


@pytest.fixture
def navigator() -> Navigator:
    return Navigator()


@pytest.fixture
def fake_api() -> FakeBarbershopApi:
    return FakeBarbershopApi()


@pytest.fixture
def api_client(
    settings: Settings,
    session_store: SessionStore,
    navigator: Navigator,
    fake_api: FakeBarbershopApi,
) -> HttpxApiClient:
    return HttpxApiClient(
        base_urls=base_urls_from_settings(settings),
        session_store=session_store,
        navigator=navigator,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_api)),
        origin=settings.client_origin,
    )


@pytest.fixture
def booking_service(api_client: HttpxApiClient) -> BookingService:
    return BookingService(api_client)


@pytest.fixture
def catalog_service(api_client: HttpxApiClient) -> CatalogService:
    return CatalogService(api_client)


@pytest.fixture
def visitor_storages() -> InMemoryVisitorStorages:
    return InMemoryVisitorStorages()


@pytest.fixture
def container(
    settings: Settings,
    visitor_storages: InMemoryVisitorStorages,
    fake_api: FakeBarbershopApi,
) -> AppContainer:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api))

    async def close_resources() -> None:
        await http_client.aclose()

    return AppContainer(
        settings=settings,
        sessions=VisitorSessions(visitor_storages),
        http_client=http_client,
        base_urls=base_urls_from_settings(settings),
        close_resources=close_resources,
    )
