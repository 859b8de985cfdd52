"""Tests for login, registration, and logout."""

import asyncio

import httpx
import pytest

from barbershop_client import messages
from barbershop_client.adapters.api_client import HttpxApiClient
from barbershop_client.domain.errors import ServerRejectionError
from barbershop_client.domain.sessions import Role, SessionState
from barbershop_client.services.auth import AuthService
from barbershop_client.services.session_store import SessionStore
from tests.conftest import (
    FakeBarbershopApi,
    InMemorySessionStorage,
    client_identity,
)


@pytest.fixture
def auth_service(
    api_client: HttpxApiClient, session_store: SessionStore
) -> AuthService:
    return AuthService(api_client, session_store)


def test_login_with_phone_starts_session(
    auth_service: AuthService,
    session_store: SessionStore,
    storage: InMemorySessionStorage,
    fake_api: FakeBarbershopApi,
) -> None:
    fake_api.add(
        "POST",
        "/auth/login",
        httpx.Response(
            200,
            json={"token": "tok-1", "user": {"id": 4, "name": "Olim", "role": "admin"}},
        ),
    )

    session = asyncio.run(auth_service.login("+998901234567", "secret"))

    assert fake_api.json_body() == {"phone": "+998901234567", "password": "secret"}
    assert fake_api.requests[0].url.host == "auth.test"
    assert session.role is Role.ADMIN
    assert session_store.snapshot().state is SessionState.AUTHENTICATED
    assert session_store.credential == "tok-1"
    assert storage.values["token"] == "tok-1"


def test_login_with_email_sends_email_field(
    auth_service: AuthService, fake_api: FakeBarbershopApi
) -> None:
    fake_api.add(
        "POST",
        "/auth/login",
        httpx.Response(
            200,
            json={"data": {"accessToken": "tok-2", "user": {"_id": "u1"}}},
        ),
    )

    session = asyncio.run(auth_service.login("olim@example.uz", "secret"))

    assert fake_api.json_body() == {"email": "olim@example.uz", "password": "secret"}
    assert session.credential == "tok-2"
    assert session.identity.id == "u1"
    assert session.role is Role.CLIENT


def test_login_rejection_keeps_anonymous(
    auth_service: AuthService,
    session_store: SessionStore,
    fake_api: FakeBarbershopApi,
) -> None:
    fake_api.add(
        "POST", "/auth/login", httpx.Response(400, json={"error": "Parol noto'g'ri"})
    )

    with pytest.raises(ServerRejectionError) as exc_info:
        asyncio.run(auth_service.login("+998901234567", "wrong"))

    assert exc_info.value.message == "Parol noto'g'ri"
    assert exc_info.value.status_code == 400
    assert session_store.snapshot().state is SessionState.ANONYMOUS


def test_login_without_token_is_rejected(
    auth_service: AuthService, fake_api: FakeBarbershopApi
) -> None:
    fake_api.add(
        "POST", "/auth/login", httpx.Response(200, json={"user": {"id": 1}})
    )

    with pytest.raises(ServerRejectionError) as exc_info:
        asyncio.run(auth_service.login("+998901234567", "secret"))

    assert exc_info.value.message == messages.LOGIN_FAILED


def test_register_posts_profile_and_starts_session(
    auth_service: AuthService,
    session_store: SessionStore,
    fake_api: FakeBarbershopApi,
) -> None:
    fake_api.add(
        "POST",
        "/auth/register",
        httpx.Response(
            201, json={"token": "tok-3", "user": {"id": 9, "name": "Nodir"}}
        ),
    )

    asyncio.run(auth_service.register("Nodir", "+998901112233", "secret"))

    assert fake_api.json_body() == {
        "name": "Nodir",
        "phone": "+998901112233",
        "password": "secret",
    }
    assert session_store.identity is not None
    assert session_store.identity.name == "Nodir"


def test_register_failure_uses_fallback(
    auth_service: AuthService, fake_api: FakeBarbershopApi
) -> None:
    fake_api.add("POST", "/auth/register", httpx.Response(500))

    with pytest.raises(ServerRejectionError) as exc_info:
        asyncio.run(auth_service.register("Nodir", "+998901112233", "secret"))

    assert exc_info.value.message == messages.REGISTER_FAILED


def test_logout_clears_session(
    auth_service: AuthService,
    session_store: SessionStore,
    storage: InMemorySessionStorage,
) -> None:
    session_store.login("tok", client_identity())

    auth_service.logout()

    assert session_store.snapshot().state is SessionState.ANONYMOUS
    assert "token" not in storage.values
