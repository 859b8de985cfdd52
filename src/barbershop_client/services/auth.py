"""Login, registration, and logout flows."""

import logging
from dataclasses import dataclass

from barbershop_client import messages
from barbershop_client.adapters.api_client import ApiClient, Audience, read_json
from barbershop_client.domain.errors import ServerRejectionError
from barbershop_client.domain.responses import extract_error_message
from barbershop_client.domain.sessions import Identity, Session
from barbershop_client.services.session_store import SessionStore

LOGIN_ENDPOINT = "/auth/login"
REGISTER_ENDPOINT = "/auth/register"

_CREDENTIAL_KEYS = ("token", "access_token", "accessToken")

logger = logging.getLogger(__name__)


@dataclass
class AuthService:
    """Exchanges user credentials for an API session."""

    api_client: ApiClient
    session_store: SessionStore

    async def login(self, login: str, password: str) -> Session:
        """Log in with a phone number or email and start a session."""
        field_name = "email" if "@" in login else "phone"
        payload = {field_name: login, "password": password}
        return await self._authenticate(
            LOGIN_ENDPOINT, payload, messages.LOGIN_FAILED
        )

    async def register(
        self, name: str, phone: str, password: str, email: str | None = None
    ) -> Session:
        """Create a client account and start a session for it."""
        payload: dict[str, object] = {
            "name": name,
            "phone": phone,
            "password": password,
        }
        if email:
            payload["email"] = email
        return await self._authenticate(
            REGISTER_ENDPOINT, payload, messages.REGISTER_FAILED
        )

    def logout(self) -> None:
        """End the current session."""
        self.session_store.logout()

    async def _authenticate(
        self, endpoint: str, payload: dict[str, object], fallback: str
    ) -> Session:
        response = await self.api_client.request(
            endpoint, method="POST", json=payload, audience=Audience.AUTH
        )
        body = read_json(response)
        if not response.is_success:
            raise ServerRejectionError(
                extract_error_message(body, fallback, keys=("message", "error")),
                response.status_code,
            )
        credential, identity = _parse_auth_body(body)
        if credential is None or identity is None:
            logger.warning(
                "Auth response lacks credential or user",
                extra={"endpoint": endpoint},
            )
            raise ServerRejectionError(fallback, response.status_code)
        return self.session_store.login(credential, identity)


def _parse_auth_body(body: object) -> tuple[str | None, Identity | None]:
    if not isinstance(body, dict):
        return None, None
    scopes = [body]
    if isinstance(body.get("data"), dict):
        scopes.append(body["data"])
    credential: str | None = None
    identity: Identity | None = None
    for scope in scopes:
        for key in _CREDENTIAL_KEYS:
            value = scope.get(key)
            if credential is None and isinstance(value, str) and value:
                credential = value
        user = scope.get("user")
        if identity is None and isinstance(user, dict):
            try:
                identity = Identity.from_payload(user)
            except ValueError:
                continue
    return credential, identity
