"""Domain models for the authenticated session."""

from dataclasses import dataclass, field
from enum import Enum


class Role(Enum):
    """User roles ordered by privilege: client < admin < superadmin."""

    CLIENT = "client"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def rank(self) -> int:
        return _ROLE_ORDER.index(self)

    def satisfies(self, required: "Role") -> bool:
        """Return true when this role carries every capability of `required`."""
        return self.rank >= required.rank

    @classmethod
    def parse(cls, value: object) -> "Role":
        """Parse a role name; anything unknown grants client privileges only."""
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "").replace("-", "")
            for role in cls:
                if role.value == normalized:
                    return role
        return cls.CLIENT


_ROLE_ORDER = (Role.CLIENT, Role.ADMIN, Role.SUPERADMIN)


@dataclass(frozen=True)
class Identity:
    """Who the credential belongs to."""

    id: str
    name: str
    role: Role = Role.CLIENT
    email: str | None = None
    phone: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Identity":
        """Build an identity from an API or storage payload."""
        raw_id = payload.get("id")
        if raw_id is None:
            raw_id = payload.get("_id")
        if raw_id is None:
            raise ValueError("Identity payload has no id")
        return cls(
            id=str(raw_id),
            name=str(payload.get("name") or ""),
            role=Role.parse(payload.get("role")),
            email=_optional_str(payload.get("email")),
            phone=_optional_str(payload.get("phone")),
        )

    def to_payload(self) -> dict[str, object]:
        """Serialize the identity for durable storage."""
        payload: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
        }
        if self.email is not None:
            payload["email"] = self.email
        if self.phone is not None:
            payload["phone"] = self.phone
        return payload


@dataclass(frozen=True)
class Session:
    """A credential and its identity, always held together."""

    credential: str
    identity: Identity = field(repr=False)

    @property
    def role(self) -> Role:
        return self.identity.role


class SessionState(Enum):
    """Lifecycle state of the session store."""

    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent view of the session store at one point in time."""

    state: SessionState
    session: Session | None = None

    @property
    def role(self) -> Role | None:
        return self.session.role if self.session else None


LOADING_SNAPSHOT = SessionSnapshot(state=SessionState.LOADING)
ANONYMOUS_SNAPSHOT = SessionSnapshot(state=SessionState.ANONYMOUS)


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
