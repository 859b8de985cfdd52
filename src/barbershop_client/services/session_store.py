"""Session store: the single owner of who is logged in."""

import logging
import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from barbershop_client.domain.sessions import (
    ANONYMOUS_SNAPSHOT,
    LOADING_SNAPSHOT,
    Identity,
    Role,
    Session,
    SessionSnapshot,
    SessionState,
)

TOKEN_KEY = "token"
USER_KEY = "user"

_VISITOR_ID = re.compile(r"^[A-Za-z0-9_-]{32}$")

logger = logging.getLogger(__name__)


class SessionStorage(Protocol):
    """Durable key-value storage for the persisted session."""

    def read(self) -> dict[str, object]:
        """Return every stored key."""

    def write(self, values: dict[str, object]) -> None:
        """Store all given keys in one atomic update."""

    def remove(self, keys: list[str]) -> None:
        """Delete all given keys in one atomic update."""


@dataclass
class SessionStore:
    """Holds the current credential and identity and persists them together.

    The in-memory state is a single immutable snapshot that is swapped in one
    assignment, so readers see either the old pair or the new one.
    """

    storage: SessionStorage
    _snapshot: SessionSnapshot = field(default=LOADING_SNAPSHOT, init=False)

    def restore(self) -> Session | None:
        """Load a persisted session; a torn or unreadable pair counts as none."""
        stored = self.storage.read()
        session = _session_from_storage(stored)
        if session is None:
            if TOKEN_KEY in stored or USER_KEY in stored:
                logger.warning("Discarding incomplete persisted session")
                self.storage.remove([TOKEN_KEY, USER_KEY])
            self._snapshot = ANONYMOUS_SNAPSHOT
            return None
        self._snapshot = SessionSnapshot(SessionState.AUTHENTICATED, session)
        return session

    def login(self, credential: str, identity: Identity) -> Session:
        """Persist and adopt a new credential and identity as one unit."""
        if not credential:
            raise ValueError("Credential must not be empty")
        session = Session(credential=credential, identity=identity)
        self.storage.write({TOKEN_KEY: credential, USER_KEY: identity.to_payload()})
        self._snapshot = SessionSnapshot(SessionState.AUTHENTICATED, session)
        logger.info("Session started", extra={"user_id": identity.id})
        return session

    def logout(self) -> None:
        """Clear the credential and identity together."""
        self.storage.remove([TOKEN_KEY, USER_KEY])
        self._snapshot = ANONYMOUS_SNAPSHOT

    def snapshot(self) -> SessionSnapshot:
        """Return the current session state."""
        return self._snapshot

    @property
    def credential(self) -> str | None:
        session = self._snapshot.session
        return session.credential if session else None

    @property
    def identity(self) -> Identity | None:
        session = self._snapshot.session
        return session.identity if session else None

    def current_role(self) -> Role | None:
        """Return the role of the current session, or None without one."""
        return self._snapshot.role


@dataclass
class VisitorSessions:
    """Hands out the session store of each visitor, keyed by an opaque visitor id.

    Stores are rebuilt from storage on every request, so nothing about one
    visitor is kept in memory or shared with another. Until `open` is called
    every store reports the loading state.
    """

    storage_factory: Callable[[str], SessionStorage]
    _open: bool = field(default=False, init=False)

    def open(self) -> None:
        """Allow stores to restore their persisted sessions."""
        self._open = True

    def store_for(self, visitor_id: str) -> SessionStore:
        if not self.is_valid_visitor_id(visitor_id):
            raise ValueError("Malformed visitor id")
        store = SessionStore(self.storage_factory(visitor_id))
        if self._open:
            store.restore()
        return store

    @staticmethod
    def new_visitor_id() -> str:
        return secrets.token_urlsafe(24)

    @staticmethod
    def is_valid_visitor_id(value: str | None) -> bool:
        return value is not None and _VISITOR_ID.match(value) is not None


def _session_from_storage(stored: dict[str, object]) -> Session | None:
    credential = stored.get(TOKEN_KEY)
    user = stored.get(USER_KEY)
    if not isinstance(credential, str) or not credential:
        return None
    if not isinstance(user, dict):
        return None
    try:
        identity = Identity.from_payload(user)
    except ValueError:
        return None
    return Session(credential=credential, identity=identity)
