"""Tests for the session store."""

import pytest

from barbershop_client.domain.sessions import Identity, Role, SessionState
from barbershop_client.services.session_store import (
    TOKEN_KEY,
    USER_KEY,
    SessionStore,
    VisitorSessions,
)
from tests.conftest import (
    VISITOR,
    InMemorySessionStorage,
    InMemoryVisitorStorages,
    client_identity,
)


def test_store_is_loading_until_restored() -> None:
    store = SessionStore(InMemorySessionStorage())

    assert store.snapshot().state is SessionState.LOADING

    assert store.restore() is None
    assert store.snapshot().state is SessionState.ANONYMOUS
    assert store.current_role() is None


def test_restore_reads_persisted_pair() -> None:
    storage = InMemorySessionStorage(
        values={
            TOKEN_KEY: "abc",
            USER_KEY: {"_id": "42", "name": "Admin", "role": "admin"},
        }
    )
    store = SessionStore(storage)

    session = store.restore()

    assert session is not None
    assert session.credential == "abc"
    assert session.identity.id == "42"
    assert store.current_role() is Role.ADMIN


def test_restore_discards_torn_pair() -> None:
    storage = InMemorySessionStorage(values={TOKEN_KEY: "abc"})
    store = SessionStore(storage)

    assert store.restore() is None
    assert storage.values == {}
    assert store.credential is None
    assert store.identity is None


def test_restored_identity_without_role_is_client() -> None:
    storage = InMemorySessionStorage(
        values={TOKEN_KEY: "abc", USER_KEY: {"id": 1, "name": "Ali"}}
    )
    store = SessionStore(storage)
    store.restore()

    assert store.current_role() is Role.CLIENT


def test_login_then_logout_restores_storage(
    session_store: SessionStore, storage: InMemorySessionStorage
) -> None:
    storage.values["theme"] = "dark"
    before = storage.read()

    session_store.login("token-1", client_identity(Role.ADMIN))

    assert storage.values[TOKEN_KEY] == "token-1"
    assert storage.values[USER_KEY]["role"] == "admin"
    assert session_store.current_role() is Role.ADMIN

    session_store.logout()

    assert storage.read() == before
    assert session_store.snapshot().state is SessionState.ANONYMOUS
    assert session_store.credential is None
    assert session_store.identity is None


def test_login_writes_pair_in_one_update(
    session_store: SessionStore, storage: InMemorySessionStorage
) -> None:
    writes_before = storage.writes

    session_store.login("token-1", client_identity())

    assert storage.writes == writes_before + 1


def test_login_rejects_empty_credential(session_store: SessionStore) -> None:
    with pytest.raises(ValueError):
        session_store.login("", client_identity())
    assert session_store.credential is None


def test_snapshot_is_stable_across_logout(session_store: SessionStore) -> None:
    session_store.login("token-1", client_identity())
    snapshot = session_store.snapshot()

    session_store.logout()

    assert snapshot.session is not None
    assert snapshot.session.credential == "token-1"
    assert session_store.snapshot().session is None


def test_identity_id_falls_back_to_underscore_id_when_id_is_null() -> None:
    identity = Identity.from_payload({"id": None, "_id": "u9", "role": "admin"})

    assert identity.id == "u9"
    with pytest.raises(ValueError):
        Identity.from_payload({"id": None, "_id": None})


def test_visitor_stores_are_loading_until_opened() -> None:
    storages = InMemoryVisitorStorages()
    storages(VISITOR).values.update(
        {TOKEN_KEY: "abc", USER_KEY: client_identity().to_payload()}
    )
    sessions = VisitorSessions(storages)

    assert sessions.store_for(VISITOR).snapshot().state is SessionState.LOADING

    sessions.open()

    assert sessions.store_for(VISITOR).credential == "abc"
    assert sessions.store_for("b" * 32).snapshot().state is SessionState.ANONYMOUS


def test_visitor_logins_are_isolated() -> None:
    storages = InMemoryVisitorStorages()
    sessions = VisitorSessions(storages)
    sessions.open()

    sessions.store_for(VISITOR).login("abc", client_identity(Role.ADMIN))

    assert sessions.store_for(VISITOR).current_role() is Role.ADMIN
    assert sessions.store_for("b" * 32).current_role() is None
    assert storages("b" * 32).values == {}


@pytest.mark.parametrize("visitor_id", [None, "", "short", "../" * 11, "a" * 33])
def test_malformed_visitor_ids_are_rejected(visitor_id: str | None) -> None:
    assert not VisitorSessions.is_valid_visitor_id(visitor_id)


def test_new_visitor_ids_are_unique_and_valid() -> None:
    first = VisitorSessions.new_visitor_id()

    assert VisitorSessions.is_valid_visitor_id(first)
    assert first != VisitorSessions.new_visitor_id()
    with pytest.raises(ValueError):
        VisitorSessions(InMemoryVisitorStorages()).store_for("../escape")
