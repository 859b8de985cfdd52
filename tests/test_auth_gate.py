"""Tests for route guard decisions."""

import itertools

import pytest

from barbershop_client.domain.routing import (
    HOME_PATH,
    LOGIN_PATH,
    DecisionKind,
    RouteRequirement,
    landing_path,
    requirement_for,
)
from barbershop_client.domain.sessions import (
    ANONYMOUS_SNAPSHOT,
    LOADING_SNAPSHOT,
    Role,
    Session,
    SessionSnapshot,
    SessionState,
)
from barbershop_client.services.auth_gate import decide
from tests.conftest import client_identity


def _snapshot(role: Role) -> SessionSnapshot:
    return SessionSnapshot(
        SessionState.AUTHENTICATED, Session("token", client_identity(role))
    )


ALL_SNAPSHOTS = [LOADING_SNAPSHOT, ANONYMOUS_SNAPSHOT] + [
    _snapshot(role) for role in Role
]
GUARDED = [
    RouteRequirement.REQUIRES_AUTH,
    RouteRequirement.REQUIRES_ADMIN,
    RouteRequirement.REQUIRES_SUPERADMIN,
]


def test_decide_is_deterministic() -> None:
    for snapshot, requirement in itertools.product(ALL_SNAPSHOTS, RouteRequirement):
        assert decide(snapshot, requirement) == decide(snapshot, requirement)


def test_loading_never_redirects() -> None:
    for requirement in RouteRequirement:
        decision = decide(LOADING_SNAPSHOT, requirement)
        assert decision.kind is DecisionKind.LOADING
        assert decision.location is None


@pytest.mark.parametrize("requirement", GUARDED)
def test_missing_session_redirects_to_login(requirement: RouteRequirement) -> None:
    decision = decide(ANONYMOUS_SNAPSHOT, requirement)

    assert decision.kind is DecisionKind.REDIRECT
    assert decision.location == LOGIN_PATH


def test_public_routes_render_without_session() -> None:
    assert decide(ANONYMOUS_SNAPSHOT, RouteRequirement.PUBLIC).kind is (
        DecisionKind.RENDER
    )


def test_superadmin_satisfies_admin_routes() -> None:
    decision = decide(_snapshot(Role.SUPERADMIN), RouteRequirement.REQUIRES_ADMIN)

    assert decision.kind is DecisionKind.RENDER


def test_admin_is_sent_home_from_superadmin_routes() -> None:
    decision = decide(_snapshot(Role.ADMIN), RouteRequirement.REQUIRES_SUPERADMIN)

    assert decision.kind is DecisionKind.REDIRECT
    assert decision.location == HOME_PATH


def test_client_is_sent_home_from_admin_page() -> None:
    decision = decide(_snapshot(Role.CLIENT), requirement_for("/admin"))

    assert decision.location == HOME_PATH


def test_anonymous_booking_visit_goes_to_login() -> None:
    decision = decide(ANONYMOUS_SNAPSHOT, requirement_for("/booking"))

    assert decision.location == LOGIN_PATH


def test_route_table() -> None:
    assert requirement_for("/gallery") is RouteRequirement.PUBLIC
    assert requirement_for("/booking/") is RouteRequirement.REQUIRES_AUTH
    assert requirement_for("/super-admin") is RouteRequirement.REQUIRES_SUPERADMIN
    assert requirement_for("/unknown") is None


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/admin/bookings/4/approve", RouteRequirement.REQUIRES_ADMIN),
        ("/admin/analytics", RouteRequirement.REQUIRES_ADMIN),
        ("/booking/extra", RouteRequirement.REQUIRES_AUTH),
        ("/unknown/deeper", None),
        ("/gallery-x", None),
    ],
)
def test_nested_paths_take_closest_listed_ancestor(
    path: str, expected: RouteRequirement | None
) -> None:
    assert requirement_for(path) is expected


def test_role_order() -> None:
    assert Role.SUPERADMIN.satisfies(Role.ADMIN)
    assert Role.ADMIN.satisfies(Role.CLIENT)
    assert not Role.CLIENT.satisfies(Role.ADMIN)
    assert not Role.ADMIN.satisfies(Role.SUPERADMIN)


def test_unknown_role_grants_client_only() -> None:
    assert Role.parse(None) is Role.CLIENT
    assert Role.parse("barber") is Role.CLIENT
    assert Role.parse("SUPER_ADMIN") is Role.SUPERADMIN


def test_landing_path_by_role() -> None:
    assert landing_path(Role.CLIENT) == "/booking"
    assert landing_path(Role.ADMIN) == "/admin"
    assert landing_path(Role.SUPERADMIN) == "/super-admin"
