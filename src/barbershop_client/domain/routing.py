"""Client route surface and access decisions."""

from dataclasses import dataclass
from enum import Enum

from barbershop_client.domain.sessions import Role

HOME_PATH = "/"
LOGIN_PATH = "/login"


class RouteRequirement(Enum):
    """Access level a route demands from the session."""

    PUBLIC = "public"
    REQUIRES_AUTH = "requires-auth"
    REQUIRES_ADMIN = "requires-admin"
    REQUIRES_SUPERADMIN = "requires-superadmin"

    @property
    def minimum_role(self) -> Role | None:
        return _MINIMUM_ROLES[self]


_MINIMUM_ROLES: dict[RouteRequirement, Role | None] = {
    RouteRequirement.PUBLIC: None,
    RouteRequirement.REQUIRES_AUTH: Role.CLIENT,
    RouteRequirement.REQUIRES_ADMIN: Role.ADMIN,
    RouteRequirement.REQUIRES_SUPERADMIN: Role.SUPERADMIN,
}


class DecisionKind(Enum):
    """What the guard tells the router to do."""

    RENDER = "render"
    REDIRECT = "redirect"
    LOADING = "show-loading-placeholder"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of a guard evaluation."""

    kind: DecisionKind
    location: str | None = None


RENDER = GateDecision(DecisionKind.RENDER)
SHOW_LOADING = GateDecision(DecisionKind.LOADING)
REDIRECT_LOGIN = GateDecision(DecisionKind.REDIRECT, LOGIN_PATH)
REDIRECT_HOME = GateDecision(DecisionKind.REDIRECT, HOME_PATH)

ROUTE_REQUIREMENTS: dict[str, RouteRequirement] = {
    "/": RouteRequirement.PUBLIC,
    "/gallery": RouteRequirement.PUBLIC,
    "/team": RouteRequirement.PUBLIC,
    "/delivery": RouteRequirement.PUBLIC,
    "/login": RouteRequirement.PUBLIC,
    "/register": RouteRequirement.PUBLIC,
    "/logout": RouteRequirement.PUBLIC,
    "/health": RouteRequirement.PUBLIC,
    "/booking": RouteRequirement.REQUIRES_AUTH,
    "/admin": RouteRequirement.REQUIRES_ADMIN,
    "/admin/analytics": RouteRequirement.REQUIRES_ADMIN,
    "/super-admin": RouteRequirement.REQUIRES_SUPERADMIN,
}


def requirement_for(path: str) -> RouteRequirement | None:
    """Return the requirement for a client path, or None when nothing matches.

    Nested paths such as `/admin/bookings/{id}/approve` take the requirement of
    their closest listed ancestor; the home page is nobody's ancestor.
    """
    normalized = path.rstrip("/") or "/"
    if normalized in ROUTE_REQUIREMENTS:
        return ROUTE_REQUIREMENTS[normalized]
    parent = normalized.rpartition("/")[0]
    while parent:
        if parent in ROUTE_REQUIREMENTS:
            return ROUTE_REQUIREMENTS[parent]
        parent = parent.rpartition("/")[0]
    return None


def landing_path(role: Role) -> str:
    """Return the page a freshly logged-in user is sent to."""
    if role is Role.SUPERADMIN:
        return "/super-admin"
    if role is Role.ADMIN:
        return "/admin"
    return "/booking"
