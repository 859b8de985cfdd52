"""Route guard decisions."""

from barbershop_client.domain.routing import (
    REDIRECT_HOME,
    REDIRECT_LOGIN,
    RENDER,
    SHOW_LOADING,
    GateDecision,
    RouteRequirement,
)
from barbershop_client.domain.sessions import SessionSnapshot, SessionState


def decide(snapshot: SessionSnapshot, requirement: RouteRequirement) -> GateDecision:
    """Decide whether a route renders, redirects, or waits for the session.

    Pure function of its inputs. While the session is loading the answer is
    always the loading placeholder; a missing session goes to the login page
    and an insufficient role goes home.
    """
    if snapshot.state is SessionState.LOADING:
        return SHOW_LOADING
    required_role = requirement.minimum_role
    if required_role is None:
        return RENDER
    if snapshot.session is None:
        return REDIRECT_LOGIN
    if not snapshot.session.role.satisfies(required_role):
        return REDIRECT_HOME
    return RENDER
