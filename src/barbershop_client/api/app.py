"""FastAPI application factory for the barbershop web client."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from barbershop_client import messages
from barbershop_client.api.forms import BookingForm, LoginForm, RegisterForm, StatusForm
from barbershop_client.app_logging import configure_logging
from barbershop_client.containers import AppContainer, VisitorScope
from barbershop_client.domain.bookings import BookingFilter
from barbershop_client.domain.errors import ApiError, NetworkError, SessionExpiredError
from barbershop_client.domain.routing import (
    HOME_PATH,
    DecisionKind,
    GateDecision,
    RouteRequirement,
    landing_path,
    requirement_for,
)
from barbershop_client.domain.sessions import SessionSnapshot
from barbershop_client.domain.stats import ChartRange
from barbershop_client.services.analytics import chart_series, compute_stats
from barbershop_client.services.auth_gate import decide
from barbershop_client.services.session_store import VisitorSessions
from barbershop_client.services.views import AdminBookingsView

VISITOR_COOKIE = "barbershop_visitor"

_MARKETING_PAGES = {
    "/": "home",
    "/gallery": "gallery",
    "/team": "team",
    "/delivery": "delivery",
}


class GateInterruptError(Exception):
    """Raised by the route gate when it decided not to render."""

    def __init__(self, decision: GateDecision) -> None:
        super().__init__(decision.kind.value)
        self.decision = decision


async def visitor_scope(request: Request) -> VisitorScope:
    """Wire the dependencies of the visitor who sent the request."""
    container: AppContainer = request.app.state.container
    scope = container.visitor(request.state.visitor_id)
    request.state.scope = scope
    return scope


async def gate_route(
    request: Request, scope: VisitorScope = Depends(visitor_scope)
) -> SessionSnapshot:
    """Run the auth gate with the requirement listed for the request path."""
    requirement = requirement_for(request.url.path)
    if requirement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    snapshot = scope.session_store.snapshot()
    decision = decide(snapshot, requirement)
    if decision.kind is not DecisionKind.RENDER:
        raise GateInterruptError(decision)
    return snapshot


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.sessions.open()
        logger.info("Visitor sessions opened")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan, dependencies=[Depends(gate_route)])
    app.state.container = container

    @app.middleware("http")
    async def bind_visitor(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        visitor_id = request.cookies.get(VISITOR_COOKIE)
        issued = not VisitorSessions.is_valid_visitor_id(visitor_id)
        if issued:
            visitor_id = VisitorSessions.new_visitor_id()
        request.state.visitor_id = visitor_id
        response = await call_next(request)
        if issued:
            response.set_cookie(
                VISITOR_COOKIE, visitor_id, httponly=True, samesite="lax"
            )
        return response

    @app.exception_handler(GateInterruptError)
    async def gate_interrupt(
        request: Request, exc: GateInterruptError
    ) -> JSONResponse | RedirectResponse:
        decision = exc.decision
        if decision.kind is DecisionKind.LOADING:
            return JSONResponse(
                {"page": "loading", "message": messages.LOADING},
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return _navigate(request.state.scope, decision.location or HOME_PATH)

    @app.exception_handler(SessionExpiredError)
    async def session_expired(
        request: Request, exc: SessionExpiredError
    ) -> RedirectResponse:
        return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(StarletteHTTPException)
    async def not_found(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                {"page": "not-found", "message": messages.NOT_FOUND},
                status_code=status.HTTP_404_NOT_FOUND,
            )
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    for path, page in _MARKETING_PAGES.items():
        app.add_api_route(path, _marketing_page(page), methods=["GET"])

    @app.get("/login")
    async def login_page(
        scope: VisitorScope = Depends(visitor_scope),
    ) -> dict[str, object]:
        return {"page": "login", "user": scope.session_store.identity}

    @app.post("/login", response_model=None)
    async def login(
        form: LoginForm, scope: VisitorScope = Depends(visitor_scope)
    ) -> RedirectResponse | JSONResponse:
        """Log in and land on the page that matches the role."""
        try:
            session = await scope.auth_service.login(form.login, form.password)
        except SessionExpiredError:
            return _form_error("login", messages.LOGIN_FAILED)
        except ApiError as exc:
            return _form_error("login", _api_message(exc, messages.LOGIN_FAILED))
        return _navigate(scope, landing_path(session.role))

    @app.get("/register")
    async def register_page(
        scope: VisitorScope = Depends(visitor_scope),
    ) -> dict[str, object]:
        return {"page": "register", "user": scope.session_store.identity}

    @app.post("/register", response_model=None)
    async def register(
        form: RegisterForm, scope: VisitorScope = Depends(visitor_scope)
    ) -> RedirectResponse | JSONResponse:
        """Create a client account and continue to booking."""
        try:
            session = await scope.auth_service.register(
                form.name, form.phone, form.password, form.email
            )
        except ApiError as exc:
            return _form_error(
                "register", _api_message(exc, messages.REGISTER_FAILED)
            )
        return _navigate(scope, landing_path(session.role))

    @app.post("/logout")
    async def logout(scope: VisitorScope = Depends(visitor_scope)) -> RedirectResponse:
        scope.auth_service.logout()
        return _navigate(scope, HOME_PATH)

    @app.get("/booking")
    async def booking_page(
        scope: VisitorScope = Depends(visitor_scope),
        snapshot: SessionSnapshot = Depends(gate_route),
    ) -> dict[str, object]:
        """Booking form data and the client's own bookings."""
        view = scope.client_booking_view()
        try:
            await view.load()
        finally:
            view.close()
        return {
            "page": "booking",
            "user": snapshot.session.identity if snapshot.session else None,
            "barbers": view.barbers,
            "services": view.services,
            "my_bookings": view.my_bookings,
            "error": view.error,
        }

    @app.post("/booking", response_model=None)
    async def submit_booking(
        form: BookingForm,
        scope: VisitorScope = Depends(visitor_scope),
        snapshot: SessionSnapshot = Depends(gate_route),
    ) -> JSONResponse | dict[str, object]:
        """Create a pending booking for the logged-in client."""
        if snapshot.session is None:
            raise GateInterruptError(decide(snapshot, RouteRequirement.REQUIRES_AUTH))
        view = scope.client_booking_view()
        try:
            created = await view.submit(snapshot.session.identity, form.to_draft())
        finally:
            view.close()
        if created is None:
            return _form_error("booking", view.error)
        return {
            "page": "booking",
            "success": True,
            "message": messages.BOOKING_CREATED,
            "booking": created,
            "my_bookings": view.my_bookings,
        }

    @app.get("/admin")
    async def admin_page(
        filter: BookingFilter = BookingFilter.ALL,  # noqa: A002
        scope: VisitorScope = Depends(visitor_scope),
    ) -> dict[str, object]:
        """Booking list for review, optionally filtered by status."""
        view = scope.admin_bookings_view()
        try:
            await view.set_filter(filter)
        finally:
            view.close()
        return _admin_payload(view)

    @app.post("/admin/bookings/{booking_id}/approve", response_model=None)
    async def approve_booking(
        booking_id: str,
        filter: BookingFilter = BookingFilter.ALL,  # noqa: A002
        scope: VisitorScope = Depends(visitor_scope),
    ) -> JSONResponse | dict[str, object]:
        view = scope.admin_bookings_view(filter)
        ok = await view.approve(booking_id)
        return _admin_action_result(view, ok)

    @app.post("/admin/bookings/{booking_id}/reject", response_model=None)
    async def reject_booking(
        booking_id: str,
        filter: BookingFilter = BookingFilter.ALL,  # noqa: A002
        scope: VisitorScope = Depends(visitor_scope),
    ) -> JSONResponse | dict[str, object]:
        view = scope.admin_bookings_view(filter)
        ok = await view.reject(booking_id)
        return _admin_action_result(view, ok)

    @app.post("/admin/bookings/{booking_id}/status", response_model=None)
    async def set_booking_status(
        booking_id: str,
        form: StatusForm,
        filter: BookingFilter = BookingFilter.ALL,  # noqa: A002
        scope: VisitorScope = Depends(visitor_scope),
    ) -> JSONResponse | dict[str, object]:
        """Change a booking's status, then reload the list under `filter`."""
        view = scope.admin_bookings_view(filter)
        ok = await view.set_status(booking_id, form.status)
        return _admin_action_result(view, ok)

    @app.get("/admin/analytics")
    async def analytics_page(
        range: ChartRange = ChartRange.ONE_MONTH,  # noqa: A002
        scope: VisitorScope = Depends(visitor_scope),
    ) -> dict[str, object]:
        """Monthly booking statistics and the revenue chart series."""
        bookings, services = await scope.analytics_service.load()
        now = datetime.now()
        return {
            "page": "analytics",
            "stats": compute_stats(bookings, services, now.date()),
            "range": range,
            "series": chart_series(bookings, services, range, now),
        }

    @app.get("/super-admin")
    async def super_admin_page(
        snapshot: SessionSnapshot = Depends(gate_route),
    ) -> dict[str, object]:
        return {
            "page": "super-admin",
            "user": snapshot.session.identity if snapshot.session else None,
        }

    return app


def _marketing_page(
    page: str,
) -> Callable[[VisitorScope], Awaitable[dict[str, object]]]:
    async def render(
        scope: VisitorScope = Depends(visitor_scope),
    ) -> dict[str, object]:
        return {"page": page, "user": scope.session_store.identity}

    return render


def _navigate(scope: VisitorScope, path: str) -> RedirectResponse:
    scope.navigator.navigate(path)
    return RedirectResponse(path, status_code=status.HTTP_303_SEE_OTHER)


def _api_message(exc: ApiError, fallback: str) -> str:
    if isinstance(exc, NetworkError):
        return messages.NETWORK_ERROR
    return exc.message or fallback


def _form_error(page: str, message: str) -> JSONResponse:
    return JSONResponse(
        {"page": page, "error": message}, status_code=status.HTTP_400_BAD_REQUEST
    )


def _admin_payload(view: AdminBookingsView) -> dict[str, object]:
    return {
        "page": "admin",
        "filter": view.view_filter,
        "bookings": view.bookings,
        "error": view.error,
    }


def _admin_action_result(
    view: AdminBookingsView, ok: bool
) -> JSONResponse | dict[str, object]:
    view.close()
    if not ok:
        return JSONResponse(
            {"page": "admin", "alert": view.alert},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return _admin_payload(view)
