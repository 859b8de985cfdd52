"""Domain models for bookings and the catalog they reference."""

from dataclasses import dataclass
from enum import Enum


class BookingStatus(Enum):
    """Booking workflow states. New bookings always start as pending."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: object) -> "BookingStatus":
        """Parse a status string case-insensitively; missing means pending."""
        if isinstance(value, BookingStatus):
            return value
        if isinstance(value, str) and value.strip():
            return cls(value.strip().lower())
        return cls.PENDING


class BookingFilter(Enum):
    """Admin listing view filter."""

    ALL = "all"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    def matches(self, booking: "Booking") -> bool:
        return self is BookingFilter.ALL or booking.status.value == self.value


@dataclass(frozen=True)
class Barber:
    """A barber offered for booking."""

    id: str
    name: str

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Barber":
        return cls(id=_entity_id(payload), name=str(payload.get("name") or ""))


@dataclass(frozen=True)
class BarberService:
    """A priced service from the barbershop catalog."""

    id: str
    name: str
    price: float = 0
    duration_minutes: int | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "BarberService":
        duration = payload.get("duration")
        try:
            price = float(payload.get("price") or 0)
        except (TypeError, ValueError):
            price = 0
        return cls(
            id=_entity_id(payload),
            name=str(payload.get("name") or ""),
            price=price,
            duration_minutes=int(duration) if isinstance(duration, int) else None,
        )


@dataclass(frozen=True)
class Booking:
    """A booking as returned by the bookings API."""

    id: str
    client_name: str | None
    barber_name: str | None
    service_name: str | None
    date: str | None
    time: str | None
    status: BookingStatus = BookingStatus.PENDING
    comment: str | None = None
    service_ids: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Booking":
        """Parse a booking, tolerating nested or flat reference fields."""
        return cls(
            id=_entity_id(payload),
            client_name=_reference_name(payload, "client"),
            barber_name=_reference_name(payload, "barber"),
            service_name=_reference_name(payload, "service"),
            date=_optional_str(payload.get("date")),
            time=_optional_str(payload.get("time")),
            status=_lenient_status(payload.get("status")),
            comment=_optional_str(payload.get("comment")),
            service_ids=_service_ids(payload),
        )


@dataclass(frozen=True)
class BookingDraft:
    """Client-submitted booking request."""

    barber_id: str
    service_id: str
    date: str
    time: str
    comment: str | None = None

    def to_payload(self, client_id: str) -> dict[str, object]:
        """Build the create payload; new bookings are always pending."""
        payload: dict[str, object] = {
            "client_id": coerce_id(client_id),
            "barber_id": coerce_id(self.barber_id),
            "service_id": coerce_id(self.service_id),
            "date": self.date,
            "time": self.time,
            "status": BookingStatus.PENDING.value,
        }
        if self.comment:
            payload["comment"] = self.comment
        return payload


def coerce_id(value: str) -> int | str:
    """Send numeric ids as integers and anything else unchanged."""
    text = str(value).strip()
    return int(text) if text.isdigit() else text


def _entity_id(payload: dict[str, object]) -> str:
    value = payload.get("id")
    if value is None:
        value = payload.get("_id")
    return "" if value is None else str(value)


def _reference_name(payload: dict[str, object], key: str) -> str | None:
    nested = payload.get(key)
    if isinstance(nested, dict) and nested.get("name"):
        return str(nested["name"])
    return _optional_str(payload.get(f"{key}_name"))


def _service_ids(payload: dict[str, object]) -> tuple[str, ...]:
    services = payload.get("services")
    if isinstance(services, list):
        return tuple(
            str(item.get("id")) for item in services if isinstance(item, dict)
        )
    service_ids = payload.get("service_ids")
    if isinstance(service_ids, list):
        return tuple(str(item) for item in service_ids)
    if payload.get("service_id") is not None:
        return (str(payload["service_id"]),)
    return ()


def _lenient_status(value: object) -> BookingStatus:
    try:
        return BookingStatus.parse(value)
    except ValueError:
        return BookingStatus.PENDING


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
