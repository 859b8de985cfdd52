"""Pydantic models for submitted forms."""

from pydantic import BaseModel, Field

from barbershop_client.domain.bookings import BookingDraft, BookingStatus


class LoginForm(BaseModel):
    """Login form payload."""

    login: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterForm(BaseModel):
    """Registration form payload."""

    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    password: str = Field(min_length=1)
    email: str | None = None


class BookingForm(BaseModel):
    """Booking form payload; any status field sent by the browser is ignored."""

    barber_id: int | str
    service_id: int | str
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)
    comment: str | None = None

    def to_draft(self) -> BookingDraft:
        return BookingDraft(
            barber_id=str(self.barber_id),
            service_id=str(self.service_id),
            date=self.date,
            time=self.time,
            comment=self.comment,
        )


class StatusForm(BaseModel):
    """Admin status selection."""

    status: BookingStatus
