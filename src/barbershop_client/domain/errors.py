"""Failure taxonomy for calls to the barbershop API."""

from barbershop_client.domain.routing import LOGIN_PATH


class BarbershopError(Exception):
    """Base error for the barbershop client."""


class ApiError(BarbershopError):
    """A request did not produce a usable success response."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SessionExpiredError(ApiError):
    """The API rejected the credential; the session has been reset."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)
        self.location = LOGIN_PATH


class NetworkError(ApiError):
    """No response was received from the API."""


class ServerRejectionError(ApiError):
    """The API answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
