"""Helpers for interpreting API response bodies."""

from collections.abc import Sequence


def unwrap_list(body: object, plural_key: str) -> list[object]:
    """Return the list carried by a list-endpoint body.

    Bare arrays are used as-is. Objects are probed for ``data`` first and the
    resource-specific plural key second; anything else yields an empty list.
    """
    if isinstance(body, list):
        return body
    if not isinstance(body, dict):
        return []
    for key in ("data", plural_key):
        value = body.get(key)
        if isinstance(value, list):
            return value
    return []


def extract_error_message(
    body: object, fallback: str, keys: Sequence[str] = ("message",)
) -> str:
    """Return the server-provided message from an error body, else the fallback."""
    if isinstance(body, dict):
        for key in keys:
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
            if isinstance(value, list) and value:
                return "; ".join(str(item) for item in value)
    return fallback
