"""ASGI entrypoint for the barbershop web client."""

from barbershop_client.api.app import create_app
from barbershop_client.containers import build_container

app = create_app(build_container())
