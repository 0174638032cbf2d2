"""ASGI entrypoint for the Caloria API."""

from caloria.api.app import create_app
from caloria.containers import build_container

app = create_app(build_container())
