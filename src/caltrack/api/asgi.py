"""ASGI entrypoint for the CalTrack API."""

from caltrack.api.app import create_app
from caltrack.containers import build_container

app = create_app(build_container())
