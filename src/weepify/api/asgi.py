"""ASGI entrypoint for the Weepify API."""

from weepify.api.app import create_app
from weepify.containers import build_container

app = create_app(build_container())
