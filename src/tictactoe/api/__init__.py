"""HTTP and WebSocket bridge between a UI client and a local game session."""

from .app import create_app  # noqa: F401
