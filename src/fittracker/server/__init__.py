"""ASGI application factory and dependencies for the fittracker server."""

from fittracker.server.app import app, create_app

__all__ = ["app", "create_app"]
