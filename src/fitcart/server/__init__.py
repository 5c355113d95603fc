"""ASGI application factory and dependencies for the fitcart server."""

from fitcart.server.app import app, create_app

__all__ = ["app", "create_app"]
