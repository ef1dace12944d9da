"""ASGI application factory and dependencies for the Arian server."""

from arian.server.app import create_app

__all__ = ["create_app"]
