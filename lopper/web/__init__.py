"""HTTP API for lopper."""

from lopper.web.app import create_app

__all__ = ["create_app"]
