"""HTTP API for the ClipHistory front end."""

from cliphistory.api.server import create_app

__all__ = ["create_app"]
