"""HTTP API for the taskboard service."""

from taskboard.api.app import create_app

__all__ = ["create_app"]
