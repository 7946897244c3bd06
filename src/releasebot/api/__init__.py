"""HTTP API - GitHub webhook receiver and status endpoint."""

from releasebot.api.app import create_app

__all__ = ["create_app"]
