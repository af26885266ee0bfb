"""API route handlers."""

from api.routes import health, verify

__all__ = ["health", "verify"]
