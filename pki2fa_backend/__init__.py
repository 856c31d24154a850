"""
BACKEND PACKAGE - Flask HTTP layer for the 2FA microservice.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
