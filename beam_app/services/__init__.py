"""Services for the checker API."""

from .checker import CheckerService

__all__ = ["CheckerService"]
