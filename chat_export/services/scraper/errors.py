"""
Scraper errors module.

Holds exceptions shared across the share-link validator and the page scraper.
"""

from typing import Any, Dict, Optional


class ChatNotFound(Exception):
    """Exception raised when a shared conversation URL returns 404 or is not found."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ScrapeFailed(Exception):
    """Exception raised when a share page loads but no conversation text can be read."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class ShareLinkError(Exception):
    """Exception raised when a share URL is rejected before scraping."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
