"""
Share-page scraping and share-link validation.
"""

from chat_export.services.scraper.errors import ChatNotFound, ScrapeFailed, ShareLinkError
from chat_export.services.scraper.share_links import (
    PreflightResult,
    ResolvedUrl,
    ShareLinkService,
    validate_share_url,
)
from chat_export.services.scraper.share_page_scraper import (
    SharePageScraperService,
    finalize_text,
    selectors_for_host,
)

__all__ = [
    "ChatNotFound",
    "ScrapeFailed",
    "ShareLinkError",
    "PreflightResult",
    "ResolvedUrl",
    "ShareLinkService",
    "validate_share_url",
    "SharePageScraperService",
    "finalize_text",
    "selectors_for_host",
]
