"""
Conversation export service.

Ties the collaborators together: obtains raw conversation text (directly or by
scraping a share URL), attributes roles, and renders chat-bubble PDFs, bundling
several of them into a ZIP archive when asked to.
"""

import asyncio
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from chat_export.config import settings
from chat_export.models import PageConfig, ParsedTranscript
from chat_export.services.rendering import PDFWriterService
from chat_export.services.scraper import (
    ScrapeFailed,
    SharePageScraperService,
    ShareLinkService,
)
from chat_export.services.transcript import parse_transcript_detailed

logger = logging.getLogger(__name__)

CUSTOM_CONTENT_HOST = "custom-content"
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ExtractTooShort(ScrapeFailed):
    """Raised when a share page yields too little text to be a conversation."""


class ExtractTooLarge(ScrapeFailed):
    """Raised when a share page yields more text than an export may hold."""


@dataclass
class ExportedDocument:
    """One rendered conversation."""

    filename: str
    content: bytes


def safe_filename(title: str, fallback: str = "chat") -> str:
    cleaned = UNSAFE_FILENAME_CHARS.sub("-", title).strip("-.")
    return cleaned[:80] or fallback


class ExportService:
    """Service for extracting and exporting shared conversations."""

    def __init__(
        self,
        share_links: Optional[ShareLinkService] = None,
        scraper: Optional[SharePageScraperService] = None,
        pdf_writer: Optional[PDFWriterService] = None,
        page_config: Optional[PageConfig] = None,
    ) -> None:
        self.share_links = share_links or ShareLinkService()
        self.scraper = scraper or SharePageScraperService()
        self.pdf_writer = pdf_writer or PDFWriterService()
        self.page_config = page_config or PageConfig()

    async def fetch_raw_text(self, url: str) -> Tuple[str, str]:
        """Scrape ``url`` and return ``(raw_text, source_host)``.

        Raises:
            ShareLinkError: If the URL is not allowed or the share is private
            ChatNotFound: If the share page returns 404
            ScrapeFailed: If too little or too much text was extracted
        """
        final_url = await self.share_links.prepare(url)
        raw = await self.scraper.scrape_text(final_url)
        if len(raw) < settings.MIN_EXTRACT_LENGTH:
            raise ExtractTooShort("Could not extract enough text.")
        if len(raw) > settings.MAX_TEXT_LENGTH:
            raise ExtractTooLarge("Extracted text is too large.")
        host = (urlparse(final_url).hostname or "").lower()
        return raw, host

    async def extract(
        self, url: Optional[str] = None, content: Optional[str] = None
    ) -> Tuple[ParsedTranscript, str]:
        """Parse raw ``content`` or the text scraped from ``url``."""
        if content and not url:
            return parse_transcript_detailed(content, CUSTOM_CONTENT_HOST), CUSTOM_CONTENT_HOST
        if not url:
            raise ValueError("Provide a chat URL or raw content.")
        raw, host = await self.fetch_raw_text(url)
        transcript = parse_transcript_detailed(raw, host)
        logger.info(
            f"Extracted {len(transcript.turns)} turn(s) from {host} "
            f"({transcript.degradation.value})"
        )
        return transcript, host

    async def render(self, transcript: ParsedTranscript, title: str) -> bytes:
        """Lay out and draw ``transcript`` in a worker thread."""
        return await asyncio.to_thread(
            self.pdf_writer.render, transcript.turns, title=title, page_config=self.page_config
        )

    async def export_one(
        self, title: str, url: Optional[str] = None, content: Optional[str] = None
    ) -> ExportedDocument:
        transcript, _host = await self.extract(url=url, content=content)
        return ExportedDocument(
            filename=f"{safe_filename(title)}.pdf",
            content=await self.render(transcript, title),
        )

    async def export_many(self, title: str, urls: List[str]) -> bytes:
        """Render one PDF per URL and bundle them into a ZIP archive."""
        documents: List[ExportedDocument] = []
        for idx, url in enumerate(urls, 1):
            doc_title = f"{title} ({idx})"
            document = await self.export_one(doc_title, url=url)
            document.filename = f"{idx:02d}-{safe_filename(title)}.pdf"
            documents.append(document)
        return build_zip(documents)


def build_zip(documents: List[ExportedDocument]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for document in documents:
            archive.writestr(document.filename, document.content)
    logger.debug(f"Packed {len(documents)} PDF(s) into ZIP")
    return buffer.getvalue()
