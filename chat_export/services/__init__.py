# isort: skip_file
"""
Services module for the chat share exporter

This module exports the service classes and functions for transcript parsing,
bubble rendering, share-page scraping and export orchestration.
"""

from chat_export.services.transcript import parse_transcript, parse_transcript_detailed, to_pairs
from chat_export.services.rendering import PDFRenderError, PDFWriterService, render_pages
from chat_export.services.scraper import (
    ChatNotFound,
    ScrapeFailed,
    SharePageScraperService,
    ShareLinkError,
    ShareLinkService,
)
from chat_export.services.export_service import ExportService

__all__ = [
    "parse_transcript",
    "parse_transcript_detailed",
    "to_pairs",
    "PDFRenderError",
    "PDFWriterService",
    "render_pages",
    "ChatNotFound",
    "ScrapeFailed",
    "SharePageScraperService",
    "ShareLinkError",
    "ShareLinkService",
    "ExportService",
]
