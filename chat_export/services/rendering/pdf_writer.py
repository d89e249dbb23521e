"""
PDF writer service.

Draws the pages produced by the bubble layout renderer onto a reportlab canvas
and returns the finished document as bytes.
"""

import io
import logging
from pathlib import Path
from typing import List, Optional

from reportlab.lib.colors import Color
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from chat_export.config import settings
from chat_export.models import Bubble, Page, PageConfig, Turn
from chat_export.services.rendering.bidi import strip_isolates
from chat_export.services.rendering.bubble_layout import render_pages

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"
DEFAULT_TITLE_FONT = "Helvetica-Bold"
EMBEDDED_FONT_NAME = "ChatExportSans"
TITLE_FONT_SIZE = 18
FOOTER_FONT_SIZE = 8
BUBBLE_CORNER_RADIUS = 8


class PDFRenderError(Exception):
    """Raised when a laid-out conversation cannot be written as PDF."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PDFWriterService:
    """Service for writing chat-bubble pages to PDF."""

    def __init__(self, font_path: Optional[str] = None) -> None:
        self.font_name = DEFAULT_FONT
        self.title_font_name = DEFAULT_TITLE_FONT
        path = font_path if font_path is not None else settings.PDF_FONT_PATH
        if path:
            self._register_font(path)

    def _register_font(self, path: str) -> None:
        if not Path(path).is_file():
            logger.warning(f"PDF font not found at {path}; falling back to {DEFAULT_FONT}")
            return
        try:
            pdfmetrics.registerFont(TTFont(EMBEDDED_FONT_NAME, path))
        except Exception as e:
            logger.warning(f"Failed to register PDF font {path}: {e}")
            return
        self.font_name = EMBEDDED_FONT_NAME
        self.title_font_name = EMBEDDED_FONT_NAME
        logger.info(f"Registered PDF font {path}")

    @property
    def embeds_unicode_font(self) -> bool:
        return self.font_name == EMBEDDED_FONT_NAME

    def measure(self, text: str, font_size: float) -> float:
        """Width of ``text`` in the body font."""
        return pdfmetrics.stringWidth(self._printable(text), self.font_name, font_size)

    def _printable(self, text: str) -> str:
        # Standard Type 1 fonts have no glyphs for the isolate controls
        return text if self.embeds_unicode_font else strip_isolates(text)

    def _draw_bubble(self, pdf_canvas: canvas.Canvas, bubble: Bubble) -> None:
        pdf_canvas.setFillColor(Color(*bubble.background))
        pdf_canvas.roundRect(
            bubble.x,
            bubble.y,
            bubble.width,
            bubble.height,
            BUBBLE_CORNER_RADIUS,
            fill=1,
            stroke=0,
        )
        pdf_canvas.setFillColor(Color(*bubble.foreground))
        pdf_canvas.setFont(self.font_name, bubble.font_size)
        for idx, line in enumerate(bubble.lines):
            text = self._printable(line)
            baseline = bubble.baseline(idx)
            is_rtl = idx < len(bubble.rtl_lines) and bubble.rtl_lines[idx]
            if is_rtl:
                pdf_canvas.drawRightString(bubble.x + bubble.width - bubble.padding, baseline, text)
            else:
                pdf_canvas.drawString(bubble.x + bubble.padding, baseline, text)

    def _draw_title(self, pdf_canvas: canvas.Canvas, page: Page, title: str, margin: float) -> None:
        pdf_canvas.setFillColor(Color(0, 0, 0))
        pdf_canvas.setFont(self.title_font_name, TITLE_FONT_SIZE)
        pdf_canvas.drawString(margin, page.height - margin + 12, self._printable(title))

    def _draw_footer(
        self, pdf_canvas: canvas.Canvas, page: Page, page_num: int, total: int, margin: float
    ) -> None:
        pdf_canvas.setFillColor(Color(0.4, 0.45, 0.55))
        pdf_canvas.setFont(self.font_name, FOOTER_FONT_SIZE)
        pdf_canvas.drawRightString(page.width - margin, margin / 2, f"{page_num} / {total}")

    def write(self, pages: List[Page], title: str, page_config: Optional[PageConfig] = None) -> bytes:
        """
        Draw laid-out pages to a PDF document.

        Args:
            pages: Pages produced by ``render_pages``
            title: Title drawn above the first bubble
            page_config: Geometry the pages were laid out with (margins)

        Returns:
            PDF file content as bytes

        Raises:
            PDFRenderError: If reportlab fails to produce the document
        """
        config = page_config or PageConfig()
        buffer = io.BytesIO()
        try:
            first = pages[0] if pages else Page(width=config.page_width, height=config.page_height)
            pdf_canvas = canvas.Canvas(buffer, pagesize=(first.width, first.height))
            pdf_canvas.setTitle(title)
            all_pages = pages or [first]
            for page_num, page in enumerate(all_pages, 1):
                pdf_canvas.setPageSize((page.width, page.height))
                if page_num == 1 and title:
                    self._draw_title(pdf_canvas, page, title, config.margin)
                for bubble in page.bubbles:
                    self._draw_bubble(pdf_canvas, bubble)
                self._draw_footer(pdf_canvas, page, page_num, len(all_pages), config.margin)
                pdf_canvas.showPage()
            pdf_canvas.save()
        except Exception as e:
            logger.error(f"PDF generation failed: {e}")
            raise PDFRenderError(f"Failed to generate PDF: {str(e)}") from e

        pdf_bytes = buffer.getvalue()
        logger.info(f"Generated PDF with {len(pages)} page(s) ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def render(
        self, turns: List[Turn], title: str, page_config: Optional[PageConfig] = None
    ) -> bytes:
        """Lay ``turns`` out as bubbles and write them to PDF."""
        config = page_config or PageConfig()
        pages = render_pages(turns, page_config=config, measure=self.measure)
        return self.write(pages, title=title, page_config=config)
