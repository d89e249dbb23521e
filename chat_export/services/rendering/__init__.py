"""
Chat-bubble rendering: layout, directional text correction and PDF output.
"""

from chat_export.services.rendering.bidi import contains_rtl, isolate_ltr_runs, strip_isolates
from chat_export.services.rendering.bubble_layout import (
    MeasureFn,
    TextMeasurer,
    render_pages,
    wrap_text,
)
from chat_export.services.rendering.pdf_writer import PDFRenderError, PDFWriterService

__all__ = [
    "contains_rtl",
    "isolate_ltr_runs",
    "strip_isolates",
    "MeasureFn",
    "TextMeasurer",
    "render_pages",
    "wrap_text",
    "PDFRenderError",
    "PDFWriterService",
]
