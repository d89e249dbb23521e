"""
Mapping from service exceptions to API error responses.
"""

import logging
from typing import Tuple

from chat_export.models import ErrorResponse
from chat_export.services import ChatNotFound, PDFRenderError, ScrapeFailed, ShareLinkError
from chat_export.services.export_service import ExtractTooLarge, ExtractTooShort

logger = logging.getLogger(__name__)


def error_for_exception(exc: Exception) -> Tuple[int, ErrorResponse]:
    """Return the HTTP status and error body for an exception raised by the export services."""
    if isinstance(exc, ShareLinkError):
        status = 422 if exc.code == "PRIVATE_SHARE" else 400
        return status, ErrorResponse(code=exc.code, message=exc.message, details=exc.details)
    if isinstance(exc, ChatNotFound):
        return 404, ErrorResponse(code="CHAT_NOT_FOUND", message=exc.message)
    if isinstance(exc, ExtractTooShort):
        return 422, ErrorResponse(code="EXTRACT_EMPTY", message=exc.message)
    if isinstance(exc, ExtractTooLarge):
        return 422, ErrorResponse(code="EXTRACT_TOO_LARGE", message=exc.message)
    if isinstance(exc, ScrapeFailed):
        return 500, ErrorResponse(
            code="SCRAPE_FAILED",
            message="Failed to extract conversation.",
            details={"message": exc.message, "status": exc.status},
        )
    if isinstance(exc, PDFRenderError):
        return 500, ErrorResponse(code="PDF_ERROR", message=exc.message)
    if isinstance(exc, ValueError):
        return 400, ErrorResponse(code="INVALID_INPUT", message=str(exc))
    logger.exception(f"Unexpected export failure: {exc}")
    return 500, ErrorResponse(
        code="INTERNAL_ERROR", message="Unexpected error.", details={"message": str(exc)}
    )
