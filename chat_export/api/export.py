"""
Export API endpoints.

This module contains the FastAPI route that renders conversations as
chat-bubble PDFs, or as a ZIP of PDFs when several share URLs are given.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from chat_export.api.error_mapping import error_for_exception
from chat_export.config import settings
from chat_export.models import ErrorResponse, ExportRequest
from chat_export.services import ExportService
from chat_export.services.export_service import safe_filename

router = APIRouter(prefix="/export")

# Initialize services
export_service = ExportService()

logger = logging.getLogger(__name__)


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename=\"{quote(filename)}\""},
    )


@router.post("", response_model=None)
async def export_conversation(request: ExportRequest) -> Response:
    """Render one conversation to PDF, or several share URLs to a ZIP of PDFs."""
    urls = list(request.urls)
    if request.url and request.url not in urls and urls:
        urls.insert(0, request.url)

    if not urls and not request.url and not request.content:
        return _error(
            400,
            ErrorResponse(code="INVALID_INPUT", message="Provide chat text or a share URL."),
        )
    if len(urls) > settings.MAX_EXPORT_URLS:
        return _error(
            400,
            ErrorResponse(
                code="TOO_MANY_URLS",
                message=f"At most {settings.MAX_EXPORT_URLS} URLs can be exported at once.",
                details={"count": len(urls)},
            ),
        )

    try:
        if len(urls) > 1:
            archive = await export_service.export_many(request.title, urls)
            return _attachment(archive, "application/zip", f"{safe_filename(request.title)}.zip")
        url = urls[0] if urls else request.url
        document = await export_service.export_one(
            request.title, url=url, content=None if url else request.content
        )
    except Exception as e:
        status, body = error_for_exception(e)
        logger.warning(f"Export failed ({body.code}): {body.message}")
        return _error(status, body)

    return _attachment(document.content, "application/pdf", document.filename)
