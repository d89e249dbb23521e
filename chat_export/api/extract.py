"""
Extract API endpoints.

This module contains the FastAPI route that turns a share URL or raw chat text
into role-tagged turns (and, on request, user/assistant pairs).
"""

import logging
from typing import Union

from fastapi import APIRouter, Response

from chat_export.api.error_mapping import error_for_exception
from chat_export.models import ErrorResponse, ExtractRequest, ExtractResponse
from chat_export.services import ExportService, to_pairs

router = APIRouter(prefix="/extract")

# Initialize services
export_service = ExportService()

logger = logging.getLogger(__name__)


@router.post("")
async def extract_conversation(
    request: ExtractRequest, response: Response
) -> Union[ExtractResponse, ErrorResponse]:
    """Parse a conversation from raw text or a public share URL."""
    if not request.url and not request.content:
        response.status_code = 400
        return ErrorResponse(
            code="INVALID_INPUT",
            message="Provide a single chat URL (url) or raw content (content).",
        )

    try:
        transcript, host = await export_service.extract(url=request.url, content=request.content)
    except Exception as e:
        status, body = error_for_exception(e)
        logger.warning(f"Extraction failed ({body.code}): {body.message}")
        response.status_code = status
        return body

    return ExtractResponse(
        host=host,
        count=len(transcript.turns),
        tier=transcript.tier,
        degradation=transcript.degradation,
        messages=transcript.turns,
        pairs=to_pairs(transcript.turns) if request.format == "pairs" else None,
    )
