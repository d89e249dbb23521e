"""
Export API Pydantic models.

Request and response contracts for the extract and export endpoints.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from chat_export.models.transcript import Degradation, Pair, ParseTier, Turn


class ExtractRequest(BaseModel):
    """Request payload for turning a share URL or raw text into turns."""

    url: Optional[str] = Field(None, description="Public share URL to scrape")
    content: Optional[str] = Field(None, description="Raw conversation text (skips scraping)")
    format: Literal["messages", "pairs"] = Field(
        "messages", description="Also include request/response pairs when 'pairs'"
    )

    @field_validator("url", "content")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


class ExtractResponse(BaseModel):
    """Parsed conversation returned by the extract endpoint."""

    ok: bool = Field(True, description="Always true for success responses")
    host: str = Field(..., description="Source host the text was attributed with")
    count: int = Field(..., description="Number of turns")
    tier: ParseTier = Field(..., description="Attribution tier that produced the turns")
    degradation: Degradation = Field(..., description="How much structure was recovered")
    messages: List[Turn] = Field(..., description="Ordered conversation turns")
    pairs: Optional[List[Pair]] = Field(None, description="Request/response pairs, on demand")


class ExportRequest(BaseModel):
    """Request payload for rendering one or more conversations to PDF."""

    title: str = Field("Chat Export", description="Document title drawn on the first page")
    content: Optional[str] = Field(None, description="Raw conversation text (skips scraping)")
    url: Optional[str] = Field(None, description="Public share URL to scrape")
    urls: List[str] = Field(
        default_factory=list, description="Several share URLs, exported together as a ZIP"
    )

    @field_validator("title")
    @classmethod
    def _default_title(cls, value: str) -> str:
        return value.strip() or "Chat Export"

    @field_validator("url", "content")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None

    @field_validator("urls")
    @classmethod
    def _drop_blank_urls(cls, value: List[str]) -> List[str]:
        return [u.strip() for u in value if u and u.strip()]


class ErrorResponse(BaseModel):
    """Error body shared by the export endpoints."""

    ok: bool = Field(False, description="Always false for error responses")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Extra context")
