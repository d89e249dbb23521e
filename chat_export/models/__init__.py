"""
Models module for the chat share exporter

This module exports all Pydantic models for data validation and API contracts.
"""

# Export API models
from chat_export.models.export import ErrorResponse, ExportRequest, ExtractRequest, ExtractResponse

# Rendering models
from chat_export.models.rendering import Bubble, BubbleStyle, Color, Page, PageConfig

# Transcript models
from chat_export.models.transcript import (
    Degradation,
    Pair,
    ParsedTranscript,
    ParseTier,
    Role,
    Turn,
)

__all__ = [
    "ErrorResponse",
    "ExportRequest",
    "ExtractRequest",
    "ExtractResponse",
    "Bubble",
    "BubbleStyle",
    "Color",
    "Page",
    "PageConfig",
    "Degradation",
    "Pair",
    "ParsedTranscript",
    "ParseTier",
    "Role",
    "Turn",
]
