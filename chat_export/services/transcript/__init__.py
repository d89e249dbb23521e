"""
Transcript parsing: noise filtering, role attribution and pair aggregation.
"""

from chat_export.services.transcript.noise_filter import (
    Paragraph,
    filter_lines,
    segment_paragraphs,
    strip_masthead,
)
from chat_export.services.transcript.pairs import to_pairs
from chat_export.services.transcript.patterns import (
    TranscriptPatterns,
    get_patterns,
    load_patterns,
    parse_patterns,
)
from chat_export.services.transcript.role_parser import (
    parse_transcript,
    parse_transcript_detailed,
)

__all__ = [
    "Paragraph",
    "filter_lines",
    "segment_paragraphs",
    "strip_masthead",
    "to_pairs",
    "TranscriptPatterns",
    "get_patterns",
    "load_patterns",
    "parse_patterns",
    "parse_transcript",
    "parse_transcript_detailed",
]
