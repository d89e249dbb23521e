"""
Noise filter and paragraph segmenter.

Turns scraped page text into an ordered list of paragraphs: boilerplate lines
are dropped, provider mastheads are removed from the start of the text, and the
remaining lines are merged so that every role marker opens a new paragraph.
"""

import logging
from typing import List, NamedTuple, Optional

from chat_export.models import Role
from chat_export.services.transcript.patterns import TranscriptPatterns, get_patterns

logger = logging.getLogger(__name__)


class Paragraph(NamedTuple):
    """A segmented paragraph; ``role`` is set when it starts with a role label."""

    text: str
    role: Optional[Role] = None

    @property
    def is_marker(self) -> bool:
        return self.role is not None


def strip_masthead(
    raw_text: str, source_host: str = "", patterns: Optional[TranscriptPatterns] = None
) -> str:
    """Remove the provider masthead block from the beginning of ``raw_text``.

    Only a prefix is removed: stripping stops at the first non-blank line that
    matches none of the masthead patterns, and everything from there on is
    returned untouched (blank-line boundaries included).
    """
    patterns = patterns or get_patterns()
    provider = patterns.provider_for_host(source_host)
    if provider is None or not provider.masthead:
        return raw_text

    lines = raw_text.split("\n")
    start = 0
    for idx, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            start = idx + 1
            continue
        if any(rx.search(stripped) for rx in provider.masthead):
            start = idx + 1
            continue
        break
    if start:
        logger.debug(f"Stripped {start} masthead line(s) for provider {provider.name}")
    return "\n".join(lines[start:])


def filter_lines(raw_text: str, patterns: Optional[TranscriptPatterns] = None) -> List[str]:
    """Split into trimmed, non-empty lines without boilerplate.

    Role-marker lines are always kept, even when a vendor prefix would match
    them (``Gemini said:`` vs. the bare ``Gemini`` prefix).
    """
    patterns = patterns or get_patterns()
    kept: List[str] = []
    for line in raw_text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        if patterns.match_marker(stripped) is None and patterns.is_boilerplate(stripped):
            continue
        kept.append(stripped)
    return kept


def segment_paragraphs(
    raw_text: str, source_host: str = "", patterns: Optional[TranscriptPatterns] = None
) -> List[Paragraph]:
    """Split raw text into marker and content paragraphs."""
    patterns = patterns or get_patterns()
    text = strip_masthead(raw_text, source_host=source_host, patterns=patterns)

    paragraphs: List[Paragraph] = []
    buffer: List[str] = []
    for line in filter_lines(text, patterns=patterns):
        marker = patterns.match_marker(line)
        if marker is None:
            buffer.append(line)
            continue
        if buffer:
            paragraphs.append(Paragraph(text=" ".join(buffer)))
            buffer = []
        paragraphs.append(Paragraph(text=line, role=marker[0]))
    if buffer:
        paragraphs.append(Paragraph(text=" ".join(buffer)))
    return paragraphs
