"""
Role-attribution parser.

Reconstructs the ordered, role-tagged turns of a conversation from scraped page
text. Three strategies are tried from the most to the least trustworthy signal
and the first applicable one wins:

- delimiter: the scraper isolated one UI element per turn and joined them with
  the reserved turn delimiter; roles alternate starting with the user.
- markers: role labels (``You said:``, ``Assistant:`` ...) switch the speaker.
- alternation: for providers that emit no role markup at all, blank-line
  separated paragraphs alternate between user and assistant.

Parsing never raises; when nothing usable is found the whole text becomes a
single assistant turn.
"""

import logging
import re
from typing import List, Optional

from chat_export.models import ParsedTranscript, ParseTier, Role, Turn
from chat_export.services.transcript.noise_filter import (
    Paragraph,
    filter_lines,
    segment_paragraphs,
    strip_masthead,
)
from chat_export.services.transcript.patterns import TranscriptPatterns, get_patterns

logger = logging.getLogger(__name__)

BLANK_LINE_SPLIT = re.compile(r"\n(?:[ \t]*\n)+")
BOM = "\ufeff"


class MarkerAttribution:
    """State machine for marker-based attribution.

    The only state is the role currently collecting text and the accumulated
    paragraphs. A marker paragraph flushes the accumulator under the previous
    role and switches to the announced one; content paragraphs accumulate.
    """

    def __init__(self, patterns: TranscriptPatterns) -> None:
        self._patterns = patterns
        self.role = Role.ASSISTANT
        self._buffer: List[str] = []
        self.turns: List[Turn] = []

    def feed(self, paragraph: Paragraph) -> None:
        if paragraph.role is None:
            self._buffer.append(paragraph.text)
            return
        self._flush()
        self.role = paragraph.role
        remainder = self._patterns.strip_leading_labels(paragraph.text)
        if remainder:
            self._buffer.append(remainder)

    def finish(self) -> List[Turn]:
        self._flush()
        return self.turns

    def _flush(self) -> None:
        text = self._patterns.strip_leading_labels("\n".join(self._buffer))
        if text:
            self.turns.append(Turn(role=self.role, text=text))
        self._buffer = []


def _alternate(segments: List[str]) -> List[Turn]:
    turns: List[Turn] = []
    for idx, segment in enumerate(segments):
        role = Role.USER if idx % 2 == 0 else Role.ASSISTANT
        turns.append(Turn(role=role, text=segment))
    return turns


def _normalize_newlines(text: str) -> str:
    return text.lstrip(BOM).replace("\r\n", "\n").replace("\r", "\n")


def _single(text: str, patterns: Optional[TranscriptPatterns]) -> ParsedTranscript:
    stripped = patterns.strip_leading_labels(text) if patterns else text.strip()
    return ParsedTranscript(turns=[Turn(role=Role.ASSISTANT, text=stripped)], tier=ParseTier.SINGLE)


def _split_on_delimiter(text: str, patterns: TranscriptPatterns) -> List[str]:
    segments = [patterns.strip_leading_labels(part) for part in text.split(patterns.turn_delimiter)]
    return [segment for segment in segments if segment]


def _split_on_blank_lines(text: str, patterns: TranscriptPatterns) -> List[str]:
    segments: List[str] = []
    for block in BLANK_LINE_SPLIT.split(text):
        lines = filter_lines(block, patterns=patterns)
        segment = patterns.strip_leading_labels("\n".join(lines))
        if segment:
            segments.append(segment)
    return segments


def _parse(raw_text: str, source_host: str, patterns: TranscriptPatterns) -> ParsedTranscript:
    text = _normalize_newlines(raw_text)
    if not text.strip():
        return ParsedTranscript(turns=[Turn(role=Role.ASSISTANT, text="")], tier=ParseTier.SINGLE)

    body = strip_masthead(text, source_host=source_host, patterns=patterns)

    # The delimiter is authoritative: once present, no other tier runs
    if patterns.turn_delimiter and patterns.turn_delimiter in body:
        segments = _split_on_delimiter(body, patterns)
        if segments:
            return ParsedTranscript(turns=_alternate(segments), tier=ParseTier.DELIMITER)
        return _single(body.replace(patterns.turn_delimiter, ""), patterns)

    machine = MarkerAttribution(patterns)
    for paragraph in segment_paragraphs(body, source_host=source_host, patterns=patterns):
        machine.feed(paragraph)
    turns = machine.finish()

    single_speaker = len(turns) <= 1 or len({turn.role for turn in turns}) == 1
    provider = patterns.provider_for_host(source_host)
    if single_speaker and provider is not None and provider.markup_free:
        segments = _split_on_blank_lines(body, patterns)
        if len(segments) >= 2:
            return ParsedTranscript(turns=_alternate(segments), tier=ParseTier.ALTERNATION)
        return _single(body, patterns)

    if not turns:
        return _single(body, patterns)
    return ParsedTranscript(turns=turns, tier=ParseTier.MARKERS)


def parse_transcript_detailed(
    raw_text: str, source_host: str = "", patterns: Optional[TranscriptPatterns] = None
) -> ParsedTranscript:
    """Parse ``raw_text`` and report which tier produced the turns."""
    try:
        patterns = patterns or get_patterns()
        result = _parse(raw_text or "", source_host or "", patterns)
    except Exception as e:
        logger.exception(f"Transcript parsing failed, collapsing to a single turn: {e}")
        return _single(_normalize_newlines(raw_text or ""), patterns)
    logger.debug(
        f"Parsed {len(result.turns)} turn(s) for host '{source_host}' via {result.tier.value}"
    )
    return result


def parse_transcript(
    raw_text: str, source_host: str = "", patterns: Optional[TranscriptPatterns] = None
) -> List[Turn]:
    """Ordered, role-tagged turns reconstructed from scraped page text."""
    return parse_transcript_detailed(raw_text, source_host=source_host, patterns=patterns).turns
