"""
Transcript pattern table.

Boilerplate, role-marker and masthead phrases are provider-specific and drift as
chat UIs change, so they live in a JSON table (bundled next to this module and
overridable through ``TRANSCRIPT_PATTERNS_PATH``) instead of parser control flow.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Tuple

from chat_export.config import settings
from chat_export.models import Role

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS_PATH = Path(__file__).with_name("transcript_patterns.json")


@dataclass(frozen=True)
class RoleMarker:
    """A label such as ``You said:`` that announces the next speaker."""

    role: Role
    pattern: Pattern[str]


@dataclass(frozen=True)
class ProviderProfile:
    """Host-specific quirks: masthead lines and whether role markup is missing."""

    name: str
    host_suffixes: Tuple[str, ...]
    markup_free: bool
    masthead: Tuple[Pattern[str], ...]

    def matches_host(self, host: str) -> bool:
        host = (host or "").strip().lower()
        return any(host == sfx or host.endswith("." + sfx) for sfx in self.host_suffixes)


@dataclass(frozen=True)
class TranscriptPatterns:
    """Compiled pattern table used by the noise filter and the role parser."""

    turn_delimiter: str
    drop_exact: Tuple[Pattern[str], ...]
    drop_prefixes: Tuple[Pattern[str], ...]
    markers: Tuple[RoleMarker, ...]
    providers: Tuple[ProviderProfile, ...] = field(default_factory=tuple)

    def match_marker(self, line: str) -> Optional[Tuple[Role, str]]:
        """Return the announced role and the text after the label, if ``line`` is a marker."""
        for marker in self.markers:
            found = marker.pattern.match(line)
            if found:
                return marker.role, line[found.end() :].strip()
        return None

    def is_boilerplate(self, line: str) -> bool:
        if any(rx.fullmatch(line) for rx in self.drop_exact):
            return True
        return any(rx.match(line) for rx in self.drop_prefixes)

    def strip_leading_labels(self, text: str) -> str:
        """Remove every leading role label; applying it twice changes nothing."""
        stripped = text.strip()
        while True:
            for marker in self.markers:
                found = marker.pattern.match(stripped)
                if found:
                    stripped = stripped[found.end() :].strip()
                    break
            else:
                return stripped

    def provider_for_host(self, host: str) -> Optional[ProviderProfile]:
        for provider in self.providers:
            if provider.matches_host(host):
                return provider
        return None


def _compile_all(raw_patterns: List[str], anchor: bool = False) -> Tuple[Pattern[str], ...]:
    prefix = "^" if anchor else ""
    return tuple(re.compile(prefix + p, re.IGNORECASE) for p in raw_patterns)


def parse_patterns(data: Dict) -> TranscriptPatterns:
    """Build a compiled pattern table from its JSON representation."""
    markers = tuple(
        RoleMarker(
            role=Role(item["role"]),
            pattern=re.compile(re.escape(item["label"]) + r"\s*", re.IGNORECASE),
        )
        for item in data.get("markers", [])
    )
    providers = tuple(
        ProviderProfile(
            name=item["name"],
            host_suffixes=tuple(s.lower() for s in item.get("host_suffixes", [])),
            markup_free=bool(item.get("markup_free", False)),
            masthead=_compile_all(item.get("masthead", [])),
        )
        for item in data.get("providers", [])
    )
    return TranscriptPatterns(
        turn_delimiter=data.get("turn_delimiter", "---TURN---"),
        drop_exact=_compile_all(data.get("drop_exact", [])),
        drop_prefixes=_compile_all(data.get("drop_prefixes", []), anchor=True),
        markers=markers,
        providers=providers,
    )


@lru_cache(maxsize=8)
def load_patterns(path: Optional[str] = None) -> TranscriptPatterns:
    """Load the pattern table from ``path`` or the bundled default."""
    source = Path(path) if path else DEFAULT_PATTERNS_PATH
    with source.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    logger.debug(f"Loaded transcript patterns from {source}")
    return parse_patterns(data)


def get_patterns() -> TranscriptPatterns:
    """Pattern table selected by configuration."""
    return load_patterns(settings.TRANSCRIPT_PATTERNS_PATH or None)
