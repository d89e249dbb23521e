"""
Transcript-related Pydantic models.

This module contains the role-tagged turn records produced by the transcript
parser and the request/response pairs derived from them.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Speaker role of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ParseTier(str, Enum):
    """Attribution strategy that produced a parsed transcript."""

    DELIMITER = "delimiter"
    MARKERS = "markers"
    ALTERNATION = "alternation"
    SINGLE = "single"


class Degradation(str, Enum):
    """How much structure could be recovered from the raw text."""

    NORMAL = "normal"
    DEGRADED = "degraded"
    MINIMAL = "minimal"


class Turn(BaseModel):
    """One speaker's contribution, in conversation order."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Speaker role: user, assistant or system")
    text: str = Field(..., description="Turn text with leading role labels removed")


class Pair(BaseModel):
    """Accumulated text of one user request and the assistant response."""

    user: str = Field("", description="User side of the exchange")
    assistant: str = Field("", description="Assistant side of the exchange")

    @property
    def is_complete(self) -> bool:
        return bool(self.user and self.assistant)

    @property
    def is_empty(self) -> bool:
        return not (self.user or self.assistant)


class ParsedTranscript(BaseModel):
    """Parser output together with the tier that produced it."""

    model_config = ConfigDict(frozen=True)

    turns: List[Turn] = Field(..., description="Ordered conversation turns")
    tier: ParseTier = Field(..., description="Attribution tier that produced the turns")

    @property
    def degradation(self) -> Degradation:
        if self.tier is ParseTier.SINGLE:
            return Degradation.MINIMAL
        if self.tier is ParseTier.ALTERNATION:
            return Degradation.DEGRADED
        # Explicit tiers only count as normal when more than one speaker was found
        if len({turn.role for turn in self.turns}) >= 2:
            return Degradation.NORMAL
        return Degradation.MINIMAL if len(self.turns) <= 1 else Degradation.DEGRADED
