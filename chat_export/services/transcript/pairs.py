"""
Pair aggregation.

Groups a turn sequence into user/assistant request-response pairs. System
turns neither open nor close a pair.
"""

from typing import List

from chat_export.models import Pair, Role, Turn

PAIR_TEXT_SEPARATOR = "\n\n"


def _append(existing: str, text: str) -> str:
    return existing + PAIR_TEXT_SEPARATOR + text if existing else text


def to_pairs(turns: List[Turn]) -> List[Pair]:
    """Group turns into pairs; a trailing partial pair is still emitted.

    Consecutive user turns before any assistant reply are concatenated into
    the same pair. A pair closes as soon as both sides hold text, and a user
    turn arriving after an assistant-only pair closes that pair first.
    """
    pairs: List[Pair] = []
    current = Pair()

    for turn in turns:
        if turn.role is Role.SYSTEM:
            continue
        if turn.role is Role.USER:
            if current.assistant:
                pairs.append(current)
                current = Pair()
            current = Pair(user=_append(current.user, turn.text), assistant=current.assistant)
        else:
            current = Pair(user=current.user, assistant=_append(current.assistant, turn.text))
            if current.is_complete:
                pairs.append(current)
                current = Pair()

    if not current.is_empty:
        pairs.append(current)
    return pairs
