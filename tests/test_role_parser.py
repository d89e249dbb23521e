"""
Unit tests for the three-tier role-attribution parser.
"""

from typing import List

import pytest

from chat_export.models import Degradation, ParseTier, Role, Turn
from chat_export.services.transcript import (
    get_patterns,
    parse_patterns,
    parse_transcript,
    parse_transcript_detailed,
)

GEMINI_HOST = "gemini.google.com"


def _roles(turns: List[Turn]) -> List[Role]:
    return [t.role for t in turns]


def _assert_alternating(turns: List[Turn]) -> None:
    assert turns[0].role is Role.USER
    for current, following in zip(turns, turns[1:]):
        assert current.role is not following.role


def test_marker_example_user_then_assistant() -> None:
    turns = parse_transcript("You said:\nHi\nAssistant:\nHello!", "")
    assert turns == [Turn(role=Role.USER, text="Hi"), Turn(role=Role.ASSISTANT, text="Hello!")]


def test_delimiter_example_alternates_from_user() -> None:
    result = parse_transcript_detailed("Q1---TURN---A1---TURN---Q2", "")
    assert result.tier is ParseTier.DELIMITER
    assert result.turns == [
        Turn(role=Role.USER, text="Q1"),
        Turn(role=Role.ASSISTANT, text="A1"),
        Turn(role=Role.USER, text="Q2"),
    ]
    _assert_alternating(result.turns)


def test_delimiter_tier_strips_labels_and_bypasses_markers() -> None:
    raw = "You said: first question\n\n---TURN---\n\nUser: this is really the answer\n\n---TURN---\n\n"
    turns = parse_transcript(raw, GEMINI_HOST)
    assert turns == [
        Turn(role=Role.USER, text="first question"),
        Turn(role=Role.ASSISTANT, text="this is really the answer"),
    ]


def test_alternation_example_for_markup_free_host() -> None:
    raw = "How do tides work?\n\nThe moon's gravity pulls on the oceans."
    result = parse_transcript_detailed(raw, GEMINI_HOST)
    assert result.tier is ParseTier.ALTERNATION
    assert result.degradation is Degradation.DEGRADED
    assert result.turns == [
        Turn(role=Role.USER, text="How do tides work?"),
        Turn(role=Role.ASSISTANT, text="The moon's gravity pulls on the oceans."),
    ]


def test_alternation_not_used_for_hosts_with_markup() -> None:
    raw = "How do tides work?\n\nThe moon's gravity pulls on the oceans."
    result = parse_transcript_detailed(raw, "chatgpt.com")
    assert result.tier is ParseTier.MARKERS
    assert result.turns == [
        Turn(role=Role.ASSISTANT, text="How do tides work? The moon's gravity pulls on the oceans.")
    ]


def test_alternation_invariant_holds_for_many_paragraphs() -> None:
    raw = "\n\n".join(f"paragraph number {i}" for i in range(7))
    turns = parse_transcript(raw, GEMINI_HOST)
    assert len(turns) == 7
    _assert_alternating(turns)


def test_alternation_with_single_paragraph_collapses_to_single_turn() -> None:
    result = parse_transcript_detailed("Only one block of text here", GEMINI_HOST)
    assert result.tier is ParseTier.SINGLE
    assert result.degradation is Degradation.MINIMAL
    assert result.turns == [Turn(role=Role.ASSISTANT, text="Only one block of text here")]


def test_alternation_skipped_when_markers_found_two_speakers() -> None:
    raw = "You said:\nQuestion\n\nGemini said:\nAnswer"
    result = parse_transcript_detailed(raw, GEMINI_HOST)
    assert result.tier is ParseTier.MARKERS
    assert _roles(result.turns) == [Role.USER, Role.ASSISTANT]


def test_alternation_strips_masthead_and_boilerplate() -> None:
    raw = "Gemini\nhttps://g.co/gemini/share/xyz\n\nFirst question\n\nSources\nFirst answer"
    turns = parse_transcript(raw, GEMINI_HOST)
    assert turns == [
        Turn(role=Role.USER, text="First question"),
        Turn(role=Role.ASSISTANT, text="First answer"),
    ]


def test_empty_input_yields_single_empty_assistant_turn() -> None:
    result = parse_transcript_detailed("", "")
    assert result.turns == [Turn(role=Role.ASSISTANT, text="")]
    assert result.degradation is Degradation.MINIMAL
    assert parse_transcript("   \n\n  ", GEMINI_HOST) == [Turn(role=Role.ASSISTANT, text="")]


def test_text_without_markers_defaults_to_assistant() -> None:
    turns = parse_transcript("Just some pasted answer\nacross two lines", "custom-content")
    assert turns == [Turn(role=Role.ASSISTANT, text="Just some pasted answer across two lines")]


def test_leading_text_before_first_marker_is_assistant_turn() -> None:
    turns = parse_transcript("Preamble\nUser:\nQuestion\nAssistant:\nAnswer", "")
    assert _roles(turns) == [Role.ASSISTANT, Role.USER, Role.ASSISTANT]
    assert turns[0].text == "Preamble"


def test_system_marker_produces_system_turn() -> None:
    turns = parse_transcript("System:\nBe concise.\nUser:\nHi\nAssistant:\nHello", "")
    assert turns == [
        Turn(role=Role.SYSTEM, text="Be concise."),
        Turn(role=Role.USER, text="Hi"),
        Turn(role=Role.ASSISTANT, text="Hello"),
    ]


def test_text_on_marker_line_is_kept() -> None:
    turns = parse_transcript("User: what is 2+2?\nAssistant: 4", "")
    assert turns == [Turn(role=Role.USER, text="what is 2+2?"), Turn(role=Role.ASSISTANT, text="4")]


def test_lines_within_a_turn_are_space_joined() -> None:
    raw = "You said:\nline one\nline two\nChatGPT said:\nfirst part\nThought for 4s\nsecond part"
    turns = parse_transcript(raw, "chatgpt.com")
    assert turns == [
        Turn(role=Role.USER, text="line one line two"),
        Turn(role=Role.ASSISTANT, text="first part second part"),
    ]


def test_consecutive_markers_do_not_emit_empty_turns() -> None:
    turns = parse_transcript("You said:\nUser:\nHello\nAssistant:\nAssistant:\nHi", "")
    assert turns == [Turn(role=Role.USER, text="Hello"), Turn(role=Role.ASSISTANT, text="Hi")]


def test_only_boilerplate_collapses_to_single_turn() -> None:
    result = parse_transcript_detailed("Sources\nThought for 2s", "chatgpt.com")
    assert result.tier is ParseTier.SINGLE
    assert len(result.turns) == 1
    assert result.turns[0].role is Role.ASSISTANT


def test_windows_newlines_are_normalized() -> None:
    turns = parse_transcript("You said:\r\nHi\r\nAssistant:\r\nHello!", "")
    assert turns == [Turn(role=Role.USER, text="Hi"), Turn(role=Role.ASSISTANT, text="Hello!")]


@pytest.mark.parametrize(
    "text",
    [
        "User: Assistant: hello",
        "Assistant: User: hello",
        "You said: ChatGPT said: System: hello",
        "hello",
        "",
    ],
)
def test_strip_leading_labels_is_idempotent(text: str) -> None:
    patterns = get_patterns()
    once = patterns.strip_leading_labels(text)
    assert patterns.strip_leading_labels(once) == once
    assert not once.lower().startswith(("user:", "assistant:"))


def test_coverage_keeps_all_non_boilerplate_words() -> None:
    raw = "You said:\nalpha beta\nSources\nAssistant:\ngamma\ndelta epsilon\nUser:\nzeta"
    turns = parse_transcript(raw, "")
    words = " ".join(t.text for t in turns).split()
    assert words == ["alpha", "beta", "gamma", "delta", "epsilon", "zeta"]


def test_parser_never_raises_and_degrades_on_internal_failure() -> None:
    class ExplodingPatterns:
        turn_delimiter = "---TURN---"

        def provider_for_host(self, host: str) -> None:
            raise RuntimeError("boom")

        def strip_leading_labels(self, text: str) -> str:
            return text.strip()

    result = parse_transcript_detailed("  some text  ", "", patterns=ExplodingPatterns())  # type: ignore[arg-type]
    assert result.tier is ParseTier.SINGLE
    assert result.turns == [Turn(role=Role.ASSISTANT, text="some text")]


def test_custom_pattern_table_changes_markers() -> None:
    patterns = parse_patterns(
        {
            "turn_delimiter": "===",
            "markers": [{"label": "Q:", "role": "user"}, {"label": "A:", "role": "assistant"}],
        }
    )
    turns = parse_transcript("Q: ping\nA: pong", "", patterns=patterns)
    assert turns == [Turn(role=Role.USER, text="ping"), Turn(role=Role.ASSISTANT, text="pong")]
    assert _roles(parse_transcript("one===two", "", patterns=patterns)) == [
        Role.USER,
        Role.ASSISTANT,
    ]


@pytest.mark.parametrize("host", ["", GEMINI_HOST, "chatgpt.com"])
def test_delimiter_only_input_never_leaks_the_delimiter(host: str) -> None:
    for raw in ("---TURN---", "---TURN---\n\n---TURN---", "  ---TURN---  \n---TURN---\n"):
        result = parse_transcript_detailed(raw, host)
        assert result.tier is ParseTier.SINGLE
        assert result.turns == [Turn(role=Role.ASSISTANT, text="")]


def test_delimiter_tier_does_not_fall_back_to_markers() -> None:
    result = parse_transcript_detailed("You said:\n---TURN---\nAssistant:", "")
    assert all("---TURN---" not in turn.text for turn in result.turns)
    assert result.tier is ParseTier.SINGLE


def test_leading_byte_order_mark_is_ignored() -> None:
    turns = parse_transcript("\uFEFFYou said:\nHi\nAssistant:\nYo", "")
    assert turns == [Turn(role=Role.USER, text="Hi"), Turn(role=Role.ASSISTANT, text="Yo")]
