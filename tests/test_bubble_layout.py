"""
Unit tests for bubble layout and pagination.
"""

from typing import List

import pytest

from chat_export.models import PageConfig, Role, Turn
from chat_export.services.rendering import TextMeasurer, bidi, render_pages, wrap_text

# 40 characters: with the 0.5 x font-size measure at 11pt a line holds one such word
LONG_WORD = "x" * 40


def _lines_of(count: int) -> str:
    return " ".join([LONG_WORD] * count)


def _all_bubbles(pages) -> List:
    return [bubble for page in pages for bubble in page.bubbles]


def test_wrap_keeps_every_word_in_order(page_config: PageConfig, char_measure) -> None:
    measurer = TextMeasurer(page_config, char_measure)
    text = "The quick brown fox jumps over the lazy dog " * 12
    lines = wrap_text(text, page_config.max_text_width, measurer)
    assert " ".join(lines).split() == text.split()
    assert all(measurer.width(line) <= page_config.max_text_width for line in lines)
    assert len(lines) > 1


def test_wrap_places_overlong_word_on_its_own_line(page_config: PageConfig, char_measure) -> None:
    measurer = TextMeasurer(page_config, char_measure)
    huge = "y" * 200
    assert wrap_text(f"short {huge} tail", page_config.max_text_width, measurer) == [
        "short",
        huge,
        "tail",
    ]


def test_wrap_empty_text_has_no_lines(page_config: PageConfig, char_measure) -> None:
    assert wrap_text("   ", page_config.max_text_width, TextMeasurer(page_config, char_measure)) == []


def test_measurer_falls_back_to_estimate_on_failure(page_config: PageConfig) -> None:
    def broken(text: str, font_size: float) -> float:
        raise KeyError("missing glyph")

    measurer = TextMeasurer(page_config, broken)
    expected = 10 * page_config.font_size * page_config.char_width_factor
    assert measurer.width("a" * 10) == pytest.approx(expected)
    assert TextMeasurer(page_config).width("a" * 10) == pytest.approx(expected)


def test_bubble_geometry_and_alignment_by_role(
    page_config: PageConfig, char_measure, make_turns
) -> None:
    turns = make_turns(("user", "Hi"), ("assistant", "Hello!"), ("system", "Be brief."))
    pages = render_pages(turns, page_config=page_config, measure=char_measure)
    assert len(pages) == 1
    user, assistant, system = pages[0].bubbles

    assert user.width == pytest.approx(0.70 * page_config.usable_width)
    assert user.x + user.width == pytest.approx(page_config.page_width - page_config.margin)
    assert assistant.x == pytest.approx(page_config.margin)
    assert system.x == pytest.approx(page_config.margin)

    assert user.height == pytest.approx(page_config.line_height + 2 * page_config.padding)
    assert user.top == pytest.approx(page_config.top)
    assert assistant.top == pytest.approx(user.y - page_config.gap)

    assert user.background == page_config.user_style.background
    assert assistant.background == page_config.assistant_style.background
    assert system.background == page_config.system_style.background


def test_bubbles_stay_within_margins_across_pages(
    page_config: PageConfig, char_measure, make_turns
) -> None:
    turns = make_turns(*[("user" if i % 2 == 0 else "assistant", _lines_of(7)) for i in range(20)])
    pages = render_pages(turns, page_config=page_config, measure=char_measure)
    assert len(pages) > 1
    assert len(_all_bubbles(pages)) == 20
    for page in pages:
        for bubble in page.bubbles:
            assert bubble.y >= page_config.bottom
            assert bubble.top <= page_config.top + 1e-6


def test_oversize_bubble_breaks_page_once_and_is_not_split(
    page_config: PageConfig, char_measure, make_turns
) -> None:
    # 36 lines leave room for 10 more lines on the first page
    turns = make_turns(("assistant", _lines_of(36)), ("user", _lines_of(60)))
    pages = render_pages(turns, page_config=page_config, measure=char_measure)

    assert len(pages) == 2
    first, second = pages[0].bubbles[0], pages[1].bubbles[0]
    assert len(first.lines) == 36
    assert len(second.lines) == 60
    assert len(pages[1].bubbles) == 1
    assert second.top == pytest.approx(page_config.top)
    assert second.y < page_config.bottom


def test_bubble_that_fits_stays_on_current_page(
    page_config: PageConfig, char_measure, make_turns
) -> None:
    turns = make_turns(("assistant", _lines_of(36)), ("user", _lines_of(10)))
    pages = render_pages(turns, page_config=page_config, measure=char_measure)
    assert len(pages) == 1
    assert len(pages[0].bubbles) == 2


def test_oversize_first_bubble_does_not_leave_empty_page(
    page_config: PageConfig, char_measure, make_turns
) -> None:
    pages = render_pages(
        make_turns(("assistant", _lines_of(80))), page_config=page_config, measure=char_measure
    )
    assert len(pages) == 1
    assert pages[0].bubbles[0].top == pytest.approx(page_config.top)


def test_no_turns_yields_one_empty_page(page_config: PageConfig) -> None:
    pages = render_pages([], page_config=page_config)
    assert len(pages) == 1
    assert pages[0].bubbles == []
    assert pages[0].width == page_config.page_width


def test_empty_turn_renders_padding_only_bubble(page_config: PageConfig) -> None:
    pages = render_pages([Turn(role=Role.ASSISTANT, text="")], page_config=page_config)
    bubble = pages[0].bubbles[0]
    assert bubble.lines == []
    assert bubble.height == pytest.approx(2 * page_config.padding)


def test_rtl_lines_are_flagged_and_isolated(page_config: PageConfig, char_measure) -> None:
    hebrew = "".join(chr(c) for c in (0x05E9, 0x05DC, 0x05D5, 0x05DD))
    turn = Turn(role=Role.USER, text=f"{hebrew} GPT-4 {hebrew}")
    bubble = render_pages([turn], page_config=page_config, measure=char_measure)[0].bubbles[0]
    assert bubble.rtl_lines == [True]
    assert bidi.LRI in bubble.lines[0]
    assert bidi.strip_isolates(bubble.lines[0]) == f"{hebrew} GPT-4 {hebrew}"


def test_custom_page_config_changes_bubble_width(char_measure) -> None:
    config = PageConfig(page_width=400, page_height=600, margin=20, bubble_width_ratio=0.5)
    bubble = render_pages(
        [Turn(role=Role.USER, text="hello")], page_config=config, measure=char_measure
    )[0].bubbles[0]
    assert bubble.width == pytest.approx(180)
    assert bubble.x == pytest.approx(200)


def test_page_config_rejects_margins_without_room() -> None:
    with pytest.raises(ValueError):
        PageConfig(page_width=100, margin=60)
