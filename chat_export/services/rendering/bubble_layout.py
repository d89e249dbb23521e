"""
Bubble layout renderer.

Lays a turn sequence out as chat bubbles on fixed-size pages. The output is a
renderer-agnostic list of pages holding positioned, styled bubbles; a writer
such as :class:`chat_export.services.rendering.pdf_writer.PDFWriterService`
turns them into drawing calls.
"""

import logging
from typing import Callable, List, Optional

from chat_export.models import Bubble, Page, PageConfig, Role, Turn
from chat_export.services.rendering.bidi import contains_rtl, isolate_ltr_runs

logger = logging.getLogger(__name__)

MeasureFn = Callable[[str, float], float]


class TextMeasurer:
    """Width of a string at the configured font size.

    Falls back to a fixed per-character estimate when no measuring function
    is available or when it fails for a particular string.
    """

    def __init__(self, config: PageConfig, measure: Optional[MeasureFn] = None) -> None:
        self._measure = measure
        self._font_size = config.font_size
        self._char_width = config.font_size * config.char_width_factor

    def estimate(self, text: str) -> float:
        return len(text) * self._char_width

    def width(self, text: str) -> float:
        if self._measure is None:
            return self.estimate(text)
        try:
            return float(self._measure(text, self._font_size))
        except Exception as e:
            logger.debug(f"Text measurement failed, using estimate: {e}")
            return self.estimate(text)


def wrap_text(text: str, max_width: float, measurer: TextMeasurer) -> List[str]:
    """Greedy word-wrap; a word wider than ``max_width`` gets a line of its own."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
            continue
        candidate = f"{current} {word}"
        if measurer.width(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def _layout_bubble(
    turn: Turn, config: PageConfig, measurer: TextMeasurer, top: float
) -> Bubble:
    wrapped = wrap_text(turn.text, config.max_text_width, measurer)
    style = config.style_for(turn.role)
    width = config.bubble_width
    height = len(wrapped) * config.line_height + 2 * config.padding
    if turn.role is Role.USER:
        x = config.page_width - config.margin - width
    else:
        x = config.margin
    return Bubble(
        role=turn.role,
        lines=[isolate_ltr_runs(line) for line in wrapped],
        rtl_lines=[contains_rtl(line) for line in wrapped],
        x=x,
        y=top - height,
        width=width,
        height=height,
        background=style.background,
        foreground=style.foreground,
        padding=config.padding,
        line_height=config.line_height,
        font_size=config.font_size,
    )


def render_pages(
    turns: List[Turn],
    page_config: Optional[PageConfig] = None,
    measure: Optional[MeasureFn] = None,
) -> List[Page]:
    """Place one bubble per turn, starting a new page whenever a bubble does not fit.

    Bubbles are never split. One that is taller than a whole page is placed at
    the top of its own page and runs past the bottom margin.
    """
    config = page_config or PageConfig()
    measurer = TextMeasurer(config, measure)

    pages: List[Page] = [Page(width=config.page_width, height=config.page_height)]
    cursor_y = config.top

    for turn in turns:
        bubble = _layout_bubble(turn, config, measurer, top=cursor_y)
        if bubble.y < config.bottom and pages[-1].bubbles:
            pages.append(Page(width=config.page_width, height=config.page_height))
            cursor_y = config.top
            bubble = bubble.model_copy(update={"y": cursor_y - bubble.height})
        if bubble.height > config.top - config.bottom:
            logger.warning(
                f"Bubble of {len(bubble.lines)} lines is taller than a page "
                "and overflows the bottom margin"
            )
        pages[-1].bubbles.append(bubble)
        cursor_y = bubble.y - config.gap

    logger.debug(f"Laid out {len(turns)} turn(s) on {len(pages)} page(s)")
    return pages
