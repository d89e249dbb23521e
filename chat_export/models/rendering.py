"""
Rendering-related Pydantic models.

Page geometry, role styling and the positioned bubble records produced by the
bubble layout renderer. Coordinates are PDF user space (origin bottom-left).
"""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from chat_export.models.transcript import Role

Color = Tuple[float, float, float]

A4_WIDTH = 595.28
A4_HEIGHT = 841.89


class BubbleStyle(BaseModel):
    """Fill and text colors of a bubble, as RGB floats in 0..1."""

    model_config = ConfigDict(frozen=True)

    background: Color
    foreground: Color


class PageConfig(BaseModel):
    """Page geometry, font metrics and role styling used by the layout pass."""

    model_config = ConfigDict(frozen=True)

    page_width: float = Field(A4_WIDTH, gt=0, description="Page width in points")
    page_height: float = Field(A4_HEIGHT, gt=0, description="Page height in points")
    margin: float = Field(50.0, ge=0, description="Margin on every page edge")
    font_size: float = Field(11.0, gt=0, description="Body font size")
    line_height: float = Field(15.0, gt=0, description="Distance between text baselines")
    padding: float = Field(8.0, ge=0, description="Inner bubble padding")
    gap: float = Field(10.0, ge=0, description="Vertical gap between bubbles")
    bubble_width_ratio: float = Field(
        0.70, gt=0, le=1, description="Bubble width as a fraction of the usable page width"
    )
    char_width_factor: float = Field(
        0.6, gt=0, description="Per-character width estimate (x font size) when measuring fails"
    )
    user_style: BubbleStyle = BubbleStyle(
        background=(0.145, 0.388, 0.922), foreground=(1.0, 1.0, 1.0)
    )
    assistant_style: BubbleStyle = BubbleStyle(
        background=(0.945, 0.953, 0.961), foreground=(0.067, 0.094, 0.153)
    )
    system_style: BubbleStyle = BubbleStyle(
        background=(1.0, 0.973, 0.820), foreground=(0.067, 0.094, 0.153)
    )

    @model_validator(mode="after")
    def _margins_leave_room(self) -> "PageConfig":
        if self.page_width - 2 * self.margin <= 0 or self.page_height - 2 * self.margin <= 0:
            raise ValueError("Margins leave no room for content on the page.")
        return self

    @property
    def usable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bubble_width(self) -> float:
        return self.usable_width * self.bubble_width_ratio

    @property
    def max_text_width(self) -> float:
        return max(self.bubble_width - 2 * self.padding, 0.0)

    @property
    def top(self) -> float:
        return self.page_height - self.margin

    @property
    def bottom(self) -> float:
        return self.margin

    def style_for(self, role: Role) -> BubbleStyle:
        if role is Role.USER:
            return self.user_style
        if role is Role.SYSTEM:
            return self.system_style
        return self.assistant_style


class Bubble(BaseModel):
    """A positioned, styled rectangle holding one turn's wrapped lines."""

    role: Role
    lines: List[str] = Field(default_factory=list, description="Wrapped (bidi-corrected) lines")
    rtl_lines: List[bool] = Field(
        default_factory=list, description="Per line: right-align because it holds RTL script"
    )
    x: float = Field(..., description="Left edge")
    y: float = Field(..., description="Bottom edge")
    width: float
    height: float
    background: Color
    foreground: Color
    padding: float
    line_height: float
    font_size: float

    @property
    def top(self) -> float:
        return self.y + self.height

    def baseline(self, index: int) -> float:
        """Baseline of the line at ``index``, counted from the top of the bubble."""
        return self.top - self.padding - self.font_size - index * self.line_height


class Page(BaseModel):
    """Bubbles placed on one page, in drawing order."""

    width: float
    height: float
    bubbles: List[Bubble] = Field(default_factory=list)
