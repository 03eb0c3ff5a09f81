"""Format-agnostic layout policy: page geometry, font sizes and spacing.

The same policy feeds the HTML preview, the paginated PDF renderer and the
DOCX renderer so the three stay visually aligned. All measurements are in
points.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union


class LayoutFormat(str, Enum):
    STANDARD = "standard"
    COMPACT = "compact"

    @classmethod
    def parse(cls, value: Union[str, "LayoutFormat"]) -> "LayoutFormat":
        """Accept a :class:`LayoutFormat` or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown layout format {value!r} (expected one of: {allowed})")


@dataclass(frozen=True)
class FontSizes:
    name: float
    section_header: float
    subheader: float
    body: float
    line_height: float
    section_spacing: float


# Fixed across formats.
PAGE_WIDTH = 612.0  # US Letter
PAGE_HEIGHT = 792.0
MARGIN_VERTICAL = 26.0
MARGIN_HORIZONTAL = 36.0
BULLET_INDENT = 8.0
CONTINUATION_INDENT = 12.0
HEADER_RULE_GAP = 2.0
HEADER_RULE_WIDTH = 1.5
ACCENT_COLOR: Tuple[int, int, int] = (197, 160, 0)  # #C5A000
TEXT_COLOR: Tuple[int, int, int] = (0, 0, 0)
LINK_COLOR: Tuple[int, int, int] = (5, 99, 193)  # #0563C1
FONT_FAMILY = "Times"
DOCX_FONT_NAME = "Times New Roman"


@dataclass(frozen=True)
class LayoutPolicy:
    format: LayoutFormat
    fonts: FontSizes
    entry_gap: float
    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    margin_vertical: float = MARGIN_VERTICAL
    margin_horizontal: float = MARGIN_HORIZONTAL
    bullet_indent: float = BULLET_INDENT
    continuation_indent: float = CONTINUATION_INDENT
    header_rule_gap: float = HEADER_RULE_GAP
    header_rule_width: float = HEADER_RULE_WIDTH

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin_horizontal

    @property
    def top(self) -> float:
        return self.margin_vertical

    @property
    def bottom_limit(self) -> float:
        """Lowest y (top-left origin) a row may reach before a page break."""
        return self.page_height - self.margin_vertical

    @property
    def left(self) -> float:
        return self.margin_horizontal

    @property
    def right(self) -> float:
        return self.page_width - self.margin_horizontal


_POLICIES: Dict[LayoutFormat, LayoutPolicy] = {
    LayoutFormat.STANDARD: LayoutPolicy(
        format=LayoutFormat.STANDARD,
        fonts=FontSizes(name=21, section_header=12, subheader=11, body=10, line_height=12, section_spacing=2),
        entry_gap=4,
    ),
    LayoutFormat.COMPACT: LayoutPolicy(
        format=LayoutFormat.COMPACT,
        fonts=FontSizes(name=18, section_header=12, subheader=11, body=10, line_height=12, section_spacing=1),
        entry_gap=2,
    ),
}


def get_layout(layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD) -> LayoutPolicy:
    return _POLICIES[LayoutFormat.parse(layout_format)]
