"""Paginated PDF renderer.

Rendering happens in two stages:

1. :class:`PdfLayoutEngine` turns a document into a list of :class:`PdfPage`
   plans. A plan is a flat list of positioned drawing operations (text, rules,
   link rectangles) in points, origin at the top-left, y growing downward.
   The engine tracks a vertical cursor and starts a new page before any
   atomic unit (a bullet, a wrapped summary line, an entry heading...) that
   would cross the bottom margin.
2. :func:`render_pdf` paints the plans with PyMuPDF.

Text is measured and painted with the same :class:`fitz.Font` objects, so
wrapping matches what is drawn. Text is painted through :class:`fitz.TextWriter`
so characters outside Latin-1 (bullets, dashes, curly quotes) survive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple, Union

import fitz  # PyMuPDF

from ..domain.layout import ACCENT_COLOR, TEXT_COLOR, LayoutFormat, LayoutPolicy, get_layout
from ..domain.models import CustomSectionItem, ResumeDocument
from ..domain.sections import Section, SectionKind, contact_items, plan_sections
from .common import (
    BULLET,
    Row,
    custom_item_rows,
    education_rows,
    experience_rows,
    legacy_skills_line,
    skill_category_parts,
)

logger = logging.getLogger(__name__)

# PyMuPDF base-14 Times faces.
FONT_NAMES = {
    "regular": "tiro",
    "bold": "tibo",
    "italic": "tiit",
    "bolditalic": "tibi",
}

Color = Tuple[int, int, int]


# ---------------------------------------------------------------------------
# Page plan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextOp:
    """Text drawn with its baseline at ``y``."""

    text: str
    x: float
    y: float
    font: str
    size: float
    color: Color = TEXT_COLOR

    def shifted(self, dy: float) -> "TextOp":
        return TextOp(self.text, self.x, self.y + dy, self.font, self.size, self.color)


@dataclass(frozen=True)
class RuleOp:
    x0: float
    x1: float
    y: float
    width: float
    color: Color = ACCENT_COLOR

    def shifted(self, dy: float) -> "RuleOp":
        return RuleOp(self.x0, self.x1, self.y + dy, self.width, self.color)


@dataclass(frozen=True)
class LinkOp:
    """Invisible clickable rectangle over already-drawn text."""

    x0: float
    y0: float
    x1: float
    y1: float
    uri: str

    def shifted(self, dy: float) -> "LinkOp":
        return LinkOp(self.x0, self.y0 + dy, self.x1, self.y1 + dy, self.uri)


Op = Union[TextOp, RuleOp, LinkOp]


@dataclass
class PdfPage:
    number: int
    ops: List[Op] = field(default_factory=list)
    section_keys: List[str] = field(default_factory=list)
    bottom: float = 0.0

    @property
    def text_ops(self) -> List[TextOp]:
        return [op for op in self.ops if isinstance(op, TextOp)]

    @property
    def link_ops(self) -> List[LinkOp]:
        return [op for op in self.ops if isinstance(op, LinkOp)]

    def text(self) -> str:
        return " ".join(op.text for op in self.text_ops)


@dataclass
class _Line:
    """One row of a unit; op coordinates are relative to the row's top."""

    height: float
    ops: List[Op] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _font(style: str) -> fitz.Font:
    return fitz.Font(FONT_NAMES[style])


def text_width(text: str, style: str, size: float) -> float:
    return _font(style).text_length(text, fontsize=size)


def wrap_text(text: str, style: str, size: float, first_width: float, rest_width: Optional[float] = None) -> List[str]:
    """Greedy word wrap at measured glyph widths.

    Words wider than the available width are broken by characters so no line
    ever overflows.
    """
    rest = first_width if rest_width is None else rest_width
    lines: List[str] = []
    current = ""
    for word in text.split():
        width = first_width if not lines else rest
        candidate = f"{current} {word}" if current else word
        if text_width(candidate, style, size) <= width:
            current = candidate
            continue
        if current:
            lines.append(current)
            current = ""
            width = rest
        while text_width(word, style, size) > width:
            head = _fit_prefix(word, style, size, width)
            lines.append(head)
            word = word[len(head):]
            width = rest
        current = word
    if current:
        lines.append(current)
    return lines


def _fit_prefix(word: str, style: str, size: float, width: float) -> str:
    end = 1
    while end < len(word) and text_width(word[: end + 1], style, size) <= width:
        end += 1
    return word[:end]


def _baseline(height: float, size: float) -> float:
    return (height + size) / 2 - size * 0.2


# ---------------------------------------------------------------------------
# Layout engine
# ---------------------------------------------------------------------------


class PdfLayoutEngine:
    """Lay out a document onto pages.

    With ``paginate=False`` everything lands on one unbounded page, which is
    the reference used to check that pagination never drops or reorders
    content.
    """

    def __init__(self, policy: LayoutPolicy, paginate: bool = True):
        self.policy = policy
        self.paginate = paginate
        self.fonts = policy.fonts
        self.pages: List[PdfPage] = []
        self.cursor = 0.0
        self._fresh = True

    # -- public ------------------------------------------------------------

    def layout(self, document: ResumeDocument) -> List[PdfPage]:
        self.pages = []
        self._new_page()

        self._header(document)
        for section in plan_sections(document):
            self._section(section)

        self.pages[-1].bottom = self.cursor
        return self.pages

    # -- cursor ------------------------------------------------------------

    def _new_page(self) -> None:
        if self.pages:
            self.pages[-1].bottom = self.cursor
        self.pages.append(PdfPage(number=len(self.pages) + 1))
        self.cursor = self.policy.top
        self._fresh = True

    def _gap(self, height: float) -> None:
        # Spacing is dropped at the top of a page.
        if not self._fresh:
            self.cursor += height

    def _place(self, lines: Sequence[_Line], lookahead: float = 0.0) -> None:
        required = sum(line.height for line in lines) + lookahead
        if self.paginate and self.cursor + required > self.policy.bottom_limit:
            if not self._fresh:
                self._new_page()
            if self.cursor + required > self.policy.bottom_limit:
                # Taller than a page: draw it anyway rather than loop forever.
                logger.warning("Unit of %.1fpt does not fit on a page; drawing past the bottom margin", required)
        page = self.pages[-1]
        for line in lines:
            page.ops.extend(op.shifted(self.cursor) for op in line.ops)
            self.cursor += line.height
        self._fresh = False

    # -- header ------------------------------------------------------------

    def _header(self, document: ResumeDocument) -> None:
        p = self.policy
        name = document.full_name.upper()
        if name:
            size = self.fonts.name
            height = size + 4
            lines = [
                _Line(height, [TextOp(text, p.left + (p.content_width - width) / 2, _baseline(height, size), "bold", size)])
                for text, width in self._centered(name, "bold", size)
            ]
            self._place(lines)

        contact_lines = self._contact_lines(document)
        if contact_lines:
            self._place(contact_lines)
        if name or contact_lines:
            self.cursor += self.fonts.section_spacing * 2

    def _centered(self, text: str, style: str, size: float) -> List[Tuple[str, float]]:
        return [(line, text_width(line, style, size)) for line in wrap_text(text, style, size, self.policy.content_width)]

    def _contact_lines(self, document: ResumeDocument) -> List[_Line]:
        items = contact_items(document.personal_info)
        if not items:
            return []
        size = self.fonts.body
        height = self.fonts.line_height
        separator = " | "
        sep_width = text_width(separator, "regular", size)

        # Pack items greedily into centered rows.
        rows: List[List[Tuple[str, float, Optional[str]]]] = [[]]
        row_width = 0.0
        for item in items:
            width = text_width(item.text, "regular", size)
            extra = width if not rows[-1] else sep_width + width
            if rows[-1] and row_width + extra > self.policy.content_width:
                rows.append([])
                row_width = 0.0
                extra = width
            rows[-1].append((item.text, width, item.href))
            row_width += extra

        lines = []
        for row in rows:
            total = sum(w for _, w, _ in row) + sep_width * (len(row) - 1)
            x = self.policy.left + max(0.0, (self.policy.content_width - total) / 2)
            baseline = _baseline(height, size)
            ops: List[Op] = []
            for index, (text, width, href) in enumerate(row):
                if index:
                    ops.append(TextOp(separator, x, baseline, "regular", size))
                    x += sep_width
                ops.append(TextOp(text, x, baseline, "regular", size))
                if href:
                    ops.append(LinkOp(x, 0.0, x + width, height, href))
                x += width
            lines.append(_Line(height, ops))
        return lines

    # -- sections ----------------------------------------------------------

    def _section(self, section: Section) -> None:
        units = self._section_units(section)
        self._gap(self.fonts.section_spacing * 3)
        header = self._section_header(section.title)
        first_height = sum(line.height for line in units[0][1]) if units else 0.0
        self._place(header, lookahead=first_height)
        self.pages[-1].section_keys.append(section.key)
        for gap, lines in units:
            self._gap(gap)
            self._place(lines)

    def _section_header(self, title: str) -> List[_Line]:
        p = self.policy
        size = self.fonts.section_header
        height = self.fonts.line_height + 2
        title_line = _Line(height, [TextOp(title.upper(), p.left, _baseline(height, size), "bold", size)])
        rule_line = _Line(
            p.header_rule_gap + p.header_rule_width + self.fonts.section_spacing * 2,
            [RuleOp(p.left, p.right, p.header_rule_gap, p.header_rule_width)],
        )
        return [title_line, rule_line]

    def _section_units(self, section: Section) -> List[Tuple[float, List[_Line]]]:
        """Atomic units of a section as ``(gap_before, lines)`` pairs."""
        units: List[Tuple[float, List[_Line]]] = []
        if section.kind is SectionKind.SUMMARY:
            units.extend((0.0, [line]) for line in self._paragraph(section.items[0]))
        elif section.kind is SectionKind.CORE_STRENGTHS:
            units.extend((0.0, self._labelled_bullet(*skill_category_parts(c))) for c in section.items)
        elif section.kind is SectionKind.SKILLS:
            units.extend((0.0, [line]) for line in self._paragraph(legacy_skills_line(section.items)))
        elif section.kind is SectionKind.EXPERIENCE:
            for index, entry in enumerate(section.items):
                gap = self.policy.entry_gap if index else 0.0
                units.append((gap, self._rows(experience_rows(entry))))
                units.extend((0.0, self._bullet(b)) for b in entry.visible_bullets)
        elif section.kind is SectionKind.EDUCATION:
            for index, entry in enumerate(section.items):
                gap = self.policy.entry_gap if index else 0.0
                units.append((gap, self._rows(education_rows(entry))))
        elif section.kind is SectionKind.CUSTOM:
            for index, item in enumerate(section.items):
                gap = self.policy.entry_gap if index else 0.0
                units.extend(self._custom_item(item, gap))
        # Drop empty units so the header lookahead always sees real content.
        return [(gap, lines) for gap, lines in units if lines]

    def _custom_item(self, item: CustomSectionItem, gap: float) -> List[Tuple[float, List[_Line]]]:
        units: List[Tuple[float, List[_Line]]] = []
        rows = self._rows(custom_item_rows(item))
        if rows:
            units.append((gap, rows))
            gap = 0.0
        if item.description:
            for line in self._paragraph(item.description):
                units.append((gap, [line]))
                gap = 0.0
        for bullet in item.visible_bullets:
            units.append((gap, self._bullet(bullet)))
            gap = 0.0
        return units

    # -- line builders -------------------------------------------------------

    def _paragraph(self, text: str, style: str = "regular") -> List[_Line]:
        """Wrapped lines of *text*; explicit line breaks are kept, blank lines included."""
        p = self.policy
        size = self.fonts.body
        height = self.fonts.line_height
        lines: List[_Line] = []
        for segment in text.strip().splitlines():
            wrapped = wrap_text(segment, style, size, p.content_width)
            if not wrapped:
                lines.append(_Line(height))
            lines.extend(_Line(height, [TextOp(line, p.left, _baseline(height, size), style, size)]) for line in wrapped)
        return lines

    def _bullet(self, text: str) -> List[_Line]:
        """Bullet glyph in the gutter; every text line starts at the hang indent."""
        p = self.policy
        size = self.fonts.body
        height = self.fonts.line_height
        x_text = p.left + p.bullet_indent
        wrapped = wrap_text(text, "regular", size, p.right - x_text)
        lines = []
        for index, line in enumerate(wrapped):
            baseline = _baseline(height, size)
            ops: List[Op] = []
            if index == 0:
                ops.append(TextOp(BULLET, p.left, baseline, "regular", size))
            ops.append(TextOp(line, x_text, baseline, "regular", size))
            lines.append(_Line(height, ops))
        return lines

    def _labelled_bullet(self, label: str, body: str) -> List[_Line]:
        p = self.policy
        size = self.fonts.body
        height = self.fonts.line_height
        baseline = _baseline(height, size)
        x_label = p.left + p.bullet_indent
        label_width = text_width(label, "bold", size)
        x_body = x_label + label_width
        x_rest = p.left + p.continuation_indent

        wrapped = wrap_text(body, "regular", size, p.right - x_body, p.right - x_rest)
        first_ops: List[Op] = [
            TextOp(BULLET, p.left, baseline, "regular", size),
            TextOp(label.rstrip(), x_label, baseline, "bold", size),
        ]
        if wrapped:
            first_ops.append(TextOp(wrapped[0], x_body, baseline, "regular", size))
        lines = [_Line(height, first_ops)]
        lines.extend(_Line(height, [TextOp(line, x_rest, baseline, "regular", size)]) for line in wrapped[1:])
        return lines

    def _rows(self, rows: Sequence[Row]) -> List[_Line]:
        """Heading rows (left field plus right-aligned field) kept together."""
        p = self.policy
        height = self.fonts.line_height
        lines: List[_Line] = []
        for row in rows:
            size = self.fonts.subheader if row.size == "subheader" else self.fonts.body
            baseline = _baseline(height, size)
            ops: List[Op] = []
            available = p.content_width
            if row.right:
                right_width = text_width(row.right, "regular", size)
                ops.append(TextOp(row.right, p.right - right_width, baseline, "regular", size))
                available = max(p.content_width - right_width - 8.0, p.content_width / 3)
            wrapped = wrap_text(row.left, row.style, size, available, p.content_width) if row.left else []
            if wrapped:
                ops.append(TextOp(wrapped[0], p.left, baseline, row.style, size))
                if row.href:
                    width = text_width(wrapped[0], row.style, size)
                    ops.append(LinkOp(p.left, 0.0, p.left + width, height, row.href))
            lines.append(_Line(height, ops))
            for extra in wrapped[1:]:
                lines.append(_Line(height, [TextOp(extra, p.left, baseline, row.style, size)]))
        return lines


# ---------------------------------------------------------------------------
# Painting
# ---------------------------------------------------------------------------


def _rgb(color: Color) -> Tuple[float, float, float]:
    return tuple(c / 255 for c in color)  # type: ignore[return-value]


def _paint_text(page: fitz.Page, ops: Sequence[TextOp]) -> None:
    # A TextWriter paints in a single colour, so keep one per colour.
    writers: Dict[Color, fitz.TextWriter] = {}
    for op in ops:
        writer = writers.get(op.color)
        if writer is None:
            writer = writers[op.color] = fitz.TextWriter(page.rect)
        writer.append(fitz.Point(op.x, op.y), op.text, font=_font(op.font), fontsize=op.size)
    for color, writer in writers.items():
        writer.write_text(page, color=_rgb(color))


def layout_pdf(
    document: ResumeDocument,
    layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD,
    paginate: bool = True,
) -> List[PdfPage]:
    return PdfLayoutEngine(get_layout(layout_format), paginate=paginate).layout(document)


def render_pdf(document: ResumeDocument, layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD) -> bytes:
    """Render *document* to PDF bytes."""
    policy = get_layout(layout_format)
    plans = PdfLayoutEngine(policy).layout(document)

    pdf = fitz.open()
    try:
        for plan in plans:
            page = pdf.new_page(width=policy.page_width, height=policy.page_height)
            _paint_text(page, plan.text_ops)
            for op in plan.ops:
                if isinstance(op, RuleOp):
                    page.draw_line(
                        fitz.Point(op.x0, op.y),
                        fitz.Point(op.x1, op.y),
                        color=_rgb(op.color),
                        width=op.width,
                    )
                elif isinstance(op, LinkOp):
                    page.insert_link(
                        {"kind": fitz.LINK_URI, "from": fitz.Rect(op.x0, op.y0, op.x1, op.y1), "uri": op.uri}
                    )
        name = document.full_name
        pdf.set_metadata({"title": f"{name} Resume", "author": name, "creator": "resume-builder"})
        data = pdf.tobytes(garbage=3, deflate=True)
    finally:
        pdf.close()

    logger.debug("Rendered PDF: %d page(s), %d bytes", len(plans), len(data))
    return data
