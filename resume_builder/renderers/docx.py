"""DOCX renderer built from python-docx paragraphs and runs.

Word does its own line breaking and pagination; this module only maps the
layout policy onto page setup, paragraph spacing and tab stops. Headings are
marked keep-with-next so a section title never ends a page on its own.
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Union

from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from ..domain.layout import ACCENT_COLOR, DOCX_FONT_NAME, LINK_COLOR, LayoutFormat, LayoutPolicy, get_layout
from ..domain.models import ResumeDocument
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

NAME_STYLE = "Resume Name"
SECTION_STYLE = "Resume Section"


def _hex(color) -> str:
    return "{:02X}{:02X}{:02X}".format(*color)


def add_hyperlink(paragraph, text: str, url: str, size: Optional[float] = None, bold: bool = False):
    """Append a native ``w:hyperlink`` run to *paragraph*."""
    part = paragraph.part
    r_id = part.relate_to(url, RT.HYPERLINK, is_external=True)

    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)
    hyperlink.set(qn("w:history"), "1")

    new_run = OxmlElement("w:r")
    rPr = OxmlElement("w:rPr")

    style = OxmlElement("w:rStyle")
    style.set(qn("w:val"), "Hyperlink")
    rPr.append(style)
    if bold:
        rPr.append(OxmlElement("w:b"))
    color = OxmlElement("w:color")
    color.set(qn("w:val"), _hex(LINK_COLOR))
    rPr.append(color)
    if size:
        sz = OxmlElement("w:sz")
        sz.set(qn("w:val"), str(int(round(size * 2))))
        rPr.append(sz)
    underline = OxmlElement("w:u")
    underline.set(qn("w:val"), "single")
    rPr.append(underline)
    new_run.append(rPr)

    text_el = OxmlElement("w:t")
    text_el.text = text
    text_el.set(qn("xml:space"), "preserve")
    new_run.append(text_el)

    hyperlink.append(new_run)
    paragraph._p.append(hyperlink)
    return hyperlink


def add_bottom_border(paragraph, width_pt: float, color=ACCENT_COLOR) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), str(int(round(width_pt * 8))))  # eighths of a point
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), _hex(color))
    pBdr.append(bottom)
    pPr.append(pBdr)


class DocxRenderer:
    def __init__(self, policy: LayoutPolicy):
        self.policy = policy
        self.fonts = policy.fonts
        self.doc = Document()

    def render(self, document: ResumeDocument) -> bytes:
        self._setup()
        self._header(document)
        for section in plan_sections(document):
            self._section(section)

        props = self.doc.core_properties
        props.title = f"{document.full_name} Resume"
        props.author = document.full_name

        buffer = io.BytesIO()
        self.doc.save(buffer)
        return buffer.getvalue()

    # -- setup -------------------------------------------------------------

    def _setup(self) -> None:
        p = self.policy
        section = self.doc.sections[0]
        section.page_width = Pt(p.page_width)
        section.page_height = Pt(p.page_height)
        section.top_margin = Pt(p.margin_vertical)
        section.bottom_margin = Pt(p.margin_vertical)
        section.left_margin = Pt(p.margin_horizontal)
        section.right_margin = Pt(p.margin_horizontal)

        normal = self.doc.styles["Normal"]
        normal.font.name = DOCX_FONT_NAME
        normal.font.size = Pt(self.fonts.body)
        normal.paragraph_format.space_before = Pt(0)
        normal.paragraph_format.space_after = Pt(0)
        normal.paragraph_format.line_spacing = Pt(self.fonts.line_height)

        styles = self.doc.styles
        name_style = styles.add_style(NAME_STYLE, WD_STYLE_TYPE.PARAGRAPH)
        name_style.base_style = normal
        name_style.font.bold = True
        name_style.font.size = Pt(self.fonts.name)
        name_style.paragraph_format.alignment = WD_ALIGN_PARAGRAPH.CENTER
        name_style.paragraph_format.line_spacing = Pt(self.fonts.name + 4)

        section_style = styles.add_style(SECTION_STYLE, WD_STYLE_TYPE.PARAGRAPH)
        section_style.base_style = normal
        section_style.font.bold = True
        section_style.font.size = Pt(self.fonts.section_header)
        section_style.paragraph_format.space_before = Pt(self.fonts.section_spacing * 3)
        section_style.paragraph_format.space_after = Pt(self.fonts.section_spacing * 2)
        section_style.paragraph_format.keep_with_next = True

    # -- header ------------------------------------------------------------

    def _header(self, document: ResumeDocument) -> None:
        if document.full_name:
            self.doc.add_paragraph(document.full_name.upper(), style=NAME_STYLE)

        items = contact_items(document.personal_info)
        if not items:
            return
        para = self.doc.add_paragraph()
        para.alignment = WD_ALIGN_PARAGRAPH.CENTER
        para.paragraph_format.space_after = Pt(self.fonts.section_spacing * 2)
        for index, item in enumerate(items):
            if index:
                self._run(para, " | ")
            if item.href:
                add_hyperlink(para, item.text, item.href, size=self.fonts.body)
            else:
                self._run(para, item.text)

    # -- sections ----------------------------------------------------------

    def _section(self, section: Section) -> None:
        heading = self.doc.add_paragraph(style=SECTION_STYLE)
        add_bottom_border(heading, self.policy.header_rule_width)
        heading.add_run(section.title.upper())

        if section.kind is SectionKind.SUMMARY:
            self._paragraph(section.items[0])
        elif section.kind is SectionKind.CORE_STRENGTHS:
            for category in section.items:
                label, skills = skill_category_parts(category)
                para = self._bullet_paragraph(self.policy.continuation_indent)
                self._run(para, f"{BULLET}\t")
                self._run(para, label, bold=True)
                self._run(para, skills)
        elif section.kind is SectionKind.SKILLS:
            self._paragraph(legacy_skills_line(section.items))
        elif section.kind is SectionKind.EXPERIENCE:
            for index, entry in enumerate(section.items):
                self._rows(experience_rows(entry), first_gap=self.policy.entry_gap if index else 0)
                for bullet in entry.visible_bullets:
                    self._bullet(bullet)
        elif section.kind is SectionKind.EDUCATION:
            for index, entry in enumerate(section.items):
                self._rows(education_rows(entry), first_gap=self.policy.entry_gap if index else 0)
        elif section.kind is SectionKind.CUSTOM:
            for index, item in enumerate(section.items):
                gap = self.policy.entry_gap if index else 0
                rows = custom_item_rows(item)
                self._rows(rows, first_gap=gap)
                if item.description:
                    para = self._paragraph(item.description.strip())
                    if not rows and gap:
                        para.paragraph_format.space_before = Pt(gap)
                for bullet in item.visible_bullets:
                    self._bullet(bullet)

    # -- paragraph builders --------------------------------------------------

    def _run(self, paragraph, text: str, bold: bool = False, italic: bool = False, size: Optional[float] = None):
        run = paragraph.add_run(text)
        run.bold = bold or None
        run.italic = italic or None
        run.font.size = Pt(size or self.fonts.body)
        return run

    def _paragraph(self, text: str):
        para = self.doc.add_paragraph()
        self._run(para, text)
        return para

    def _bullet_paragraph(self, hang: float):
        para = self.doc.add_paragraph()
        fmt = para.paragraph_format
        fmt.left_indent = Pt(hang)
        fmt.first_line_indent = Pt(-hang)
        fmt.tab_stops.add_tab_stop(Pt(hang))
        return para

    def _bullet(self, text: str) -> None:
        para = self._bullet_paragraph(self.policy.bullet_indent)
        self._run(para, f"{BULLET}\t{text}")

    def _rows(self, rows, first_gap: float = 0) -> None:
        for index, row in enumerate(rows):
            self._row(row, space_before=first_gap if index == 0 else 0, keep_with_next=True)

    def _row(self, row: Row, space_before: float = 0, keep_with_next: bool = False) -> None:
        para = self.doc.add_paragraph()
        fmt = para.paragraph_format
        fmt.tab_stops.add_tab_stop(Pt(self.policy.content_width), WD_TAB_ALIGNMENT.RIGHT)
        fmt.keep_with_next = keep_with_next
        if space_before:
            fmt.space_before = Pt(space_before)

        size = self.fonts.subheader if row.size == "subheader" else self.fonts.body
        if row.left and row.href:
            add_hyperlink(para, row.left, row.href, size=size, bold=row.style == "bold")
        elif row.left:
            self._run(para, row.left, bold=row.style == "bold", italic=row.style == "italic", size=size)
        if row.right:
            self._run(para, f"\t{row.right}", size=size)


def render_docx(document: ResumeDocument, layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD) -> bytes:
    """Render *document* to DOCX bytes."""
    data = DocxRenderer(get_layout(layout_format)).render(document)
    logger.debug("Rendered DOCX: %d bytes", len(data))
    return data
