"""Tests for the DOCX renderer."""

import io

from docx import Document
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.shared import Pt

from resume_builder.domain.models import PersonalInfo, ResumeDocument, SkillCategory
from resume_builder.renderers.docx import NAME_STYLE, SECTION_STYLE, render_docx


def _open(data: bytes):
    return Document(io.BytesIO(data))


def _section_titles(doc):
    return [p.text for p in doc.paragraphs if p.style.name == SECTION_STYLE]


class TestRenderDocx:
    def test_name_and_sections(self, full_resume):
        doc = _open(render_docx(full_resume))
        names = [p.text for p in doc.paragraphs if p.style.name == NAME_STYLE]
        assert names == ["ALEX RIVERA"]
        assert _section_titles(doc) == ["SUMMARY", "CORE STRENGTHS", "EXPERIENCE", "EDUCATION", "PROJECTS"]

    def test_page_setup(self, full_resume):
        section = _open(render_docx(full_resume, "compact")).sections[0]
        assert section.page_width == Pt(612)
        assert section.page_height == Pt(792)
        assert section.left_margin == Pt(36)
        assert section.top_margin == Pt(26)

    def test_native_hyperlinks(self, full_resume):
        doc = _open(render_docx(full_resume))
        targets = {rel.target_ref for rel in doc.part.rels.values() if rel.reltype == RT.HYPERLINK}
        assert {
            "mailto:alex@example.com",
            "https://github.com/alexr",
            "https://alexrivera.dev",
            "https://linkedin.com/in/alexrivera",
            "https://github.com/alexr/ledgerlite",
        } <= targets

    def test_section_headings_have_gold_rule(self, full_resume):
        doc = _open(render_docx(full_resume))
        heading = next(p for p in doc.paragraphs if p.style.name == SECTION_STYLE)
        xml = heading._p.xml
        assert "w:pBdr" in xml
        assert 'w:color="C5A000"' in xml

    def test_rows_use_right_tab(self, jane_doe):
        doc = _open(render_docx(jane_doe))
        texts = [p.text for p in doc.paragraphs]
        assert "Acme\tJan 2022 - Present" in texts
        assert "•\tDid X" in texts

    def test_core_properties(self, jane_doe):
        props = _open(render_docx(jane_doe)).core_properties
        assert props.title == "Jane Doe Resume"
        assert props.author == "Jane Doe"

    def test_empty_categories_are_filtered(self):
        doc = ResumeDocument(
            personal_info=PersonalInfo(full_name="Jane"),
            core_strengths=(
                SkillCategory(category="Languages", skills="Python"),
                SkillCategory(category="Tools", skills=""),
            ),
        )
        texts = [p.text for p in _open(render_docx(doc)).paragraphs]
        assert "•\tLanguages: Python" in texts
        assert not any("Tools" in t for t in texts)
