"""HTML preview renderer (Jinja2, autoescaped)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

from jinja2 import Environment, FileSystemLoader

from ..domain.layout import DOCX_FONT_NAME, LayoutFormat, LayoutPolicy, get_layout
from ..domain.models import ResumeDocument
from ..domain.sections import Section, SectionKind, contact_items, plan_sections
from .common import custom_item_rows, education_rows, experience_rows, legacy_skills_line, skill_category_parts

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

EMPTY_STATE_MESSAGE = "Start filling in your details to see your resume preview"

env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=True)


def render_preview(
    document: ResumeDocument,
    layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD,
) -> str:
    """Render *document* as a self-contained HTML page."""
    policy = get_layout(layout_format)
    context: Dict[str, Any] = {
        "css": preview_css(policy),
        "format": policy.format.value,
        "empty": not document.has_content(),
        "empty_message": EMPTY_STATE_MESSAGE,
        "title": f"{document.full_name} Resume" if document.full_name else "Resume",
        "name": document.full_name,
        "contacts": contact_items(document.personal_info),
        "sections": [_section_view(section) for section in plan_sections(document)],
    }
    return env.get_template("preview.html").render(**context)


def _section_view(section: Section) -> Dict[str, Any]:
    view: Dict[str, Any] = {
        "kind": section.kind.value,
        "key": section.key,
        "title": section.title,
        "paragraphs": [],
        "strengths": [],
        "entries": [],
    }
    if section.kind is SectionKind.SUMMARY:
        view["paragraphs"] = list(section.items)
    elif section.kind is SectionKind.CORE_STRENGTHS:
        view["strengths"] = [skill_category_parts(c) for c in section.items]
    elif section.kind is SectionKind.SKILLS:
        view["paragraphs"] = [legacy_skills_line(section.items)]
    elif section.kind is SectionKind.EXPERIENCE:
        view["entries"] = [
            {"rows": experience_rows(e), "text": "", "bullets": list(e.visible_bullets)} for e in section.items
        ]
    elif section.kind is SectionKind.EDUCATION:
        view["entries"] = [{"rows": education_rows(e), "text": "", "bullets": []} for e in section.items]
    elif section.kind is SectionKind.CUSTOM:
        view["entries"] = _custom_entries(section)
    return view


def _custom_entries(section: Section) -> List[Dict[str, Any]]:
    entries = []
    for item in section.items:
        entries.append(
            {
                "rows": custom_item_rows(item),
                "text": (item.description or "").strip(),
                "bullets": list(item.visible_bullets),
            }
        )
    return entries


def preview_css(policy: LayoutPolicy) -> str:
    return env.get_template("preview.css").render(policy=policy, fonts=policy.fonts, font_family=DOCX_FONT_NAME)
