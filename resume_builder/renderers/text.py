"""Plain-text rendering for clipboard copy.

Right-hand fields are separated by a tab, links are written out in full and
sections follow the shared plan.
"""

from __future__ import annotations

from typing import List

from ..domain.models import ResumeDocument
from ..domain.sections import Section, SectionKind, contact_items, plan_sections
from .common import (
    Row,
    bullet_text,
    custom_item_rows,
    education_rows,
    experience_rows,
    legacy_skills_line,
    skill_category_parts,
)


def render_text(document: ResumeDocument) -> str:
    blocks: List[List[str]] = [_header(document)]
    for section in plan_sections(document):
        blocks.append([section.title.upper(), *_section_lines(section)])
    return "\n\n".join("\n".join(block) for block in blocks if block) + "\n"


def _header(document: ResumeDocument) -> List[str]:
    lines = []
    if document.full_name:
        lines.append(document.full_name.upper())
    contacts = contact_items(document.personal_info)
    if contacts:
        lines.append(" | ".join(item.value for item in contacts))
    return lines


def _section_lines(section: Section) -> List[str]:
    lines: List[str] = []
    if section.kind is SectionKind.SUMMARY:
        lines.extend(section.items)
    elif section.kind is SectionKind.CORE_STRENGTHS:
        for category in section.items:
            label, skills = skill_category_parts(category)
            lines.append(bullet_text(label + skills))
    elif section.kind is SectionKind.SKILLS:
        lines.append(legacy_skills_line(section.items))
    elif section.kind is SectionKind.EXPERIENCE:
        for index, entry in enumerate(section.items):
            if index:
                lines.append("")
            lines.extend(_row(r) for r in experience_rows(entry))
            lines.extend(bullet_text(b) for b in entry.visible_bullets)
    elif section.kind is SectionKind.EDUCATION:
        for entry in section.items:
            lines.extend(_row(r) for r in education_rows(entry))
    elif section.kind is SectionKind.CUSTOM:
        for index, item in enumerate(section.items):
            if index:
                lines.append("")
            for row in custom_item_rows(item):
                lines.append(_row(row))
                if row.href:
                    lines.append(row.href)
            if item.description:
                lines.append(item.description.strip())
            lines.extend(bullet_text(b) for b in item.visible_bullets)
    return lines


def _row(row: Row) -> str:
    if row.right:
        return f"{row.left}\t{row.right}"
    return row.left
