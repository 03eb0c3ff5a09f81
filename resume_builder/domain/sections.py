"""Section order and gating shared by every renderer.

``plan_sections`` is the only place that decides which sections appear and in
which order. Renderers walk its output and never re-check emptiness
themselves, so the preview, PDF, DOCX and text outputs always agree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .formatting import normalize_link
from .models import CustomSection, PersonalInfo, ResumeDocument


class SectionKind(str, Enum):
    SUMMARY = "summary"
    CORE_STRENGTHS = "core_strengths"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    CUSTOM = "custom"


SECTION_TITLES = {
    SectionKind.SUMMARY: "Summary",
    SectionKind.CORE_STRENGTHS: "Core Strengths",
    SectionKind.SKILLS: "Skills",
    SectionKind.EXPERIENCE: "Experience",
    SectionKind.EDUCATION: "Education",
}


@dataclass(frozen=True)
class Section:
    """One renderable section.

    ``items`` holds the already-filtered content: the summary text, the
    renderable skill categories, the non-blank legacy skills, the experience or
    education entries, or the custom items that have content.
    """

    kind: SectionKind
    title: str
    key: str
    items: tuple


@dataclass(frozen=True)
class ContactItem:
    kind: str
    text: str
    value: str
    href: Optional[str] = None

    @property
    def is_link(self) -> bool:
        return self.href is not None


_LINK_LABELS = (("github", "GitHub"), ("portfolio", "Portfolio"), ("linkedin", "LinkedIn"))


def plan_sections(document: ResumeDocument) -> List[Section]:
    """Return the sections to render, in display order, with empty ones dropped."""
    sections: List[Section] = []

    summary = document.summary.strip()
    if summary:
        sections.append(_fixed(SectionKind.SUMMARY, (summary,)))

    categories = tuple(c for c in document.core_strengths if c.is_renderable)
    if categories:
        sections.append(_fixed(SectionKind.CORE_STRENGTHS, categories))
    else:
        skills = tuple(s.strip() for s in document.skills if s.strip())
        if skills:
            sections.append(_fixed(SectionKind.SKILLS, skills))

    if document.experience:
        sections.append(_fixed(SectionKind.EXPERIENCE, document.experience))

    if document.education:
        sections.append(_fixed(SectionKind.EDUCATION, document.education))

    for custom in document.custom_sections:
        section = _custom(custom)
        if section is not None:
            sections.append(section)

    return sections


def section_keys(document: ResumeDocument) -> Tuple[str, ...]:
    return tuple(s.key for s in plan_sections(document))


def contact_items(info: PersonalInfo) -> List[ContactItem]:
    """Contact fields in display order: location, phone, email, GitHub, Portfolio, LinkedIn.

    Blank fields and links that fail normalization are omitted.
    """
    items: List[ContactItem] = []
    location = info.location.strip()
    if location:
        items.append(ContactItem(kind="location", text=location, value=location))
    phone = info.phone.strip()
    if phone:
        items.append(ContactItem(kind="phone", text=phone, value=phone))
    email = info.email.strip()
    if email:
        items.append(ContactItem(kind="email", text=email, value=email, href=f"mailto:{email}"))
    for attr, label in _LINK_LABELS:
        url = normalize_link(getattr(info, attr))
        if url:
            items.append(ContactItem(kind=attr, text=label, value=url, href=url))
    return items


def _fixed(kind: SectionKind, items: tuple) -> Section:
    return Section(kind=kind, title=SECTION_TITLES[kind], key=kind.value, items=items)


def _custom(custom: CustomSection) -> Optional[Section]:
    title = custom.title.strip()
    items = tuple(item for item in custom.items if item.has_content)
    if not title or not items:
        return None
    return Section(kind=SectionKind.CUSTOM, title=title, key=f"custom:{custom.id}", items=items)
