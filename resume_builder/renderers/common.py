"""Row content shared by the renderers.

Entries (experience, education, custom items) render as one or two heading
rows with a left-aligned and a right-aligned field, followed by body text and
bullets. These helpers decide the row text once so every output format shows
the same words in the same place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..domain.formatting import format_date_range, format_month_year, normalize_link
from ..domain.models import CustomSectionItem, EducationEntry, ExperienceEntry, SkillCategory

BULLET = "•"


@dataclass(frozen=True)
class Row:
    left: str
    right: str = ""
    style: str = "regular"  # "bold" | "italic" | "regular"
    size: str = "body"  # "subheader" | "body"
    href: Optional[str] = None


def experience_rows(entry: ExperienceEntry) -> List[Row]:
    rows = [
        Row(
            left=entry.company.strip(),
            right=format_date_range(entry.start_date, entry.end_date, entry.current),
            style="bold",
            size="subheader",
        ),
        Row(left=entry.job_title.strip(), right=_join_pipe(entry.location, entry.work_type), style="italic"),
    ]
    return _non_empty(rows)


def education_rows(entry: EducationEntry) -> List[Row]:
    degree = entry.degree.strip()
    if entry.field:
        degree = f"{degree} in {entry.field.strip()}" if degree else entry.field.strip()
    if entry.gpa:
        degree = f"{degree} | GPA: {entry.gpa.strip()}" if degree else f"GPA: {entry.gpa.strip()}"
    rows = [
        Row(
            left=entry.institution.strip(),
            right=format_month_year(entry.graduation_date),
            style="bold",
            size="subheader",
        ),
        Row(left=degree, right=entry.location.strip()),
    ]
    return _non_empty(rows)


def custom_item_rows(item: CustomSectionItem) -> List[Row]:
    rows = [
        Row(
            left=item.title.strip(),
            right=format_month_year(item.date),
            style="bold",
            href=normalize_link(item.link),
        ),
    ]
    if item.subtitle:
        rows.append(Row(left=item.subtitle.strip(), style="italic"))
    return _non_empty(rows)


def skill_category_parts(category: SkillCategory) -> tuple:
    """``("Languages: ", "Python, Go")`` for one renderable category."""
    return f"{category.category.strip()}: ", _normalize_skill_list(category.skills)


def legacy_skills_line(skills: tuple) -> str:
    return f" {BULLET} ".join(skills)


def bullet_text(text: str) -> str:
    return f"{BULLET} {text}"


def _normalize_skill_list(skills: str) -> str:
    parts = [p.strip() for p in skills.split(",")]
    return ", ".join(p for p in parts if p)


def _join_pipe(*parts: Optional[str]) -> str:
    return " | ".join(p.strip() for p in parts if p and p.strip())


def _non_empty(rows: List[Row]) -> List[Row]:
    return [r for r in rows if r.left or r.right]
