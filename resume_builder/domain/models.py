"""Canonical resume document model.

Every model is a frozen pydantic model with camelCase JSON aliases, so a
document serialized by the editor (``fullName``, ``jobTitle``...) and one
built in Python (``full_name``, ``job_title``...) validate the same way.
Updates never mutate: :meth:`_Model.evolve` returns a new validated value.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Annotated, Any, Optional, Tuple, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .formatting import is_valid_date_range


def _new_id() -> str:
    return str(uuid.uuid4())


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Blank and whitespace-only strings are read as "absent".
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


def _blank_to_new_id(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return _new_id()
    return value


EntryId = Annotated[str, BeforeValidator(_blank_to_new_id)]


class _Model(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def evolve(self, **changes: Any):
        """Return a copy with *changes* applied, re-validated."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(changes)
        return type(self).model_validate(data)


class PersonalInfo(_Model):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: OptionalText = None
    github: OptionalText = None
    portfolio: OptionalText = None


class SkillCategory(_Model):
    """A labelled group of skills; ``skills`` is a comma-joined string."""

    id: EntryId = Field(default_factory=_new_id)
    category: str = ""
    skills: str = ""

    @property
    def is_renderable(self) -> bool:
        return bool(self.category.strip() and self.skills.strip())


class ExperienceEntry(_Model):
    id: EntryId = Field(default_factory=_new_id)
    job_title: str = ""
    company: str = ""
    location: str = ""
    work_type: OptionalText = None
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    bullets: Tuple[str, ...] = ()

    @property
    def visible_bullets(self) -> Tuple[str, ...]:
        """Bullets with blank entries removed (blank bullets are editor placeholders)."""
        return tuple(b.strip() for b in self.bullets if b.strip())

    @property
    def has_valid_date_range(self) -> bool:
        if self.current:
            return True
        return is_valid_date_range(self.start_date, self.end_date)


class EducationEntry(_Model):
    id: EntryId = Field(default_factory=_new_id)
    degree: str = ""
    field: OptionalText = None
    institution: str = ""
    location: str = ""
    graduation_date: str = ""
    gpa: OptionalText = None


class CustomSectionItem(_Model):
    id: EntryId = Field(default_factory=_new_id)
    title: str = ""
    subtitle: OptionalText = None
    date: OptionalText = None
    description: OptionalText = None
    link: OptionalText = None
    bullets: Tuple[str, ...] = ()

    @property
    def visible_bullets(self) -> Tuple[str, ...]:
        return tuple(b.strip() for b in self.bullets if b.strip())

    @property
    def has_content(self) -> bool:
        return bool(self.title.strip() or self.subtitle or self.description or self.visible_bullets)


class CustomSection(_Model):
    id: EntryId = Field(default_factory=_new_id)
    title: str = ""
    items: Tuple[CustomSectionItem, ...] = ()


class ResumeDocument(_Model):
    """Root aggregate consumed by every renderer."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    core_strengths: Tuple[SkillCategory, ...] = ()
    experience: Tuple[ExperienceEntry, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    custom_sections: Tuple[CustomSection, ...] = ()
    skills: Tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return self.personal_info.full_name.strip()

    def has_content(self) -> bool:
        """False for the editor's empty state (no name, summary or experience)."""
        return bool(self.full_name or self.summary.strip() or self.experience)

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "ResumeDocument":
        return cls.model_validate_json(text)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


class ATSScore(_Model):
    """Score card shown next to the editor; every number is within 0-100."""

    overall: int = Field(default=0, ge=0, le=100)
    keyword_match: int = Field(default=0, ge=0, le=100)
    formatting: int = Field(default=0, ge=0, le=100)
    structure: int = Field(default=0, ge=0, le=100)
    suggestions: Tuple[str, ...] = ()

    @field_validator("overall", "keyword_match", "formatting", "structure", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return max(0, min(100, int(round(value))))
        return value

    @classmethod
    def initial(cls) -> "ATSScore":
        return cls(
            overall=0,
            keyword_match=0,
            formatting=100,
            structure=0,
            suggestions=(
                "Add a professional summary to highlight key qualifications",
                "Include 3-5 bullet points per experience with quantified achievements",
                "Add relevant skills that match common job requirements",
            ),
        )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def create_empty_resume() -> ResumeDocument:
    return ResumeDocument()


def create_empty_experience() -> ExperienceEntry:
    return ExperienceEntry(bullets=("",))


def create_empty_education() -> EducationEntry:
    return EducationEntry()


def create_empty_skill_category() -> SkillCategory:
    return SkillCategory()


def create_empty_custom_section(title: str = "") -> CustomSection:
    return CustomSection(title=title)


def create_empty_custom_item() -> CustomSectionItem:
    return CustomSectionItem()


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def load_document(path: Union[str, Path]) -> ResumeDocument:
    """Read a camelCase JSON document from *path*."""
    return ResumeDocument.from_json(Path(path).read_text(encoding="utf-8"))


def save_document(document: ResumeDocument, path: Union[str, Path]) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(document.to_json() + "\n", encoding="utf-8")
    return target
