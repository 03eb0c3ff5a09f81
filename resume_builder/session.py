"""Editor session: the single owner of the current resume document.

Every update builds a new frozen document and swaps the reference. Nothing
else ever holds a mutable view of the document, so renderers can be handed
``session.document`` at any time. When an optimization call fails, the
previous document is kept and the error propagates.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple, TypeVar, Union

from .domain.ats_scorer import normalize_ats_score, score_document
from .domain.layout import LayoutFormat
from .domain.models import (
    ATSScore,
    CustomSection,
    CustomSectionItem,
    EducationEntry,
    ExperienceEntry,
    ResumeDocument,
    SkillCategory,
    create_empty_custom_item,
    create_empty_custom_section,
    create_empty_education,
    create_empty_experience,
    create_empty_skill_category,
)
from .domain.optimization import ImportAnalysisResult, ResumeAnalysis, apply_optimizations
from .domain.resume_validator import ValidationResult, validate_document
from .exporter import ExportArtifact, ExportKind, render_artifact
from .extract import ensure_importable
from .observability import RenderObserver
from .optimizer import ResumeOptimizer

logger = logging.getLogger(__name__)

E = TypeVar("E", ExperienceEntry, EducationEntry, SkillCategory, CustomSection, CustomSectionItem)


def _replace_by_id(items: Tuple[E, ...], entry_id: str, update: Callable[[E], Optional[E]]) -> Tuple[E, ...]:
    """Apply *update* to the item with *entry_id*; ``None`` from *update* removes it."""
    result = []
    found = False
    for item in items:
        if item.id == entry_id:
            found = True
            updated = update(item)
            if updated is not None:
                result.append(updated)
        else:
            result.append(item)
    if not found:
        raise KeyError(entry_id)
    return tuple(result)


class ResumeSession:
    def __init__(
        self,
        document: Optional[ResumeDocument] = None,
        layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD,
        optimizer: Optional[ResumeOptimizer] = None,
        observer: Optional[RenderObserver] = None,
    ):
        self._document = document or ResumeDocument()
        self.layout_format = LayoutFormat.parse(layout_format)
        self.optimizer = optimizer
        self.observer = observer
        self.ats_score: ATSScore = ATSScore.initial()
        self.extracted_keywords: Tuple[str, ...] = ()
        self.analysis: Optional[ResumeAnalysis] = None

    @property
    def document(self) -> ResumeDocument:
        return self._document

    # -- whole-document updates -------------------------------------------

    def replace(self, document: ResumeDocument) -> ResumeDocument:
        self._document = document
        return document

    def update(self, **fields: Any) -> ResumeDocument:
        return self.replace(self._document.evolve(**fields))

    def update_personal_info(self, **changes: Any) -> ResumeDocument:
        return self.update(personal_info=self._document.personal_info.evolve(**changes))

    def set_format(self, layout_format: Union[str, LayoutFormat]) -> LayoutFormat:
        self.layout_format = LayoutFormat.parse(layout_format)
        return self.layout_format

    # -- experience -------------------------------------------------------

    def add_experience(self, entry: Optional[ExperienceEntry] = None) -> ExperienceEntry:
        entry = entry or create_empty_experience()
        self.update(experience=self._document.experience + (entry,))
        return entry

    def update_experience(self, entry_id: str, **changes: Any) -> ResumeDocument:
        return self.update(experience=_replace_by_id(self._document.experience, entry_id, lambda e: e.evolve(**changes)))

    def remove_experience(self, entry_id: str) -> ResumeDocument:
        return self.update(experience=_replace_by_id(self._document.experience, entry_id, lambda e: None))

    # -- education --------------------------------------------------------

    def add_education(self, entry: Optional[EducationEntry] = None) -> EducationEntry:
        entry = entry or create_empty_education()
        self.update(education=self._document.education + (entry,))
        return entry

    def update_education(self, entry_id: str, **changes: Any) -> ResumeDocument:
        return self.update(education=_replace_by_id(self._document.education, entry_id, lambda e: e.evolve(**changes)))

    def remove_education(self, entry_id: str) -> ResumeDocument:
        return self.update(education=_replace_by_id(self._document.education, entry_id, lambda e: None))

    # -- core strengths ---------------------------------------------------

    def add_skill_category(self, category: Optional[SkillCategory] = None) -> SkillCategory:
        category = category or create_empty_skill_category()
        self.update(core_strengths=self._document.core_strengths + (category,))
        return category

    def update_skill_category(self, category_id: str, **changes: Any) -> ResumeDocument:
        return self.update(
            core_strengths=_replace_by_id(self._document.core_strengths, category_id, lambda c: c.evolve(**changes))
        )

    def remove_skill_category(self, category_id: str) -> ResumeDocument:
        return self.update(core_strengths=_replace_by_id(self._document.core_strengths, category_id, lambda c: None))

    # -- custom sections --------------------------------------------------

    def add_custom_section(self, title: str = "") -> CustomSection:
        section = create_empty_custom_section(title)
        self.update(custom_sections=self._document.custom_sections + (section,))
        return section

    def update_custom_section(self, section_id: str, **changes: Any) -> ResumeDocument:
        return self.update(
            custom_sections=_replace_by_id(self._document.custom_sections, section_id, lambda s: s.evolve(**changes))
        )

    def remove_custom_section(self, section_id: str) -> ResumeDocument:
        return self.update(custom_sections=_replace_by_id(self._document.custom_sections, section_id, lambda s: None))

    def add_custom_item(self, section_id: str, item: Optional[CustomSectionItem] = None) -> CustomSectionItem:
        item = item or create_empty_custom_item()
        self.update_custom_section_items(section_id, lambda items: items + (item,))
        return item

    def update_custom_item(self, section_id: str, item_id: str, **changes: Any) -> ResumeDocument:
        return self.update_custom_section_items(
            section_id, lambda items: _replace_by_id(items, item_id, lambda i: i.evolve(**changes))
        )

    def remove_custom_item(self, section_id: str, item_id: str) -> ResumeDocument:
        return self.update_custom_section_items(section_id, lambda items: _replace_by_id(items, item_id, lambda i: None))

    def update_custom_section_items(
        self, section_id: str, update: Callable[[Tuple[CustomSectionItem, ...]], Tuple[CustomSectionItem, ...]]
    ) -> ResumeDocument:
        return self.update(
            custom_sections=_replace_by_id(
                self._document.custom_sections, section_id, lambda s: s.evolve(items=update(s.items))
            )
        )

    # -- derived views ----------------------------------------------------

    def validate(self) -> ValidationResult:
        return validate_document(self._document)

    def score(self, job_description: str = "") -> ATSScore:
        """Local heuristic score; replaces the current score card."""
        self.ats_score = score_document(self._document, job_description)
        return self.ats_score

    def export(self, kind: Union[str, ExportKind]) -> ExportArtifact:
        return render_artifact(self._document, kind, self.layout_format, observer=self.observer)

    # -- optimization service -------------------------------------------------

    def _require_optimizer(self) -> ResumeOptimizer:
        if self.optimizer is None:
            raise RuntimeError("No optimizer configured for this session")
        return self.optimizer

    async def optimize(self, job_description: Optional[str] = None) -> ResumeDocument:
        """Optimize the current document; the document is only replaced on success."""
        optimizer = self._require_optimizer()
        snapshot = self._document
        result = await optimizer.optimize(snapshot, job_description)

        has_job = bool(job_description and job_description.strip())
        updated = apply_optimizations(snapshot, result)
        self.ats_score = normalize_ats_score(result.ats_score, updated, has_target_job=has_job)
        self.extracted_keywords = result.extracted_keywords
        logger.info("Applied optimization (%d experience entries rewritten)", len(result.optimized_experience))
        return self.replace(updated)

    async def import_text(self, raw_text: str) -> ResumeDocument:
        """Replace the document with one parsed from extracted resume text."""
        text = ensure_importable(raw_text)
        result = await self._require_optimizer().analyze(text)
        return self._adopt_analysis(result, has_target_job=False)

    async def tailor(self, raw_text: str, job_description: str) -> ResumeDocument:
        text = ensure_importable(raw_text)
        result = await self._require_optimizer().tailor(text, job_description)
        return self._adopt_analysis(result, has_target_job=bool(job_description.strip()))

    async def compress(self) -> ResumeDocument:
        compressed = await self._require_optimizer().compress(self._document)
        return self.replace(compressed)

    def _adopt_analysis(self, result: ImportAnalysisResult, has_target_job: bool) -> ResumeDocument:
        document = result.parsed_document
        self.analysis = result.analysis
        self.ats_score = normalize_ats_score(result.effective_ats_score(), document, has_target_job=has_target_job)
        self.extracted_keywords = result.extracted_keywords or ()
        return self.replace(document)
