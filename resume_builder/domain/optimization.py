"""Response schemas for the optimization service and the pure merge step.

Service responses are parsed with ``model_validate_json`` against these
models and nothing else: there is no repair of malformed JSON. Unknown
top-level keys are rejected so a drifting prompt shows up as an error instead
of silently dropped data.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from pydantic import ConfigDict, Field

from .models import ATSScore, ResumeDocument, SkillCategory, _Model


class _Response(_Model):
    model_config = ConfigDict(extra="forbid")


class OptimizedExperience(_Response):
    id: str
    optimized_bullets: Tuple[str, ...] = ()


class OptimizedSkillCategory(_Response):
    id: Optional[str] = None
    category: str
    skills: str


class OptimizationResult(_Response):
    optimized_summary: str = ""
    optimized_core_strengths: Optional[Tuple[OptimizedSkillCategory, ...]] = None
    optimized_skills: Optional[Tuple[str, ...]] = None
    optimized_experience: Tuple[OptimizedExperience, ...] = ()
    ats_score: ATSScore
    extracted_keywords: Tuple[str, ...] = ()

    @property
    def experience_bullets(self) -> Dict[str, Tuple[str, ...]]:
        return {e.id: e.optimized_bullets for e in self.optimized_experience}


class ResumeAnalysis(_Response):
    weaknesses: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    missing_keywords: Tuple[str, ...] = ()
    score: int = Field(default=0, ge=0, le=100)


class ImportAnalysisResult(_Response):
    parsed_resume_data: ResumeDocument
    analysis: ResumeAnalysis = Field(default_factory=ResumeAnalysis)
    ats_score: Optional[ATSScore] = None
    extracted_keywords: Optional[Tuple[str, ...]] = None

    @property
    def parsed_document(self) -> ResumeDocument:
        return self.parsed_resume_data

    def effective_ats_score(self) -> ATSScore:
        """The service score, or a card derived from the analysis when it sent none."""
        if self.ats_score is not None:
            return self.ats_score
        return ATSScore(
            overall=self.analysis.score,
            keyword_match=0,
            formatting=100,
            structure=0,
            suggestions=self.analysis.weaknesses[:3],
        )


class CompressResult(_Response):
    compressed_resume_data: ResumeDocument


def apply_optimizations(document: ResumeDocument, result: OptimizationResult) -> ResumeDocument:
    """Merge an optimization result into *document*, returning a new document.

    - experience bullets are replaced for entries whose id the result names;
      other entries are untouched
    - core strengths are replaced only by a non-empty list (missing ids are
      regenerated)
    - legacy skills are replaced whenever the result carries them
    - the summary is replaced only by a non-blank one
    """
    bullets = result.experience_bullets
    experience = tuple(
        entry.evolve(bullets=bullets[entry.id]) if entry.id in bullets else entry for entry in document.experience
    )

    core_strengths = document.core_strengths
    if result.optimized_core_strengths:
        core_strengths = tuple(
            SkillCategory(category=c.category, skills=c.skills, **({"id": c.id} if c.id else {}))
            for c in result.optimized_core_strengths
        )

    skills = document.skills if result.optimized_skills is None else result.optimized_skills
    summary = result.optimized_summary if result.optimized_summary.strip() else document.summary

    return document.evolve(
        summary=summary,
        core_strengths=core_strengths,
        skills=skills,
        experience=experience,
    )
