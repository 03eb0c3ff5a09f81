"""Resume Builder Domain - Pure domain logic for resume documents.

This package contains pure functions with no network or LLM dependencies.
Rendering lives in ``resume_builder.renderers``; this package operates on
frozen document values.
"""

from .ats_scorer import extract_keywords, format_ats_report, normalize_ats_score, score_document
from .formatting import export_filename, format_date_range, format_month_year, is_valid_date_range, normalize_link
from .layout import LayoutFormat, LayoutPolicy, get_layout
from .models import (
    ATSScore,
    CustomSection,
    CustomSectionItem,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ResumeDocument,
    SkillCategory,
    create_empty_resume,
    load_document,
    save_document,
)
from .optimization import CompressResult, ImportAnalysisResult, OptimizationResult, ResumeAnalysis, apply_optimizations
from .resume_validator import ValidationResult, format_validation_report, validate_document
from .sections import ContactItem, Section, SectionKind, contact_items, plan_sections, section_keys

__all__ = [
    # Models
    "ATSScore",
    "CustomSection",
    "CustomSectionItem",
    "EducationEntry",
    "ExperienceEntry",
    "PersonalInfo",
    "ResumeDocument",
    "SkillCategory",
    "create_empty_resume",
    "load_document",
    "save_document",
    # Formatting
    "format_month_year",
    "format_date_range",
    "is_valid_date_range",
    "normalize_link",
    "export_filename",
    # Layout
    "LayoutFormat",
    "LayoutPolicy",
    "get_layout",
    # Sections
    "Section",
    "SectionKind",
    "ContactItem",
    "plan_sections",
    "section_keys",
    "contact_items",
    # ATS Scorer
    "score_document",
    "normalize_ats_score",
    "extract_keywords",
    "format_ats_report",
    # Optimization
    "OptimizationResult",
    "ImportAnalysisResult",
    "ResumeAnalysis",
    "CompressResult",
    "apply_optimizations",
    # Validator
    "validate_document",
    "ValidationResult",
    "format_validation_report",
]
