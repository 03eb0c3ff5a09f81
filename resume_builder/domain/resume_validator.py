"""Pure domain logic for resume document validation.

Validation never rejects a document outright: renderers accept anything the
model accepts. The report tells the user what will be hidden or looks wrong
(``warning``) and what blocks export (``error``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List

from .ats_scorer import document_text
from .formatting import normalize_link
from .models import ResumeDocument


@dataclass
class ValidationResult:
    """Structured result from resume validation."""

    valid: bool
    errors: List[Dict[str, str]] = field(default_factory=list)
    warnings: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_document(document: ResumeDocument) -> ValidationResult:
    """Validate *document* for completeness and correctness."""
    issues: List[Dict[str, str]] = []

    issues.extend(_check_header(document))
    issues.extend(_check_content(document))
    issues.extend(_check_experience(document))
    issues.extend(_check_sections(document))

    errors = [i for i in issues if i["level"] == "error"]
    warnings = [i for i in issues if i["level"] == "warning"]

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


# ---------------------------------------------------------------------------
# Report formatting
# ---------------------------------------------------------------------------


def format_validation_report(path: str, result: ValidationResult) -> str:
    """Render a :class:`ValidationResult` as a human-readable report."""
    status = "PASS" if result.valid else "FAIL"
    lines = [f"## Validation: {status} -- {path}", ""]

    if result.errors:
        lines.append("### Errors")
        for e in result.errors:
            lines.append(f"- [{e['check']}] {e['message']}")
        lines.append("")

    if result.warnings:
        lines.append("### Warnings")
        for w in result.warnings:
            lines.append(f"- [{w['check']}] {w['message']}")
        lines.append("")

    if not result.errors and not result.warnings:
        lines.append("No issues found. Resume looks good!")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Private checks
# ---------------------------------------------------------------------------


def _issue(level: str, check: str, message: str) -> Dict[str, str]:
    return {"level": level, "check": check, "message": message}


def _check_header(document: ResumeDocument) -> List[Dict[str, str]]:
    issues: List[Dict[str, str]] = []
    info = document.personal_info

    if not document.full_name:
        issues.append(_issue("error", "name", "Full name is required before exporting."))

    email = info.email.strip()
    if email and not re.match(r"^[\w\.\-+]+@[\w\.\-]+\.\w+$", email):
        issues.append(_issue("warning", "email", f"Email address '{email}' looks malformed."))

    for label, raw in (("LinkedIn", info.linkedin), ("GitHub", info.github), ("Portfolio", info.portfolio)):
        if raw and normalize_link(raw) is None:
            issues.append(_issue("warning", "link", f"{label} link '{raw}' is not a valid URL and will be omitted."))

    return issues


def _check_content(document: ResumeDocument) -> List[Dict[str, str]]:
    issues: List[Dict[str, str]] = []

    if not document.has_content():
        issues.append(_issue("error", "empty", "Resume is empty."))
        return issues

    content = document_text(document)
    placeholders = re.findall(
        r"\b(?:TODO|FIXME|XXX|PLACEHOLDER|INSERT|YOUR NAME|COMPANY NAME)\b",
        content,
        re.IGNORECASE,
    )
    if placeholders:
        issues.append(_issue("error", "placeholders", f"Contains placeholder text: {', '.join(sorted(set(placeholders)))}"))

    if "�" in content or "â€" in content or "Ã" in content:
        issues.append(
            _issue("error", "encoding", "Contains encoding artifacts (mojibake). Re-import the file as UTF-8.")
        )

    return issues


def _check_experience(document: ResumeDocument) -> List[Dict[str, str]]:
    issues: List[Dict[str, str]] = []

    for index, entry in enumerate(document.experience, 1):
        label = entry.company.strip() or entry.job_title.strip() or f"Experience #{index}"
        if not entry.company.strip() or not entry.job_title.strip():
            issues.append(_issue("warning", "experience", f"{label}: company and job title should both be set."))
        if not entry.start_date.strip():
            issues.append(_issue("warning", "dates", f"{label}: missing start date."))
        if not entry.current and not entry.end_date.strip() and entry.start_date.strip():
            issues.append(_issue("warning", "dates", f"{label}: no end date and not marked as current."))
        if not entry.has_valid_date_range:
            issues.append(
                _issue(
                    "warning",
                    "date_range",
                    f"{label}: end date {entry.end_date} is before start date {entry.start_date}.",
                )
            )
        if not entry.visible_bullets:
            issues.append(_issue("warning", "bullets", f"{label}: no bullet points."))

    for index, edu in enumerate(document.education, 1):
        if not edu.institution.strip():
            issues.append(_issue("warning", "education", f"Education #{index}: missing institution."))

    return issues


def _check_sections(document: ResumeDocument) -> List[Dict[str, str]]:
    issues: List[Dict[str, str]] = []

    incomplete = [c for c in document.core_strengths if not c.is_renderable and (c.category.strip() or c.skills.strip())]
    for category in incomplete:
        name = category.category.strip() or "(untitled)"
        issues.append(
            _issue("warning", "core_strengths", f"Core strength '{name}' needs both a category and skills to be shown.")
        )

    for section in document.custom_sections:
        if not section.title.strip() and section.items:
            issues.append(_issue("warning", "custom_section", "A custom section has items but no title and is hidden."))
        elif section.title.strip() and not any(item.has_content for item in section.items):
            issues.append(
                _issue("warning", "custom_section", f"Custom section '{section.title.strip()}' is empty and is hidden.")
            )

    return issues
