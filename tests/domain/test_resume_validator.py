"""Tests for resume validation."""

from resume_builder.domain.models import (
    CustomSection,
    CustomSectionItem,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ResumeDocument,
    SkillCategory,
)
from resume_builder.domain.resume_validator import format_validation_report, validate_document


def _checks(issues):
    return {i["check"] for i in issues}


class TestValidateDocument:
    def test_complete_resume_is_valid(self, full_resume):
        result = validate_document(full_resume)
        assert result.valid
        assert result.errors == []

    def test_missing_name_is_an_error(self):
        result = validate_document(ResumeDocument(summary="Engineer"))
        assert not result.valid
        assert "name" in _checks(result.errors)

    def test_empty_document(self):
        result = validate_document(ResumeDocument())
        assert _checks(result.errors) == {"name", "empty"}

    def test_placeholder_text(self):
        doc = ResumeDocument(personal_info=PersonalInfo(full_name="Jane"), summary="TODO write this")
        result = validate_document(doc)
        assert "placeholders" in _checks(result.errors)

    def test_mojibake(self):
        doc = ResumeDocument(personal_info=PersonalInfo(full_name="Jane"), summary="CafÃ© owner")
        assert "encoding" in _checks(validate_document(doc).errors)

    def test_malformed_email_and_link_are_warnings(self):
        doc = ResumeDocument(personal_info=PersonalInfo(full_name="Jane", email="jane-at-x", github="ftp://x.org"))
        result = validate_document(doc)
        assert result.valid
        assert {"email", "link"} <= _checks(result.warnings)

    def test_reversed_dates_are_a_warning(self):
        doc = ResumeDocument(
            personal_info=PersonalInfo(full_name="Jane"),
            experience=(
                ExperienceEntry(
                    company="Acme", job_title="Engineer", start_date="2023-05", end_date="2021-01", bullets=("Did X",)
                ),
            ),
        )
        result = validate_document(doc)
        assert result.valid
        assert _checks(result.warnings) == {"date_range"}

    def test_experience_and_education_gaps(self):
        doc = ResumeDocument(
            personal_info=PersonalInfo(full_name="Jane"),
            experience=(ExperienceEntry(company="Acme"),),
            education=(EducationEntry(degree="B.S."),),
        )
        assert {"experience", "dates", "bullets", "education"} <= _checks(validate_document(doc).warnings)

    def test_hidden_sections_are_reported(self):
        doc = ResumeDocument(
            personal_info=PersonalInfo(full_name="Jane"),
            core_strengths=(SkillCategory(category="Tools", skills=""),),
            custom_sections=(
                CustomSection(title="", items=(CustomSectionItem(title="x"),)),
                CustomSection(title="Awards", items=(CustomSectionItem(),)),
            ),
        )
        warnings = validate_document(doc).warnings
        assert [w["check"] for w in warnings].count("custom_section") == 2
        assert "core_strengths" in _checks(warnings)


class TestReport:
    def test_pass_report(self, full_resume):
        report = format_validation_report("resume.json", validate_document(full_resume))
        assert "## Validation: PASS -- resume.json" in report

    def test_fail_report_lists_errors(self):
        report = format_validation_report("r.json", validate_document(ResumeDocument()))
        assert "FAIL" in report
        assert "[name]" in report

    def test_to_dict(self):
        data = validate_document(ResumeDocument()).to_dict()
        assert data["valid"] is False
        assert set(data) == {"valid", "errors", "warnings"}
