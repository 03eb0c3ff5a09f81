"""Tests for the single-writer editor session."""

import pytest

from resume_builder.domain.layout import LayoutFormat
from resume_builder.domain.models import ATSScore, ResumeDocument
from resume_builder.errors import ExportPreconditionError, ExtractionError, OptimizationResponseError
from resume_builder.exporter import ExportKind
from resume_builder.optimizer import ResumeOptimizer
from resume_builder.session import ResumeSession

RAW_RESUME = (
    "Jane Doe\nChicago, IL | jane@x.com\n\nExperience\nEngineer, Acme (2022 - Present)\n"
    "- Built the billing platform used by 2M customers\n"
)


class TestEditing:
    def test_updates_replace_the_document(self):
        session = ResumeSession()
        before = session.document
        session.update_personal_info(full_name="Jane Doe")
        assert before.full_name == ""
        assert session.document.full_name == "Jane Doe"

    def test_experience_lifecycle(self):
        session = ResumeSession()
        entry = session.add_experience()
        assert entry.bullets == ("",)
        session.update_experience(entry.id, company="Acme", bullets=("Did X",))
        assert session.document.experience[0].company == "Acme"
        session.remove_experience(entry.id)
        assert session.document.experience == ()

    def test_unknown_id_raises_key_error(self):
        session = ResumeSession()
        with pytest.raises(KeyError):
            session.update_education("missing", degree="B.S.")
        with pytest.raises(KeyError):
            session.remove_skill_category("missing")

    def test_education_and_skills(self):
        session = ResumeSession()
        edu = session.add_education()
        session.update_education(edu.id, institution="MIT")
        category = session.add_skill_category()
        session.update_skill_category(category.id, category="Cloud", skills="AWS")
        assert session.document.education[0].institution == "MIT"
        assert session.document.core_strengths[0].is_renderable
        session.remove_education(edu.id)
        assert session.document.education == ()

    def test_custom_sections_and_items(self):
        session = ResumeSession()
        section = session.add_custom_section("Projects")
        item = session.add_custom_item(section.id)
        session.update_custom_item(section.id, item.id, title="ledgerlite", link="github.com/x/ledgerlite")
        assert session.document.custom_sections[0].items[0].title == "ledgerlite"

        session.update_custom_section(section.id, title="Open Source")
        assert session.document.custom_sections[0].title == "Open Source"

        session.remove_custom_item(section.id, item.id)
        assert session.document.custom_sections[0].items == ()
        session.remove_custom_section(section.id)
        assert session.document.custom_sections == ()

    def test_order_is_append_only(self):
        session = ResumeSession()
        ids = [session.add_experience().id for _ in range(3)]
        assert [e.id for e in session.document.experience] == ids

    def test_set_format(self):
        session = ResumeSession()
        assert session.set_format("compact") is LayoutFormat.COMPACT
        with pytest.raises(ValueError):
            session.set_format("fancy")


class TestDerived:
    def test_initial_score_card(self):
        assert ResumeSession().ats_score == ATSScore.initial()

    def test_score_replaces_card(self, full_resume):
        session = ResumeSession(full_resume)
        score = session.score()
        assert session.ats_score is score
        assert score.formatting > 0

    def test_export_requires_name(self):
        with pytest.raises(ExportPreconditionError):
            ResumeSession(ResumeDocument(summary="x")).export("txt")

    def test_export_uses_session_format(self, jane_doe):
        session = ResumeSession(jane_doe, layout_format="compact")
        artifact = session.export(ExportKind.TXT)
        assert artifact.filename == "Jane_Doe_Resume.txt"
        assert artifact.content.startswith(b"JANE DOE\n")

    def test_validate(self, jane_doe):
        assert ResumeSession(jane_doe).validate().valid


class TestOptimization:
    @pytest.mark.asyncio
    async def test_optimize_applies_result(self, fake_provider, full_resume, ats_payload):
        provider = fake_provider(
            {
                "optimizedSummary": "Sharper summary",
                "optimizedExperience": [{"id": "e2", "optimizedBullets": ["Rewrote it"]}],
                "atsScore": ats_payload,
                "extractedKeywords": ["python"],
            }
        )
        session = ResumeSession(full_resume, optimizer=ResumeOptimizer(provider))
        document = await session.optimize("Python engineer")

        assert document is session.document
        assert document.summary == "Sharper summary"
        assert document.experience[1].bullets == ("Rewrote it",)
        assert document.experience[0].bullets == full_resume.experience[0].bullets
        assert session.ats_score.keyword_match == 60
        assert session.extracted_keywords == ("python",)

    @pytest.mark.asyncio
    async def test_optimize_without_job_zeroes_keyword_match(self, fake_provider, full_resume, ats_payload):
        session = ResumeSession(full_resume, optimizer=ResumeOptimizer(fake_provider({"atsScore": ats_payload})))
        await session.optimize()
        assert session.ats_score.keyword_match == 0

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_document(self, fake_provider, full_resume):
        session = ResumeSession(full_resume, optimizer=ResumeOptimizer(fake_provider({"optimizedSummary": "x"})))
        with pytest.raises(OptimizationResponseError):
            await session.optimize()
        assert session.document is full_resume
        assert session.ats_score == ATSScore.initial()

    @pytest.mark.asyncio
    async def test_import_replaces_document_and_analysis(self, fake_provider):
        provider = fake_provider(
            {
                "parsedResumeData": {"personalInfo": {"fullName": "Jane Doe"}, "summary": "Engineer"},
                "analysis": {"weaknesses": ["No metrics"], "improvements": ["Add numbers"], "missingKeywords": [], "score": 58},
            }
        )
        session = ResumeSession(optimizer=ResumeOptimizer(provider))
        await session.import_text(RAW_RESUME)

        assert session.document.full_name == "Jane Doe"
        assert session.analysis.score == 58
        assert session.ats_score.overall == 58
        assert session.ats_score.suggestions == ("No metrics",)
        assert provider.calls[0][1].startswith("RAW RESUME TEXT:")

    @pytest.mark.asyncio
    async def test_import_rejects_too_little_text(self, fake_provider):
        provider = fake_provider()
        session = ResumeSession(optimizer=ResumeOptimizer(provider))
        with pytest.raises(ExtractionError):
            await session.import_text("   tiny   ")
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_tailor(self, fake_provider, ats_payload):
        provider = fake_provider(
            {
                "parsedResumeData": {"personalInfo": {"fullName": "Jane Doe"}},
                "analysis": {"score": 70},
                "atsScore": ats_payload,
                "extractedKeywords": ["billing"],
            }
        )
        session = ResumeSession(optimizer=ResumeOptimizer(provider))
        await session.tailor(RAW_RESUME, "Billing platform engineer")
        assert session.ats_score.overall == 72
        assert session.extracted_keywords == ("billing",)

    @pytest.mark.asyncio
    async def test_compress(self, fake_provider, full_resume):
        provider = fake_provider({"compressedResumeData": {"personalInfo": {"fullName": "Alex Rivera"}, "summary": "Short"}})
        session = ResumeSession(full_resume, optimizer=ResumeOptimizer(provider))
        await session.compress()
        assert session.document.summary == "Short"
        assert session.document.experience == ()

    @pytest.mark.asyncio
    async def test_no_optimizer(self):
        with pytest.raises(RuntimeError):
            await ResumeSession().optimize()
