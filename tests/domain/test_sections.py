"""Tests for the shared section plan and contact items."""

from resume_builder.domain.models import (
    CustomSection,
    CustomSectionItem,
    ExperienceEntry,
    PersonalInfo,
    ResumeDocument,
    SkillCategory,
)
from resume_builder.domain.sections import SectionKind, contact_items, plan_sections, section_keys


class TestPlanSections:
    def test_fixed_order(self, full_resume):
        assert section_keys(full_resume) == ("summary", "core_strengths", "experience", "education", "custom:c1")

    def test_empty_document_has_no_sections(self):
        assert plan_sections(ResumeDocument()) == []

    def test_whitespace_summary_is_omitted(self):
        assert section_keys(ResumeDocument(summary="  \n ")) == ()

    def test_core_strengths_replace_legacy_skills(self):
        doc = ResumeDocument(
            core_strengths=(SkillCategory(category="Cloud", skills="AWS"),),
            skills=("Python",),
        )
        assert section_keys(doc) == ("core_strengths",)

    def test_legacy_skills_when_no_renderable_category(self):
        doc = ResumeDocument(
            core_strengths=(SkillCategory(category="Cloud", skills=""),),
            skills=("Python", " ", "Go"),
        )
        sections = plan_sections(doc)
        assert [s.kind for s in sections] == [SectionKind.SKILLS]
        assert sections[0].items == ("Python", "Go")

    def test_empty_categories_are_filtered(self):
        doc = ResumeDocument(
            core_strengths=(
                SkillCategory(id="a", category="Languages", skills="Python"),
                SkillCategory(id="b", category="Tools", skills=""),
            )
        )
        (section,) = plan_sections(doc)
        assert [c.id for c in section.items] == ["a"]

    def test_custom_section_needs_title_and_content(self):
        doc = ResumeDocument(
            custom_sections=(
                CustomSection(id="untitled", title=" ", items=(CustomSectionItem(title="Thing"),)),
                CustomSection(id="empty", title="Awards", items=(CustomSectionItem(),)),
                CustomSection(id="ok", title="Talks", items=(CustomSectionItem(), CustomSectionItem(title="PyCon"))),
            )
        )
        sections = plan_sections(doc)
        assert [s.key for s in sections] == ["custom:ok"]
        assert [i.title for i in sections[0].items] == ["PyCon"]
        assert sections[0].title == "Talks"

    def test_order_is_preserved(self):
        doc = ResumeDocument(
            experience=(
                ExperienceEntry(id="old", company="Old", start_date="2010-01"),
                ExperienceEntry(id="new", company="New", start_date="2022-01"),
                ExperienceEntry(id="mid", company="Mid", start_date="2015-01"),
            )
        )
        (section,) = plan_sections(doc)
        assert [e.id for e in section.items] == ["old", "new", "mid"]


class TestContactItems:
    def test_order_and_labels(self):
        info = PersonalInfo(
            full_name="Jane",
            email="jane@x.com",
            phone="555",
            location="Chicago, IL",
            linkedin="linkedin.com/in/jane",
            github="github.com/jane",
            portfolio="jane.dev",
        )
        items = contact_items(info)
        assert [i.kind for i in items] == ["location", "phone", "email", "github", "portfolio", "linkedin"]
        assert [i.text for i in items[3:]] == ["GitHub", "Portfolio", "LinkedIn"]
        assert items[2].href == "mailto:jane@x.com"
        assert items[3].value == "https://github.com/jane"
        assert not items[0].is_link

    def test_invalid_links_are_dropped(self):
        info = PersonalInfo(github="javascript:alert(1)", portfolio="not a url", phone=" ")
        assert contact_items(info) == []
