"""Global pytest fixtures for deterministic test environment."""

from __future__ import annotations

import json

import pytest

from resume_builder.domain.models import (
    CustomSection,
    CustomSectionItem,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ResumeDocument,
    SkillCategory,
)
from resume_builder.providers import PROVIDER_DEFAULTS


@pytest.fixture(autouse=True)
def _isolate_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear provider API keys that can leak into tests on developer machines."""
    for defaults in PROVIDER_DEFAULTS.values():
        monkeypatch.delenv(defaults["env_key"], raising=False)


@pytest.fixture
def jane_doe() -> ResumeDocument:
    """The minimal one-role document used across renderer tests."""
    return ResumeDocument.model_validate(
        {
            "personalInfo": {"fullName": "Jane Doe", "email": "jane@x.com", "phone": "", "location": "Chicago, IL"},
            "summary": "",
            "coreStrengths": [],
            "experience": [
                {
                    "id": "e1",
                    "jobTitle": "Engineer",
                    "company": "Acme",
                    "location": "Chicago",
                    "startDate": "2022-01",
                    "endDate": "",
                    "current": True,
                    "bullets": ["Did X"],
                }
            ],
            "education": [],
            "customSections": [],
            "skills": [],
        }
    )


@pytest.fixture
def full_resume() -> ResumeDocument:
    """A document with every section populated."""
    return ResumeDocument(
        personal_info=PersonalInfo(
            full_name="Alex Rivera",
            email="alex@example.com",
            phone="(555) 123-4567",
            location="Austin, TX",
            linkedin="linkedin.com/in/alexrivera",
            github="http://github.com/alexr",
            portfolio="alexrivera.dev",
        ),
        summary=(
            "Backend engineer with 8+ years building payment and data platforms. "
            "Led teams of 5 engineers and cut infrastructure cost by 30%."
        ),
        core_strengths=(
            SkillCategory(id="s1", category="Languages", skills="Python, Go,  SQL"),
            SkillCategory(id="s2", category="Cloud", skills="AWS, Docker, Kubernetes"),
        ),
        experience=(
            ExperienceEntry(
                id="e1",
                job_title="Senior Software Engineer",
                company="Acme Corp",
                location="Austin, TX",
                work_type="Hybrid",
                start_date="2020-01",
                current=True,
                bullets=(
                    "Led a team of 5 engineers to deliver a payments platform, reducing latency by 40%",
                    "Built CI/CD pipeline serving 200+ deployments per month",
                    "   ",
                ),
            ),
            ExperienceEntry(
                id="e2",
                job_title="Software Engineer",
                company="StartupCo",
                location="Remote",
                start_date="2016-06",
                end_date="2019-12",
                bullets=("Developed RESTful APIs handling 10,000+ requests per second",),
            ),
        ),
        education=(
            EducationEntry(
                id="ed1",
                degree="B.S.",
                field="Computer Science",
                institution="State University",
                location="Austin, TX",
                graduation_date="2016-05",
                gpa="3.8",
            ),
        ),
        custom_sections=(
            CustomSection(
                id="c1",
                title="Projects",
                items=(
                    CustomSectionItem(
                        id="p1",
                        title="ledgerlite",
                        subtitle="Open-source double-entry ledger",
                        date="2023-03",
                        link="github.com/alexr/ledgerlite",
                        description="A small ledger library.",
                        bullets=("Implemented 3 storage backends",),
                    ),
                ),
            ),
        ),
    )


class FakeProvider:
    """Replays canned answers in order and records every prompt it receives.

    Dicts are sent as JSON, strings verbatim, exceptions are raised.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def complete_json(self, system_prompt: str, user_message: str) -> str:
        self.calls.append((system_prompt, user_message))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response if isinstance(response, str) else json.dumps(response)


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def ats_payload():
    return {"overall": 72, "keywordMatch": 60, "formatting": 90, "structure": 80, "suggestions": ["Add metrics"]}
