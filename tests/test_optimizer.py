"""Tests for the optimization service client."""

import pytest

from resume_builder import prompts
from resume_builder.domain.models import PersonalInfo, ResumeDocument
from resume_builder.errors import OptimizationResponseError, OptimizationServiceError
from resume_builder.observability import RenderObserver
from resume_builder.optimizer import ResumeOptimizer


def _named_document():
    return ResumeDocument(personal_info=PersonalInfo(full_name="Jane"))


class TestResumeOptimizer:
    @pytest.mark.asyncio
    async def test_optimize_parses_response(self, fake_provider, full_resume, ats_payload):
        provider = fake_provider(
            {
                "optimizedSummary": "Sharper summary",
                "optimizedExperience": [{"id": "e1", "optimizedBullets": ["Led X", "Built Y"]}],
                "atsScore": ats_payload,
                "extractedKeywords": ["python", "aws"],
            }
        )
        result = await ResumeOptimizer(provider).optimize(full_resume, "Python engineer")

        assert result.optimized_summary == "Sharper summary"
        assert result.experience_bullets["e1"] == ("Led X", "Built Y")
        system_prompt, message = provider.calls[0]
        assert system_prompt == prompts.OPTIMIZE_PROMPT
        assert "TARGET JOB DESCRIPTION:\n\nPython engineer" in message
        assert '"fullName": "Alex Rivera"' in message

    @pytest.mark.asyncio
    async def test_optimize_without_job_description(self, fake_provider, full_resume, ats_payload):
        provider = fake_provider({"atsScore": ats_payload})
        await ResumeOptimizer(provider).optimize(full_resume)
        assert "No target job description" in provider.calls[0][1]

    @pytest.mark.asyncio
    async def test_analyze_and_tailor(self, fake_provider):
        payload = {
            "parsedResumeData": {"personalInfo": {"fullName": "Jane Doe"}},
            "analysis": {"weaknesses": ["No metrics"], "improvements": [], "missingKeywords": ["aws"], "score": 55},
        }
        provider = fake_provider(payload, payload)
        optimizer = ResumeOptimizer(provider)

        imported = await optimizer.analyze("Jane Doe resume text")
        tailored = await optimizer.tailor("Jane Doe resume text", "Cloud engineer")

        assert imported.parsed_document.full_name == "Jane Doe"
        assert tailored.analysis.missing_keywords == ("aws",)
        assert provider.calls[0][0] == prompts.IMPORT_PROMPT
        assert provider.calls[1][0] == prompts.TAILOR_PROMPT
        assert provider.calls[1][1].endswith("TARGET JOB DESCRIPTION:\n\nCloud engineer")

    @pytest.mark.asyncio
    async def test_compress_returns_document(self, fake_provider):
        provider = fake_provider({"compressedResumeData": {"personalInfo": {"fullName": "Jane"}, "summary": "Short"}})
        document = await ResumeOptimizer(provider).compress(_named_document())
        assert document.summary == "Short"

    @pytest.mark.asyncio
    async def test_schema_mismatch_raises_response_error(self, fake_provider):
        observer = RenderObserver()
        provider = fake_provider({"optimizedSummary": "x", "unexpected": True})
        with pytest.raises(OptimizationResponseError) as exc_info:
            await ResumeOptimizer(provider, observer=observer).optimize(_named_document())

        assert exc_info.value.operation == "optimize"
        locations = [tuple(e["loc"]) for e in exc_info.value.errors]
        assert ("atsScore",) in locations
        assert ("unexpected",) in locations
        stats = observer.get_stats()
        assert stats["failed_service_calls"] == 1
        assert stats["errors"] == 1

    @pytest.mark.asyncio
    async def test_invalid_json_is_not_repaired(self, fake_provider):
        provider = fake_provider('Sure! Here is the JSON: {"optimizedSummary": "x"}')
        with pytest.raises(OptimizationResponseError):
            await ResumeOptimizer(provider).optimize(_named_document())

    @pytest.mark.asyncio
    async def test_transport_failure_is_wrapped(self, fake_provider):
        provider = fake_provider(ConnectionError("connection reset"))
        with pytest.raises(OptimizationServiceError) as exc_info:
            await ResumeOptimizer(provider).analyze("text")
        assert not isinstance(exc_info.value, OptimizationResponseError)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_no_retry(self, fake_provider, ats_payload):
        provider = fake_provider(TimeoutError("slow"), {"atsScore": ats_payload})
        with pytest.raises(OptimizationServiceError):
            await ResumeOptimizer(provider).optimize(_named_document())
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_successful_call_is_recorded(self, fake_provider, ats_payload):
        observer = RenderObserver()
        await ResumeOptimizer(fake_provider({"atsScore": ats_payload}), observer=observer).optimize(
            _named_document()
        )
        stats = observer.get_stats()
        assert stats["service_calls"] == 1
        assert stats["failed_service_calls"] == 0
