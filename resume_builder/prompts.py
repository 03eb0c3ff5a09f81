"""System prompts and user messages for the optimization service.

Each prompt spells out the exact JSON shape the response is validated against
(see :mod:`resume_builder.domain.optimization`).
"""

from __future__ import annotations

from typing import Optional

from .domain.models import ResumeDocument

_DOCUMENT_SHAPE = """{
  "personalInfo": {"fullName": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": "", "portfolio": ""},
  "summary": "",
  "coreStrengths": [{"id": "", "category": "", "skills": "comma, separated, skills"}],
  "experience": [{"id": "", "jobTitle": "", "company": "", "location": "", "workType": "", "startDate": "YYYY-MM", "endDate": "YYYY-MM", "current": false, "bullets": [""]}],
  "education": [{"id": "", "degree": "", "field": "", "institution": "", "location": "", "graduationDate": "YYYY-MM", "gpa": ""}],
  "customSections": [{"id": "", "title": "", "items": [{"id": "", "title": "", "subtitle": "", "date": "YYYY-MM", "description": "", "link": "", "bullets": [""]}]}],
  "skills": []
}"""

_ATS_SHAPE = """{"overall": 0, "keywordMatch": 0, "formatting": 0, "structure": 0, "suggestions": [""]}"""

_WRITING_RULES = """Writing rules:
- Start every bullet with a strong action verb (Led, Built, Reduced, Launched...).
- Quantify impact wherever the source supports it; never invent numbers, employers, dates or credentials.
- Keep bullets to one or two lines; 3-5 bullets per role.
- Use plain text only: no markdown, no emoji, no special bullet characters.
- Dates use the "YYYY-MM" format; leave a field empty when it is unknown."""

OPTIMIZE_PROMPT = f"""You are an expert resume writer and ATS (Applicant Tracking System) specialist.
You receive a resume as JSON and, optionally, a target job description.
Rewrite the summary, the core strengths and the experience bullets so the resume is concise,
achievement-oriented and keyword-rich for the target job. Keep every experience id unchanged.

{_WRITING_RULES}

Respond with a single JSON object and nothing else, using exactly these keys:
{{
  "optimizedSummary": "",
  "optimizedCoreStrengths": [{{"id": "", "category": "", "skills": "comma, separated, skills"}}],
  "optimizedSkills": [""],
  "optimizedExperience": [{{"id": "<experience id from the input>", "optimizedBullets": [""]}}],
  "atsScore": {_ATS_SHAPE},
  "extractedKeywords": [""]
}}
Scores are integers from 0 to 100. "keywordMatch" is 0 when no job description is given.
Omit "optimizedCoreStrengths" or "optimizedSkills" when you do not change them."""

IMPORT_PROMPT = f"""You are an expert resume parser and career coach.
You receive the raw text extracted from a resume file (PDF, DOCX or TXT). The text may have broken
line wrapping, merged columns or stray characters from extraction.
Reconstruct the resume faithfully as structured data, then assess its quality.

{_WRITING_RULES}

Respond with a single JSON object and nothing else, using exactly these keys:
{{
  "parsedResumeData": {_DOCUMENT_SHAPE},
  "analysis": {{"weaknesses": [""], "improvements": [""], "missingKeywords": [""], "score": 0}},
  "atsScore": {_ATS_SHAPE},
  "extractedKeywords": [""]
}}
Group skills into 3-6 "coreStrengths" categories. Put projects, certifications, awards and similar
content into "customSections". "score" is an integer from 0 to 100."""

TAILOR_PROMPT = f"""You are an expert resume writer and ATS (Applicant Tracking System) specialist.
You receive the raw text of a resume and a target job description.
Reconstruct the resume as structured data and tailor it to the job: reorder and rewrite the summary,
core strengths and experience bullets around the job's requirements while staying truthful to the
source resume.

{_WRITING_RULES}

Respond with a single JSON object and nothing else, using exactly these keys:
{{
  "parsedResumeData": {_DOCUMENT_SHAPE},
  "analysis": {{"weaknesses": [""], "improvements": [""], "missingKeywords": [""], "score": 0}},
  "atsScore": {_ATS_SHAPE},
  "extractedKeywords": [""]
}}
"missingKeywords" lists job requirements the resume still does not cover."""

COMPRESS_PROMPT = f"""You are an expert resume editor.
You receive a resume as JSON. Condense it so it fits on one US Letter page: shorten the summary to
2-3 sentences, keep the 3-4 strongest bullets per role, merge overlapping skill categories and drop
the least relevant custom section items. Keep every id, name, employer, title and date unchanged.

{_WRITING_RULES}

Respond with a single JSON object and nothing else:
{{"compressedResumeData": {_DOCUMENT_SHAPE}}}"""


def optimize_message(document: ResumeDocument, job_description: Optional[str] = None) -> str:
    parts = [f"RESUME JSON:\n\n{document.to_json()}"]
    if job_description and job_description.strip():
        parts.append(f"TARGET JOB DESCRIPTION:\n\n{job_description.strip()}")
    else:
        parts.append("No target job description was provided; optimize for general ATS readability.")
    return "\n\n".join(parts)


def import_message(raw_text: str) -> str:
    return f"RAW RESUME TEXT:\n\n{raw_text}"


def tailor_message(raw_text: str, job_description: str) -> str:
    return f"RAW RESUME TEXT:\n\n{raw_text}\n\nTARGET JOB DESCRIPTION:\n\n{job_description.strip()}"


def compress_message(document: ResumeDocument) -> str:
    return f"RESUME JSON:\n\n{document.to_json()}"
