"""Pure domain logic for ATS (Applicant Tracking System) resume scoring.

The scorer is a local heuristic: it is used when no optimization service is
configured and to sanity-check service scores. All functions operate on
documents and strings -- no file I/O.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Set, Tuple

from .formatting import normalize_link
from .models import ATSScore, ResumeDocument

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ACTION_VERBS: List[str] = [
    "achieved",
    "administered",
    "analyzed",
    "built",
    "collaborated",
    "created",
    "delivered",
    "designed",
    "developed",
    "directed",
    "established",
    "executed",
    "generated",
    "implemented",
    "improved",
    "increased",
    "launched",
    "led",
    "managed",
    "optimized",
    "organized",
    "produced",
    "reduced",
    "resolved",
    "streamlined",
]

SCORING_WEIGHTS: Dict[str, float] = {
    "formatting": 0.20,
    "structure": 0.25,
    "content": 0.25,
    "keywords": 0.30,
}

# Without a target job the keyword share is spread over the other categories.
SCORING_WEIGHTS_NO_JOB: Dict[str, float] = {
    "formatting": 0.30,
    "structure": 0.35,
    "content": 0.35,
    "keywords": 0.0,
}

MIN_SUMMARY_LENGTH = 50

_STOP_WORDS: Set[str] = {
    "the",
    "and",
    "for",
    "are",
    "but",
    "not",
    "you",
    "all",
    "can",
    "had",
    "her",
    "was",
    "one",
    "our",
    "out",
    "has",
    "have",
    "been",
    "will",
    "with",
    "this",
    "that",
    "from",
    "they",
    "were",
    "which",
    "their",
    "about",
    "would",
    "there",
    "what",
    "also",
    "into",
    "more",
    "other",
    "than",
    "then",
    "them",
    "these",
    "some",
    "such",
    "only",
    "over",
    "very",
    "just",
    "being",
    "through",
    "during",
    "when",
    "where",
    "both",
    "each",
    "most",
    "should",
    "could",
    "does",
    "while",
    "must",
    "work",
    "working",
    "looking",
    "seeking",
    "ability",
    "able",
    "including",
    "using",
    "strong",
    "excellent",
    "good",
    "great",
    "well",
    "team",
    "role",
    "position",
    "company",
    "join",
    "ideal",
    "candidate",
    "required",
    "preferred",
    "minimum",
    "years",
    "year",
    "experience",
}

_FANCY_CHARS_RE = re.compile(r"[●◆★☆►▸▹→←↑↓✓✗✔✘❌✅]")
_METRIC_RE = re.compile(r"\d+[%$kKmMbB]|\$[\d,]+|\d+\+?\s*(?:years?|months?|clients?|users?|projects?|people)")
_EMAIL_RE = re.compile(r"^[\w\.\-+]+@[\w\.\-]+\.\w+$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_document(document: ResumeDocument, job_description: str = "") -> ATSScore:
    """Score *document* for ATS compatibility.

    Keyword match is computed only when *job_description* is given; the
    returned score is already normalized (see :func:`normalize_ats_score`).
    """
    has_job = bool(job_description.strip())

    fmt_score, fmt_issues = _check_formatting(document)
    struct_score, struct_issues = _check_structure(document)
    content_score, content_issues = _check_content(document)
    kw_score, kw_issues = _check_keywords(document, job_description) if has_job else (0, [])

    weights = SCORING_WEIGHTS if has_job else SCORING_WEIGHTS_NO_JOB
    overall = round(
        fmt_score * weights["formatting"]
        + struct_score * weights["structure"]
        + content_score * weights["content"]
        + kw_score * weights["keywords"]
    )

    suggestions: List[str] = []
    for issues in [struct_issues, content_issues, kw_issues, fmt_issues]:
        suggestions.extend(issues)

    score = ATSScore(
        overall=overall,
        keyword_match=kw_score,
        formatting=fmt_score,
        structure=struct_score,
        suggestions=tuple(suggestions),
    )
    return normalize_ats_score(score, document, has_target_job=has_job)


def normalize_ats_score(score: ATSScore, document: ResumeDocument, has_target_job: bool) -> ATSScore:
    """Clean up a score card against the document it describes.

    Suggestions are de-duplicated (case-insensitive) and advice to add a
    section the document already has is dropped. Keyword match is zeroed
    when there is no target job.
    """
    has_projects = _has_custom_section(document, re.compile(r"project"))
    has_certs = _has_custom_section(document, re.compile(r"certificat|license"))
    has_summary = len(document.summary.strip()) >= MIN_SUMMARY_LENGTH
    has_strengths = any(c.skills.strip() for c in document.core_strengths)

    kept: List[str] = []
    for suggestion in _dedupe(score.suggestions):
        lc = suggestion.lower()
        adds = "add" in lc or "consider" in lc
        includes = "add" in lc or "include" in lc
        if has_projects and "project" in lc and adds:
            continue
        if has_certs and "cert" in lc and adds:
            continue
        if has_summary and "summary" in lc and includes:
            continue
        if has_strengths and "skill" in lc and includes:
            continue
        kept.append(suggestion)

    return score.evolve(
        keyword_match=score.keyword_match if has_target_job else 0,
        suggestions=tuple(kept),
    )


def extract_keywords(text: str) -> Set[str]:
    """Extract meaningful keywords from *text*, filtering stop words."""
    words = set(re.findall(r"\b[a-z][a-z\+\#\.]{2,}\b", text.lower()))
    words = {w.rstrip(".") for w in words}
    multi_word = set(
        m.lower()
        for m in re.findall(
            r"\b(?:machine learning|deep learning|data science|project management|"
            r"full stack|front end|back end|cloud computing|"
            r"continuous integration|continuous delivery|"
            r"natural language processing|computer vision)\b",
            text.lower(),
        )
    )
    words |= multi_word
    return {w for w in words if len(w) >= 3} - _STOP_WORDS


def document_text(document: ResumeDocument) -> str:
    """All user-entered text of *document*, one field per line."""
    return "\n".join(_iter_text(document))


# ---------------------------------------------------------------------------
# Formatting report (pure string output)
# ---------------------------------------------------------------------------


def format_ats_report(score: ATSScore) -> str:
    """Render an :class:`ATSScore` as a human-readable report."""
    grade = _score_to_grade(score.overall)
    bar = _score_bar(score.overall)

    lines = [
        f"## ATS Score: {score.overall}/100 {grade}",
        bar,
        "",
        "| Category      | Score |",
        "|---------------|-------|",
        f"| Keyword match | {score.keyword_match:3d}   |",
        f"| Formatting    | {score.formatting:3d}   |",
        f"| Structure     | {score.structure:3d}   |",
    ]

    if score.suggestions:
        lines.append("")
        lines.append("### Suggestions")
        for i, s in enumerate(score.suggestions, 1):
            lines.append(f"{i}. {s}")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Private scoring helpers
# ---------------------------------------------------------------------------


def _check_formatting(document: ResumeDocument) -> Tuple[int, List[str]]:
    score = 100
    issues: List[str] = []
    info = document.personal_info

    if not info.email.strip():
        score -= 15
        issues.append("Missing email address -- essential for recruiter contact")
    elif not _EMAIL_RE.match(info.email.strip()):
        score -= 10
        issues.append("Email address looks malformed -- double-check it")
    if not info.phone.strip():
        score -= 10
        issues.append("Missing phone number -- most recruiters expect a phone number")
    if not info.linkedin:
        score -= 5
        issues.append("No LinkedIn URL -- consider adding your LinkedIn profile")

    for label, raw in (("LinkedIn", info.linkedin), ("GitHub", info.github), ("Portfolio", info.portfolio)):
        if raw and normalize_link(raw) is None:
            score -= 5
            issues.append(f"{label} link is not a valid URL -- it will be left out of exports")

    fancy_chars = _FANCY_CHARS_RE.findall(document_text(document))
    if fancy_chars:
        score -= 10
        issues.append(
            f"Contains special characters ({', '.join(sorted(set(fancy_chars))[:5])}) -- ATS parsers may drop them"
        )

    long_bullets = [b for e in document.experience for b in e.visible_bullets if len(b) > 200]
    if len(long_bullets) > 2:
        score -= 10
        issues.append(f"{len(long_bullets)} bullet points exceed 200 characters -- keep bullets to one or two lines")

    return max(0, score), issues


def _check_structure(document: ResumeDocument) -> Tuple[int, List[str]]:
    score = 100
    issues: List[str] = []

    summary = document.summary.strip()
    if not summary:
        score -= 10
        issues.append("Add a professional summary to highlight key qualifications")
    elif len(summary) < MIN_SUMMARY_LENGTH:
        score -= 5
        issues.append("Professional summary is very short -- aim for 2-3 sentences")

    if not document.experience:
        score -= 25
        issues.append("Missing 'experience' section -- this is expected by most ATS systems")
    if not document.education:
        score -= 15
        issues.append("Missing 'education' section -- this is expected by most ATS systems")
    has_skills = any(c.is_renderable for c in document.core_strengths) or any(s.strip() for s in document.skills)
    if not has_skills:
        score -= 15
        issues.append("Add relevant skills that match common job requirements")

    thin_roles = [e for e in document.experience if len(e.visible_bullets) < 3]
    if thin_roles:
        score -= 10
        issues.append("Include 3-5 bullet points per experience with quantified achievements")
    if any(len(e.visible_bullets) > 6 for e in document.experience):
        score -= 5
        issues.append("Some roles have more than 6 bullet points -- keep the strongest 3-5")

    undated = [e for e in document.experience if not e.start_date.strip()]
    if undated:
        score -= 10
        issues.append("Some roles have no dates -- include employment dates (e.g., 'Jan 2020 - Present')")
    if any(not e.has_valid_date_range for e in document.experience):
        score -= 5
        issues.append("A role ends before it starts -- check the employment dates")

    word_count = len(document_text(document).split())
    if word_count < 150:
        score -= 15
        issues.append(f"Resume is very short ({word_count} words) -- most resumes should be 300-800 words")
    elif word_count > 1200:
        score -= 10
        issues.append(f"Resume is long ({word_count} words) -- consider trimming to 1-2 pages (300-800 words)")

    return max(0, score), issues


def _check_content(document: ResumeDocument) -> Tuple[int, List[str]]:
    score = 100
    issues: List[str] = []
    bullets = [b for e in document.experience for b in e.visible_bullets]
    bullet_text = "\n".join(bullets)
    bullet_lower = bullet_text.lower()

    found_verbs = [v for v in ACTION_VERBS if re.search(rf"\b{v}\b", bullet_lower)]
    verb_ratio = len(found_verbs) / max(len(ACTION_VERBS), 1)
    if verb_ratio < 0.2:
        score -= 20
        issues.append("Few action verbs found -- use strong verbs like: Led, Developed, Implemented, Achieved")
    elif verb_ratio < 0.4:
        score -= 10
        issues.append("Could use more action verbs -- try: Optimized, Streamlined, Delivered, Launched")

    numbers = _METRIC_RE.findall(bullet_text)
    if not numbers:
        score -= 20
        issues.append("No quantifiable achievements -- add metrics (e.g., 'Increased revenue by 25%')")
    elif len(numbers) < 3:
        score -= 10
        issues.append(f"Only {len(numbers)} metric(s) found -- aim for at least 3-5 quantified achievements")

    return max(0, score), issues


def _check_keywords(document: ResumeDocument, job_description: str) -> Tuple[int, List[str]]:
    issues: List[str] = []
    jd_keywords = extract_keywords(job_description)
    if not jd_keywords:
        return 0, issues

    resume_keywords = extract_keywords(document_text(document))
    matched = jd_keywords & resume_keywords
    missing = jd_keywords - resume_keywords
    match_rate = len(matched) / len(jd_keywords)

    if match_rate < 0.3:
        top_missing = sorted(missing)[:10]
        issues.append(f"Low job keyword match ({match_rate:.0%}) -- consider adding: {', '.join(top_missing)}")
    elif match_rate < 0.5:
        top_missing = sorted(missing)[:7]
        issues.append(f"Moderate job keyword match ({match_rate:.0%}) -- missing: {', '.join(top_missing)}")

    return round(match_rate * 100), issues


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _iter_text(document: ResumeDocument) -> Iterable[str]:
    info = document.personal_info
    yield from (info.full_name, info.location)
    yield document.summary
    for category in document.core_strengths:
        yield f"{category.category} {category.skills}"
    yield from document.skills
    for entry in document.experience:
        yield f"{entry.job_title} {entry.company} {entry.location}"
        yield from entry.bullets
    for edu in document.education:
        yield f"{edu.degree} {edu.field or ''} {edu.institution}"
    for section in document.custom_sections:
        yield section.title
        for item in section.items:
            yield f"{item.title} {item.subtitle or ''} {item.description or ''}"
            yield from item.bullets


def _has_custom_section(document: ResumeDocument, pattern: re.Pattern) -> bool:
    return any(pattern.search(s.title.strip().lower()) for s in document.custom_sections)


def _dedupe(items: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    out: List[str] = []
    for raw in items:
        s = (raw or "").strip()
        if not s:
            continue
        key = s.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(s)
    return out


def _score_to_grade(score: int) -> str:
    if score >= 90:
        return "Excellent"
    elif score >= 75:
        return "Good"
    elif score >= 60:
        return "Fair"
    else:
        return "Needs Work"


def _score_bar(score: int, width: int = 20) -> str:
    filled = round(score / 100 * width)
    return f"[{'=' * filled}{' ' * (width - filled)}]"
