"""Date and link normalizers shared by every renderer.

All functions are pure and total: malformed input degrades to a displayable
value (or ``None`` for links) and never raises.
"""

from __future__ import annotations

import ipaddress
import re
from typing import Optional
from urllib.parse import urlsplit

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

PRESENT_LABEL = "Present"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_FORBIDDEN_URL_CHARS = set('<>"\'\\^`{|}')
_DNS_LABEL_RE = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$", re.IGNORECASE)
_TLD_RE = re.compile(r"^(?:[a-z]{2,63}|xn--[a-z0-9-]{1,59})$", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})")


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def format_month_year(raw: Optional[str]) -> str:
    """Format an editor date (``"YYYY-MM"`` or ``"YYYY-MM-DD"``) as ``"Mon YYYY"``.

    - blank -> ``""``
    - no month segment (``"2020"``, ``"Spring 2020"``) -> the stripped input
    - month outside 1-12 or not numeric -> the year alone
    """
    if raw is None:
        return ""
    value = raw.strip()
    if not value:
        return ""
    if "-" not in value:
        return value

    year, _, rest = value.partition("-")
    month_part = rest.split("-", 1)[0].strip()
    year = year.strip()
    if not year or not month_part:
        return value
    if not month_part.isdigit():
        return year
    month = int(month_part)
    if not 1 <= month <= 12:
        return year
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def format_date_range(start: Optional[str], end: Optional[str], current: bool = False) -> str:
    """Join a start/end pair as ``"Jan 2020 - Dec 2021"`` or ``"Jan 2022 - Present"``.

    When only one side is known, that side is returned alone.
    """
    start_text = format_month_year(start)
    end_text = PRESENT_LABEL if current else format_month_year(end)
    if start_text and end_text:
        return f"{start_text} - {end_text}"
    return start_text or end_text


def is_valid_date_range(start: Optional[str], end: Optional[str]) -> bool:
    """False only when both sides parse as year-month and *end* precedes *start*."""
    start_key = _year_month_key(start)
    end_key = _year_month_key(end)
    if start_key is None or end_key is None:
        return True
    return start_key <= end_key


def _year_month_key(raw: Optional[str]) -> Optional[tuple]:
    if not raw:
        return None
    match = _YEAR_MONTH_RE.match(raw.strip())
    if not match:
        return None
    month = int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return int(match.group(1)), month


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


def normalize_link(raw: Optional[str]) -> Optional[str]:
    """Return a canonical ``https://`` URL for *raw*, or ``None`` when it is unusable.

    Whitespace is removed, a missing scheme becomes ``https://`` and ``http://``
    is upgraded. Any other scheme, a malformed host or port, or characters that
    are never valid in a URL yield ``None``.
    """
    if raw is None:
        return None
    value = _WHITESPACE_RE.sub("", raw)
    if not value:
        return None
    if any(ch in _FORBIDDEN_URL_CHARS for ch in value):
        return None

    match = _SCHEME_RE.match(value)
    if match:
        scheme = match.group(0)[:-3].lower()
        if scheme not in ("http", "https"):
            return None
        value = "https://" + value[match.end():]
    else:
        if value.startswith("//"):
            value = value[2:]
        value = "https://" + value

    try:
        parts = urlsplit(value)
        host = parts.hostname
        parts.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError:
        return None

    if not host or not _is_valid_host(host):
        return None
    if parts.username is not None or parts.password is not None:
        return None
    return value


def _is_valid_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass

    labels = host.rstrip(".").split(".")
    if len(labels) < 2 or len(host) > 253:
        return False
    if not all(_DNS_LABEL_RE.match(label) for label in labels):
        return False
    return bool(_TLD_RE.match(labels[-1]))


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------


def export_filename(full_name: str, extension: str) -> str:
    """``"Jane Q Doe", "pdf"`` -> ``"Jane_Q_Doe_Resume.pdf"``."""
    stem = _WHITESPACE_RE.sub("_", full_name.strip())
    return f"{stem}_Resume.{extension.lstrip('.')}"
