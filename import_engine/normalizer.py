"""
import_engine.normalizer - Text → number / date conversion for traffic rows.

Spreadsheet exports use "--" or "-" for "not applicable" and leave cells
blank.  Required counters collapse those to 0; the optional ones collapse
to None so "not reported" stays distinct from "reported as zero".
Only plain ASCII digit strings are counters: thousands separators
("12,000"), signs, decimals and full-width digits all count as a parse
failure.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

PLACEHOLDERS = frozenset({"", "--", "-"})

_DIGITS = re.compile(r"[0-9]+")

# Two distinct fallbacks: a part dateutil had to borrow shows up as a
# difference between the two parses.
_DEFAULT_A = datetime(2001, 1, 1)
_DEFAULT_B = datetime(2002, 2, 2)


def _parse_int(raw: Optional[str]) -> Optional[int]:
    text = (raw or "").strip()
    if not _DIGITS.fullmatch(text):
        return None
    return int(text)


def to_count(raw: Optional[str]) -> int:
    """Required counter: anything unusable becomes 0."""
    value = _parse_int(raw)
    return 0 if value is None else value


def to_optional_count(raw: Optional[str]) -> Optional[int]:
    """Optional counter: anything unusable becomes None."""
    return _parse_int(raw)


def to_rate(raw: Optional[str]) -> Optional[float]:
    """Completion rate as a percentage: "35%" → 35.0, "0.35" → 35.0."""
    text = (raw or "").strip()
    if text in PLACEHOLDERS:
        return None
    percent = text.endswith("%")
    try:
        value = float(text.rstrip("%").strip())
    except ValueError:
        return None
    if value < 0:
        return None
    if not percent and value <= 1:
        value *= 100
    return round(value, 2)


def parse_publish_time(raw: Optional[str]) -> tuple[Optional[date], Optional[datetime]]:
    """
    Return ``(publish_date, published_at)``.  Both stay None when the text
    is blank or not a date; no value is ever invented.

    Text without a full year/month/day ("10:30", "2024", "15") is rejected
    rather than completed from the current date.
    """
    text = (raw or "").strip()
    if text in PLACEHOLDERS:
        return None, None
    try:
        parsed = date_parser.parse(text, default=_DEFAULT_A)
        check = date_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None, None
    if parsed.date() != check.date():
        return None, None
    return parsed.date(), parsed
