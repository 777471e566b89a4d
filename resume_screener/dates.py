# dates.py
import re
from datetime import date
from typing import List, Optional

from .config import EARLIEST_YEAR
from .models import DateRangeMatch, EmploymentPeriod

_MONTHS = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]

_MONTH = r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\w*"
_DASH = r"\s*[-–—]\s*"
_PRESENT = r"(?:present|current|now)"

PRESENT_WORDS = ("present", "current", "now")

# Order matters only for the order of the returned matches
RANGE_PATTERNS = [
    re.compile(rf"{_MONTH}\s+\d{{4}}{_DASH}{_MONTH}\s+\d{{4}}", re.I),
    re.compile(rf"\d{{1,2}}/\d{{4}}{_DASH}\d{{1,2}}/\d{{4}}"),
    re.compile(rf"\d{{4}}{_DASH}\d{{4}}"),
    re.compile(rf"{_MONTH}\s+\d{{4}}{_DASH}{_PRESENT}", re.I),
    re.compile(rf"\d{{4}}{_DASH}{_PRESENT}", re.I),
    re.compile(rf"\d{{1,2}}/\d{{4}}{_DASH}{_PRESENT}", re.I),
]

_MONTH_YEAR = re.compile(rf"({_MONTH})\s+(\d{{4}})", re.I)
_MM_YYYY = re.compile(r"^(\d{1,2})/(\d{4})$")
_YYYY = re.compile(r"^(\d{4})$")
_SEPARATOR = re.compile(r"[-–—]")


# ---------- Range Extraction ----------
def extract_date_ranges(line: str, line_number: int = 0) -> List[DateRangeMatch]:
    """
    Return every date-range substring in ``line``.

    Each pattern is scanned on its own and the hits are concatenated, so the
    same span may be reported by more than one pattern
    (``"May 2018 - Present"`` also yields ``"2018 - Present"``).
    """
    matches: List[DateRangeMatch] = []
    for rx in RANGE_PATTERNS:
        for m in rx.finditer(line):
            matches.append(DateRangeMatch(text=m.group(0), line_number=line_number, offset=m.start()))
    return matches


def find_date_ranges(text: str) -> List[DateRangeMatch]:
    matches: List[DateRangeMatch] = []
    for i, line in enumerate(text.splitlines()):
        matches.extend(extract_date_ranges(line, i))
    return matches


# ---------- Date Parsing ----------
def _month_num(mon_str: str) -> Optional[int]:
    s = mon_str.lower()
    for i, m in enumerate(_MONTHS, 1):
        if s.startswith(m):
            return i
    return None


def _make_date(year: int, month: int, today: Optional[date] = None) -> Optional[date]:
    latest = (today or date.today()).year + 1
    if not EARLIEST_YEAR <= year <= latest:
        return None
    return date(year, month, 1)


def is_present(token: str) -> bool:
    t = token.strip().lower()
    return any(word in t for word in PRESENT_WORDS)


def parse_date(token: str, today: Optional[date] = None) -> Optional[date]:
    """
    Parse one side of a date range.

    Handles "present"/"current"/"now" (resolved to ``today``), "Jan 2020",
    "January 2020", "03/2020" and "2020". Returns None when nothing matches
    or the year falls outside EARLIEST_YEAR..next year.
    """
    tok = (token or "").strip()
    if not tok:
        return None
    if tok.lower() in PRESENT_WORDS:
        return today or date.today()

    m = _MONTH_YEAR.search(tok)
    if m:
        month = _month_num(m.group(1))
        if month:
            return _make_date(int(m.group(2)), month, today)

    m = _MM_YYYY.match(tok)
    if m:
        month = int(m.group(1))
        if 1 <= month <= 12:
            return _make_date(int(m.group(2)), month, today)
        return None

    m = _YYYY.match(tok)
    if m:
        return _make_date(int(m.group(1)), 1, today)

    return None


def parse_date_range(range_text: str, today: Optional[date] = None) -> Optional[EmploymentPeriod]:
    parts = [p.strip() for p in _SEPARATOR.split(range_text)]
    if len(parts) != 2:
        return None

    start = parse_date(parts[0], today)
    if is_present(parts[1]):
        end = today or date.today()
    else:
        end = parse_date(parts[1], today)

    if start is None or end is None or end < start:
        return None
    return EmploymentPeriod.between(start, end)
