# experience.py
import logging
import re
from datetime import date
from typing import Iterable, List, Optional

from .dates import find_date_ranges, parse_date_range
from .models import EmploymentPeriod

logger = logging.getLogger(__name__)

_YEARS_MENTION = re.compile(
    r"(\d{1,2}(?:\.\d+)?)\s*\+?\s*(?:years?|yrs?)\.?\s+(?:of\s+)?(?:\w+\s+)?experience",
    re.I,
)


# ---------- Interval Merging ----------
def merge_periods(periods: Iterable[Optional[EmploymentPeriod]]) -> List[EmploymentPeriod]:
    """
    Merge overlapping or touching periods so concurrent jobs are counted once.

    Periods are sorted by start date; a period starting on or before the
    running end extends the running period, anything later starts a new one.
    """
    valid = [p for p in periods if p is not None and p.duration_months > 0]
    if not valid:
        return []

    intervals = sorted(valid, key=lambda p: p.start_date)
    merged = [intervals[0]]
    for period in intervals[1:]:
        last = merged[-1]
        if period.start_date <= last.end_date:
            if period.end_date > last.end_date:
                merged[-1] = EmploymentPeriod.between(last.start_date, period.end_date)
        else:
            merged.append(period)
    return merged


def total_months(periods: Iterable[Optional[EmploymentPeriod]]) -> int:
    return sum(p.duration_months for p in merge_periods(periods))


def years_from_periods(periods: Iterable[Optional[EmploymentPeriod]]) -> int:
    return max(0, total_months(periods) // 12)


# ---------- Text Fallback ----------
def mentioned_years(text: str) -> Optional[int]:
    """Pick up phrases like "5+ years of experience" when no dates are given."""
    m = _YEARS_MENTION.search(text or "")
    if not m:
        return None
    return max(0, int(float(m.group(1))))


# ---------- Public API ----------
def work_history(text: str, today: Optional[date] = None) -> List[EmploymentPeriod]:
    periods = []
    for match in find_date_ranges(text or ""):
        period = parse_date_range(match.text, today)
        if period is None:
            logger.debug("Skipping unusable date range %r on line %d", match.text, match.line_number)
            continue
        periods.append(period)
    return sorted(periods, key=lambda p: p.start_date)


def calculate_years_of_experience(text: str, today: Optional[date] = None) -> int:
    periods = work_history(text, today)
    if periods:
        return years_from_periods(periods)

    fallback = mentioned_years(text)
    if fallback is not None:
        logger.debug("No date ranges found; using stated experience of %d years", fallback)
        return fallback
    return 0
