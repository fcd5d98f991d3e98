"""
Filter engine (country + date range)
====================================

Filters run on canonical records *before* aggregation:
- country: case-insensitive substring match on the display name
  ("franc" matches "France"); blank or "All Countries" matches everything.
- dates: inclusive bounds on the canonical date. A range with only one bound
  set is rejected by `validate_criteria` before any filtering happens.
"""

from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional
from .models import ALL_COUNTRIES, CanonicalRecord, FilterCriteria
from .names import clean_country_name

class DateRangeError(ValueError):
    """User-input error in the date range (recoverable, shown to the user)."""

def validate_criteria(criteria: FilterCriteria) -> None:
    if criteria.start is not None and criteria.end is None:
        raise DateRangeError("Please select end date")
    if criteria.start is None and criteria.end is not None:
        raise DateRangeError("Please select start date")
    if criteria.start is not None and criteria.end is not None and criteria.start > criteria.end:
        raise DateRangeError("Start date must not be after end date")

def selects_all_countries(selector: Optional[str]) -> bool:
    s = (selector or "").strip()
    return not s or s.lower() == ALL_COUNTRIES.lower()

def matches_country(country: str, selector: Optional[str]) -> bool:
    if selects_all_countries(selector):
        return True
    return selector.strip().lower() in clean_country_name(country).lower()

def in_date_range(d: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and end is not None:
        return start <= d <= end
    if start is not None:
        return d >= start
    if end is not None:
        return d <= end
    return True

def filter_records(records: Iterable[CanonicalRecord], criteria: FilterCriteria) -> List[CanonicalRecord]:
    """Return the records matching `criteria`, in input order.

    Raises DateRangeError for a one-sided or inverted range.
    """
    validate_criteria(criteria)
    return [
        r for r in records
        if matches_country(r.country, criteria.country)
        and in_date_range(r.date, criteria.start, criteria.end)
    ]
