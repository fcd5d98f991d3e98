"""
Indices (precomputed lookup tables)
===================================

Built once at load time, next to the lifetime totals. Maps from value to the
sorted list of record positions:

- `by_country["France"]` gives the positions of all French records.
- `date_to_ids[date(2020, 3, 1)]` gives the positions of records for that day.

Sorted position lists allow two-pointer intersection, and the result is in
dataset order, so the indexed path returns the same records in the same order
as a plain scan with `filter_records`.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence
from bisect import bisect_left, bisect_right
from .models import CanonicalRecord, FilterCriteria
from .filters import validate_criteria, selects_all_countries, matches_country
from .dsa import intersect_sorted, union_sorted

@dataclass(frozen=True)
class Indices:
    """Container of precomputed indices for fast filtering."""
    by_country: Dict[str, List[int]]
    date_to_ids: Dict[date, List[int]]
    dates_sorted: List[date]

def build_indices(records: Sequence[CanonicalRecord]) -> Indices:
    by_country: Dict[str, List[int]] = {}
    date_to_ids: Dict[date, List[int]] = {}

    # positions are appended in increasing order, so every list is already sorted
    for i, r in enumerate(records):
        by_country.setdefault(r.country, []).append(i)
        date_to_ids.setdefault(r.date, []).append(i)

    return Indices(by_country=by_country, date_to_ids=date_to_ids, dates_sorted=sorted(date_to_ids))

def date_range_ids(idx: Indices, start: Optional[date], end: Optional[date]) -> List[int]:
    """Return sorted positions with date in [start, end]; a None bound is open.

    Binary search on `dates_sorted` finds the slice of days inside the range.
    """
    lo = bisect_left(idx.dates_sorted, start) if start is not None else 0
    hi = bisect_right(idx.dates_sorted, end) if end is not None else len(idx.dates_sorted)
    out: List[int] = []
    for d in idx.dates_sorted[lo:hi]:
        out.extend(idx.date_to_ids[d])
    out.sort()
    return out

def country_ids(idx: Indices, selector: str) -> List[int]:
    """Union of positions of every country whose display name matches `selector`."""
    out: List[int] = []
    for country, ids in idx.by_country.items():
        if matches_country(country, selector):
            out = union_sorted(out, ids)
    return out

def select_ids(idx: Indices, n_records: int, criteria: FilterCriteria) -> List[int]:
    """Indexed equivalent of `filter_records`: sorted positions of matching records."""
    validate_criteria(criteria)
    if selects_all_countries(criteria.country):
        ids = list(range(n_records))
    else:
        ids = country_ids(idx, criteria.country)
    if criteria.start is not None or criteria.end is not None:
        ids = intersect_sorted(ids, date_range_ids(idx, criteria.start, criteria.end))
    return ids
