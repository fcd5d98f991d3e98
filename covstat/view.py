"""
Sort / paginate view
====================

Turns aggregated rows into the page the user sees:

1) stable sort on one field (merge sort from `dsa`)
2) slice one 1-based page

Absent values (None/NaN) compare equal to anything, so they keep their
incoming position instead of being pushed to one end.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Any, List, Sequence
import math
from .models import AggregatedRow, ViewState
from .dsa import merge_sort

DEFAULT_PAGE_SIZE = 20

SORT_KEYS = (
    "country", "cases", "deaths", "cases_per_1000", "deaths_per_1000",
    "total_cases", "total_deaths", "population",
)

# column names of the ECDC feed and the original dashboard
_ALIASES = {
    "countriesandterritories": "country",
    "casesper1000": "cases_per_1000",
    "deathsper1000": "deaths_per_1000",
    "totalcases": "total_cases",
    "totaldeaths": "total_deaths",
    "popdata2019": "population",
}

def resolve_sort_key(name: str) -> str:
    k = name.strip()
    if k in SORT_KEYS:
        return k
    norm = k.lower().replace("_", "")
    if norm in _ALIASES:
        return _ALIASES[norm]
    for key in SORT_KEYS:
        if key.replace("_", "") == norm:
            return key
    raise ValueError(f"Unknown sort key {name!r}. Use one of: {', '.join(SORT_KEYS)}")

def _absent(v: Any) -> bool:
    return v is None or (isinstance(v, float) and math.isnan(v))

def compare_values(a: Any, b: Any) -> int:
    if _absent(a) or _absent(b):
        return 0
    if a < b:
        return -1
    if a > b:
        return 1
    return 0

def sort_rows(rows: Sequence[AggregatedRow], key: str, direction: str = "asc") -> List[AggregatedRow]:
    key = resolve_sort_key(key)
    if direction not in ("asc", "desc"):
        raise ValueError("direction must be 'asc' or 'desc'")
    sign = 1 if direction == "asc" else -1
    return merge_sort(rows, lambda a, b: sign * compare_values(getattr(a, key), getattr(b, key)))

def toggle_sort(state: ViewState, key: str) -> ViewState:
    """Same key flips the direction; a new key starts ascending."""
    key = resolve_sort_key(key)
    if key == state.sort_key:
        return replace(state, sort_direction="desc" if state.sort_direction == "asc" else "asc")
    return replace(state, sort_key=key, sort_direction="asc")

def page_count(n_rows: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    return math.ceil(n_rows / page_size)

def paginate(rows: Sequence[AggregatedRow], page_index: int, page_size: int = DEFAULT_PAGE_SIZE) -> List[AggregatedRow]:
    """1-based page slice; an out-of-range page is empty, not an error."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    if page_index < 1:
        return []
    start = (page_index - 1) * page_size
    return list(rows[start:start + page_size])

def sort_and_page(rows: Sequence[AggregatedRow], key: str, direction: str,
                  page_index: int, page_size: int = DEFAULT_PAGE_SIZE) -> List[AggregatedRow]:
    return paginate(sort_rows(rows, key, direction), page_index, page_size)
