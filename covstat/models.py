"""
Data model (records, aggregated rows, view state)
=================================================

Each row of the ECDC case-distribution export becomes a `RawRecord`, which the
normalizer turns into a `CanonicalRecord`. Both are immutable (`frozen=True`) so
that:
- records cannot be modified after loading, and
- filters/sorts produce new lists instead of editing the dataset.

Aggregated rows and the filter/view state are small frozen values too; the
dashboard replaces them wholesale on each command.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional
import math

ALL_COUNTRIES = "All Countries"

@dataclass(frozen=True)
class RawRecord:
    """One country-day observation as received from the data source."""
    date_rep: str          # DD/MM/YYYY
    cases: int
    deaths: int
    country: str
    population: Optional[float]

@dataclass(frozen=True)
class CanonicalRecord:
    """Normalized record with a real date and per-1000 rates."""
    date: date
    cases: int
    deaths: int
    country: str
    population: float
    cases_per_1000: float
    deaths_per_1000: float

@dataclass(frozen=True)
class CountryTotals:
    total_cases: int
    total_deaths: int

# country identifier -> CountryTotals (read-only, built once per load)
LifetimeTotals = Mapping[str, CountryTotals]

@dataclass(frozen=True)
class AggregatedRow:
    """One country's summary over the active subset.

    `cases`/`deaths` follow the filter; `total_cases`/`total_deaths` are the
    lifetime totals and never change with the filter.
    """
    country: str
    cases: int
    deaths: int
    cases_per_1000: float
    deaths_per_1000: float
    population: float
    total_cases: int
    total_deaths: int

@dataclass(frozen=True)
class FilterCriteria:
    country: str = ""
    start: Optional[date] = None
    end: Optional[date] = None

    def is_empty(self) -> bool:
        return not self.country and self.start is None and self.end is None

@dataclass(frozen=True)
class ViewState:
    """Sort, pagination and view-mode state of the dashboard."""
    sort_key: str = "country"
    sort_direction: str = "asc"   # asc | desc
    page_index: int = 1           # 1-based
    page_size: int = 20
    view_mode: str = "table"      # table | chart

def per_1000(count: float, population: Optional[float]) -> float:
    """Rate per 1000 inhabitants; 0.0 when population is zero, absent or NaN."""
    if population is None or not math.isfinite(population) or population <= 0:
        return 0.0
    return count / population * 1000
