"""
Totals accumulator and per-country aggregator
=============================================

Two passes over canonical records:

1) `compute_lifetime_totals` runs once per load over the *full* dataset.
   The result is a read-only mapping handed to every later aggregation.
2) `aggregate` groups any subset (full or filtered) by country and attaches
   the lifetime totals verbatim.

Keeping (1) out of (2) means a filtered aggregation can never overwrite the
lifetime totals.
"""

from __future__ import annotations
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, List, Tuple
from .models import CanonicalRecord, CountryTotals, LifetimeTotals, AggregatedRow, per_1000

class TotalsLookupError(KeyError):
    """A country in the subset has no lifetime totals (internal invariant broken)."""

def compute_lifetime_totals(records: Iterable[CanonicalRecord]) -> LifetimeTotals:
    sums: Dict[str, List[int]] = {}
    for r in records:
        acc = sums.setdefault(r.country, [0, 0])
        acc[0] += r.cases
        acc[1] += r.deaths
    return MappingProxyType({
        country: CountryTotals(total_cases=c, total_deaths=d)
        for country, (c, d) in sums.items()
    })

def aggregate(subset: Iterable[CanonicalRecord], totals: LifetimeTotals) -> List[AggregatedRow]:
    """One row per country, in order of first appearance in `subset`."""
    groups: Dict[str, List] = {}
    for r in subset:
        g = groups.get(r.country)
        if g is None:
            # population is constant per country: take the first record's
            groups[r.country] = [r.cases, r.deaths, r.population]
        else:
            g[0] += r.cases
            g[1] += r.deaths

    out: List[AggregatedRow] = []
    for country, (cases, deaths, population) in groups.items():
        try:
            lifetime = totals[country]
        except KeyError:
            raise TotalsLookupError(f"No lifetime totals for country {country!r}") from None
        out.append(AggregatedRow(
            country=country,
            cases=cases,
            deaths=deaths,
            cases_per_1000=per_1000(cases, population),
            deaths_per_1000=per_1000(deaths, population),
            population=population,
            total_cases=lifetime.total_cases,
            total_deaths=lifetime.total_deaths,
        ))
    return out

def daily_series(subset: Iterable[CanonicalRecord]) -> List[Tuple[date, int, int]]:
    """Sum cases/deaths per date over the subset, ordered by date (chart input)."""
    by_date: Dict[date, List[int]] = {}
    for r in subset:
        acc = by_date.setdefault(r.date, [0, 0])
        acc[0] += r.cases
        acc[1] += r.deaths
    return [(d, c, k) for d, (c, k) in sorted(by_date.items())]
