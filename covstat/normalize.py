"""
Record normalizer (RawRecord -> CanonicalRecord)
================================================

ECDC publishes `dateRep` as `DD/MM/YYYY`. Generic date parsers read that as
month-first for ambiguous days, so we split the three fields ourselves and
build the date from (year, month, day).

A malformed date rejects the whole load: partially ingesting the dataset would
make the lifetime totals wrong for the session.
"""

from __future__ import annotations
from datetime import date
from typing import Iterable, List
import re
from .models import RawRecord, CanonicalRecord, per_1000

# day and month may be unpadded; the year is always four digits
_DATE_REP_RE = re.compile(r"([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})")

class MalformedDateError(ValueError):
    pass

def parse_date_rep(text: str) -> date:
    """Parse `DD/MM/YYYY` into a date, raising MalformedDateError otherwise."""
    m = _DATE_REP_RE.fullmatch(str(text).strip())
    if m is None:
        raise MalformedDateError(f"Expected DD/MM/YYYY, got {text!r}")
    try:
        day, month, year = (int(p) for p in m.groups())
        return date(year, month, day)
    except ValueError as e:
        raise MalformedDateError(f"Invalid date {text!r}: {e}") from e

def normalize(raw: Iterable[RawRecord]) -> List[CanonicalRecord]:
    """Convert raw records 1:1 into canonical records (same order)."""
    out: List[CanonicalRecord] = []
    for i, r in enumerate(raw):
        try:
            d = parse_date_rep(r.date_rep)
        except MalformedDateError as e:
            raise MalformedDateError(f"Row {i} ({r.country}): {e}") from e
        pop = float(r.population) if r.population is not None else 0.0
        out.append(CanonicalRecord(
            date=d,
            cases=r.cases,
            deaths=r.deaths,
            country=r.country,
            population=pop,
            cases_per_1000=per_1000(r.cases, pop),
            deaths_per_1000=per_1000(r.deaths, pop),
        ))
    return out
