"""
Core engine (session + dashboard)
=================================

Two-phase lifecycle:

1) `load(raw)` -> `Session`: normalize records, compute lifetime totals and
   build indices, exactly once. The session is immutable afterwards.
2) `Dashboard(session)` holds the interaction state (filter criteria, view
   state, aggregated rows, last validation error) and handles one command at a
   time via `dispatch`.

Every command recomputes what it needs from the session; nothing is cached
incrementally, and nothing ever recomputes the lifetime totals.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, List, Optional, Tuple, Union
import logging
from .models import RawRecord, CanonicalRecord, LifetimeTotals, AggregatedRow, FilterCriteria, ViewState, ALL_COUNTRIES
from .normalize import normalize
from .aggregate import compute_lifetime_totals, aggregate
from .filters import DateRangeError
from .indices import Indices, build_indices, select_ids
from .names import clean_country_name
from .view import sort_rows, paginate, toggle_sort, page_count, DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Session:
    """Canonical dataset, lifetime totals and indices of one load."""
    records: Tuple[CanonicalRecord, ...]
    totals: LifetimeTotals
    idx: Indices
    source: Optional[str] = None

def load(raw: Iterable[RawRecord], source: Optional[str] = None) -> Session:
    """Normalize and accumulate once. Raises MalformedDateError on bad input."""
    records = tuple(normalize(raw))
    totals = compute_lifetime_totals(records)
    idx = build_indices(records)
    logger.info("Loaded %d records for %d countries", len(records), len(totals))
    return Session(records=records, totals=totals, idx=idx, source=source)

def available_countries(session: Session) -> List[str]:
    """Display names for the country selector, "All Countries" first."""
    names = sorted({clean_country_name(c) for c in session.totals}, key=str.lower)
    return [ALL_COUNTRIES] + names

# ---------------- Commands ----------------
@dataclass(frozen=True)
class ApplyFilter:
    country: str = ""
    start: Optional[date] = None
    end: Optional[date] = None

@dataclass(frozen=True)
class ClearFilter:
    pass

@dataclass(frozen=True)
class ChangeSort:
    key: str

@dataclass(frozen=True)
class ChangePage:
    page_index: int

@dataclass(frozen=True)
class ToggleView:
    pass

Command = Union[ApplyFilter, ClearFilter, ChangeSort, ChangePage, ToggleView]

@dataclass
class Dashboard:
    """Interactive state over an immutable Session.

    `rows` is the aggregated view of the active filter (unsorted, first
    appearance order); `page()` sorts and slices it on demand.
    """
    session: Session
    view: ViewState = field(default_factory=ViewState)
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    error: Optional[str] = None
    rows: List[AggregatedRow] = field(init=False)
    # Commands that changed the view, in order; rejected filters are not logged
    command_log: List[Command] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.rows = aggregate(self.session.records, self.session.totals)

    @classmethod
    def from_raw(cls, raw: Iterable[RawRecord], page_size: int = DEFAULT_PAGE_SIZE,
                 source: Optional[str] = None) -> "Dashboard":
        return cls(session=load(raw, source=source), view=ViewState(page_size=page_size))

    # ---------------- Commands ----------------
    def dispatch(self, command: Command) -> None:
        if isinstance(command, ApplyFilter):
            if not self.apply_filter(FilterCriteria(country=command.country, start=command.start, end=command.end)):
                return
        elif isinstance(command, ClearFilter):
            self.clear_filter()
        elif isinstance(command, ChangeSort):
            self.view = toggle_sort(self.view, command.key)
        elif isinstance(command, ChangePage):
            self.view = replace(self.view, page_index=command.page_index)
        elif isinstance(command, ToggleView):
            mode = "chart" if self.view.view_mode == "table" else "table"
            self.view = replace(self.view, view_mode=mode)
        else:
            raise TypeError(f"Unknown command: {command!r}")
        self.command_log.append(command)

    def apply_filter(self, criteria: FilterCriteria) -> bool:
        """Apply `criteria`; on a date-range error keep the current view and set `error`."""
        try:
            subset = self._select(criteria)
        except DateRangeError as e:
            logger.debug("Rejected filter %r: %s", criteria, e)
            self.error = str(e)
            return False
        self.criteria = criteria
        self.error = None
        self.rows = aggregate(subset, self.session.totals)
        self.view = replace(self.view, page_index=1)
        if not self.rows:
            logger.info("No data available for the selected filters")
        return True

    def clear_filter(self) -> None:
        self.criteria = FilterCriteria()
        self.error = None
        self.rows = aggregate(self.session.records, self.session.totals)
        self.view = replace(self.view, page_index=1)

    # ---------------- Derived views ----------------
    def _select(self, criteria: FilterCriteria) -> List[CanonicalRecord]:
        ids = select_ids(self.session.idx, len(self.session.records), criteria)
        return [self.session.records[i] for i in ids]

    def filtered_records(self) -> List[CanonicalRecord]:
        return self._select(self.criteria)

    def sorted_rows(self) -> List[AggregatedRow]:
        return sort_rows(self.rows, self.view.sort_key, self.view.sort_direction)

    def page(self) -> List[AggregatedRow]:
        return paginate(self.sorted_rows(), self.view.page_index, self.view.page_size)

    def page_count(self) -> int:
        return page_count(len(self.rows), self.view.page_size)
