"""Text table view of aggregated rows (one page at a time)."""

from __future__ import annotations
from typing import Callable, List, Sequence, Tuple
from .models import AggregatedRow, ViewState
from .names import clean_country_name

NO_DATA = "No data available for the selected filters"

def _int(v) -> str:
    return "" if v is None else f"{v:,}"

def _rate(v) -> str:
    return "" if v is None else f"{v:.2f}"

# (header, field, formatter)
COLUMNS: List[Tuple[str, str, Callable]] = [
    ("Country", "country", clean_country_name),
    ("Cases", "cases", _int),
    ("Deaths", "deaths", _int),
    ("Cases per 1000", "cases_per_1000", _rate),
    ("Deaths per 1000", "deaths_per_1000", _rate),
    ("Total Cases", "total_cases", _int),
    ("Total Deaths", "total_deaths", _int),
]

def render_table(rows: Sequence[AggregatedRow], view: ViewState, n_pages: int = 1) -> str:
    if not rows:
        return NO_DATA

    headers = []
    for title, field, _ in COLUMNS:
        if field == view.sort_key:
            title += " ^" if view.sort_direction == "asc" else " v"
        headers.append(title)
    body = [[fmt(getattr(r, field)) for _, field, fmt in COLUMNS] for r in rows]

    widths = [max(len(h), *(len(line[i]) for line in body)) for i, h in enumerate(headers)]
    # country left-aligned, numbers right-aligned
    def _line(cells: Sequence[str]) -> str:
        return " | ".join(
            c.ljust(w) if i == 0 else c.rjust(w)
            for i, (c, w) in enumerate(zip(cells, widths))
        )

    out = [_line(headers), "-+-".join("-" * w for w in widths)]
    out.extend(_line(line) for line in body)
    out.append(f"Page {view.page_index} of {max(n_pages, 1)}")
    return "\n".join(out)
