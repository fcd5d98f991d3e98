"""
covstat Command Line Interface (CLI)
====================================

Interactive terminal dashboard you run like:

    python -m covstat.cli --csv "path/to/ecdc.csv"
    python -m covstat.cli --url https://opendata.ecdc.europa.eu/covid19/casedistribution/csv

The dataset is read once at start-up. Every command below maps to one
dashboard command (ApplyFilter, ClearFilter, ChangeSort, ChangePage,
ToggleView) or to a read-only view of the current state.
"""

from __future__ import annotations
import argparse, logging, shlex, sys
from datetime import date
from typing import List, Optional
from .loader import load_raw_records, DataSourceError, ECDC_CSV_URL
from .engine import Dashboard, ApplyFilter, ClearFilter, ChangeSort, ChangePage, ToggleView, available_countries
from .aggregate import daily_series
from .models import FilterCriteria
from .table import render_table
from .view import SORT_KEYS, DEFAULT_PAGE_SIZE

HELP_TEXT = """
covstat commands
----------------

1) View
   show                             current page (table) or a chart hint
   view                             toggle table / chart view
   stats
   countries [prefix]               (example: countries fra)

2) Filtering (staged, then applied)
   filter country "<name>"          (example: filter country "franc")
   filter dates <start> <end>       ISO dates, "-" leaves a bound empty
                                    (example: filter dates 2020-03-01 2020-04-30)
   apply                            apply the staged filter
   clear                            clear all filters

3) Sorting / paging
   sort <field>                     same field again flips asc/desc
   page <n> | next | prev

4) Output
   chart "<out.png>"                line chart of the filtered records
   export csv "<out.csv>"
   export json "<out.json>"

5) Exit
   quit
"""

def _positive_int(text: str) -> int:
    """argparse type for --page-size."""
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {n}")
    return n

def _parse_date(text: str) -> Optional[date]:
    if text in ("-", ""):
        return None
    return date.fromisoformat(text)

class Repl:
    """Holds the dashboard plus the filter being edited (not yet applied)."""

    def __init__(self, dashboard: Dashboard) -> None:
        self.dashboard = dashboard
        self.staged = FilterCriteria()

    def handle(self, line: str) -> bool:
        """Handle one command line. Returns False when the user quits."""
        parts = shlex.split(line)
        if not parts:
            return True
        cmd = parts[0].lower()
        db = self.dashboard

        if cmd in ("quit", "exit"):
            return False

        if cmd == "help":
            print(HELP_TEXT)
            return True

        if cmd == "stats":
            s = db.session
            print(f"Records: {len(s.records)} | Countries: {len(s.totals)} | "
                  f"Days: {len(s.idx.dates_sorted)}")
            print(f"Current filter: {_describe(db.criteria)} | Rows: {len(db.rows)} | "
                  f"Sort: {db.view.sort_key} {db.view.sort_direction} | View: {db.view.view_mode}")
            return True

        if cmd == "countries":
            prefix = parts[1].lower() if len(parts) >= 2 else ""
            names = [n for n in available_countries(db.session) if n.lower().startswith(prefix)]
            for n in names[:50]:
                print(n)
            if len(names) > 50:
                print(f"... ({len(names)} total, showing 50)")
            return True

        if cmd == "filter":
            if len(parts) < 2:
                raise ValueError('Usage: filter country "<name>" | filter dates <start> <end>')
            kind = parts[1].lower()
            if kind == "country":
                name = parts[2] if len(parts) >= 3 else ""
                self.staged = FilterCriteria(country=name, start=self.staged.start, end=self.staged.end)
            elif kind == "dates":
                start = _parse_date(parts[2]) if len(parts) >= 3 else None
                end = _parse_date(parts[3]) if len(parts) >= 4 else None
                self.staged = FilterCriteria(country=self.staged.country, start=start, end=end)
            else:
                raise ValueError("filter kind must be: country, dates")
            print(f"Staged filter: {_describe(self.staged)} (type 'apply')")
            return True

        if cmd == "apply":
            db.dispatch(ApplyFilter(self.staged.country, self.staged.start, self.staged.end))
            if db.error:
                print(f"Error: {db.error}")
            else:
                print(f"Filtered {_describe(db.criteria)}. Countries={len(db.rows)}")
            return True

        if cmd == "clear":
            self.staged = FilterCriteria()
            db.dispatch(ClearFilter())
            print(f"Filters cleared. Countries={len(db.rows)}")
            return True

        if cmd == "sort":
            if len(parts) < 2:
                raise ValueError(f"Usage: sort <field>. Fields: {', '.join(SORT_KEYS)}")
            db.dispatch(ChangeSort(parts[1]))
            print(f"Sorted by {db.view.sort_key} ({db.view.sort_direction}).")
            _show(db)
            return True

        if cmd in ("page", "next", "prev"):
            if cmd == "page":
                n = int(parts[1])
            else:
                n = db.view.page_index + (1 if cmd == "next" else -1)
            db.dispatch(ChangePage(n))
            _show(db)
            return True

        if cmd == "view":
            db.dispatch(ToggleView())
            print(f"Switched to {db.view.view_mode} view.")
            return True

        if cmd == "show":
            _show(db)
            return True

        if cmd == "chart":
            from .chart import render_chart
            if len(parts) < 2:
                raise ValueError('Usage: chart "<out.png>"')
            out = render_chart(daily_series(db.filtered_records()), parts[1], subtitle=_describe(db.criteria))
            print(f"Chart written to {out}")
            return True

        if cmd == "export":
            from .export import export_csv, export_json
            if len(parts) < 3:
                print('Usage: export csv "out.csv"  OR  export json "out.json"')
                return True
            fmt, out_path = parts[1].lower(), parts[2]
            if not db.rows:
                print("Nothing to export: current selection is empty.")
                return True
            if fmt == "csv":
                export_csv(db.sorted_rows(), out_path)
            elif fmt == "json":
                export_json(db.sorted_rows(), out_path)
            else:
                print("Unknown export format. Use: csv or json")
                return True
            print(f"Exported {fmt.upper()} to {out_path}")
            return True

        print("Unknown command. Type 'help'.")
        return True

def _describe(c: FilterCriteria) -> str:
    if c.is_empty():
        return "none"
    bits: List[str] = []
    if c.country:
        bits.append(f"country~{c.country!r}")
    if c.start or c.end:
        bits.append(f"dates {c.start or '...'} to {c.end or '...'}")
    return ", ".join(bits)

def _show(db: Dashboard) -> None:
    if db.view.view_mode == "chart":
        print('Chart view: use chart "<out.png>" to render the filtered records.')
        return
    print(render_table(db.page(), db.view, db.page_count()))

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the covstat CLI.

    1) Load dataset (once)
    2) Build the session (normalize, totals, indices)
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(description="COVID-19 statistics dashboard (terminal)")
    src = ap.add_mutually_exclusive_group()
    src.add_argument("--csv", help="Path to ECDC case-distribution CSV")
    src.add_argument("--xlsx", help="Path to ECDC case-distribution Excel export")
    src.add_argument("--json", help="Path to ECDC case-distribution JSON")
    src.add_argument("--url", help=f"URL of the CSV dataset (default: {ECDC_CSV_URL})")
    ap.add_argument("--page-size", type=_positive_int, default=DEFAULT_PAGE_SIZE, help="Rows per page")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    source = args.csv or args.xlsx or args.json or args.url or ECDC_CSV_URL
    print("Loading dataset...")
    try:
        dashboard = Dashboard.from_raw(load_raw_records(source), page_size=args.page_size, source=source)
    except (DataSourceError, KeyError, ValueError) as e:
        print(f"Error: could not load dataset: {e}", file=sys.stderr)
        return 1

    repl = Repl(dashboard)
    print(f"Loaded {len(dashboard.session.records)} records. Type 'help' for commands.")
    _show(dashboard)
    while True:
        try:
            line = input("covstat> ")
        except EOFError:
            break
        try:
            if not repl.handle(line):
                break
        except Exception as e:
            print(f"Error: {e}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
