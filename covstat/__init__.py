"""
covstat package
===============

Per-country COVID-19 statistics from the ECDC case-distribution dataset:
filter by country and date range, sort, paginate, and chart.

- The CLI entry point is in `covstat/cli.py`.
- The session and dashboard commands are in `covstat/engine.py`.
- Normalization, totals/aggregation, filters and sorting live in
  `normalize.py`, `aggregate.py`, `filters.py` and `view.py`.
- Dataset loading is in `covstat/loader.py`.
"""

__version__ = '0.1.0'
