"""Export the current aggregated view to CSV or JSON."""

from __future__ import annotations
from dataclasses import asdict, fields
from typing import Sequence
import csv
import json
import os
from .models import AggregatedRow

FIELDS = [f.name for f in fields(AggregatedRow)]

def export_csv(rows: Sequence[AggregatedRow], path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(FIELDS)
        for r in rows:
            w.writerow([getattr(r, name) for name in FIELDS])

def export_json(rows: Sequence[AggregatedRow], path: str) -> None:
    """Write one object per aggregated row, keyed by AggregatedRow field name.

    Rates stay unrounded floats; the table view is where they get two decimals.
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([asdict(r) for r in rows], f, ensure_ascii=False, indent=2)
