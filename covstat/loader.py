"""
Dataset loader (ECDC export -> RawRecord list)
==============================================

Reads the ECDC case-distribution dataset and converts each row into a
`RawRecord`. The source can be a local CSV/XLSX/JSON file or a URL (CSV).

Key ideas:
- We try multiple possible column names because exports vary
  (`countriesAndTerritories` vs `Country`, `popData2019` vs `population`).
- Conversion helpers (_to_int/_to_population/_cell_text) handle blank cells.
- `dateRep` is kept as text; the normalizer parses it day-first.
- Any failure to read the source is a DataSourceError: the session cannot
  start without the full dataset.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import json
import logging
import re
import zipfile
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from .models import RawRecord

logger = logging.getLogger(__name__)

ECDC_CSV_URL = "https://opendata.ecdc.europa.eu/covid19/casedistribution/csv"

class DataSourceError(RuntimeError):
    """The raw dataset could not be retrieved or read."""

def _to_int(x) -> int:
    """Convert a cell to int, treating blanks/invalid values as 0."""
    if pd.isna(x): return 0
    try: return int(float(x))
    except (TypeError, ValueError): return 0

def _to_population(x) -> Optional[float]:
    """Population cell as float; None when blank, unparsable or NaN."""
    if pd.isna(x): return None
    try: return float(x)
    except (TypeError, ValueError): return None

def _cell_text(x) -> str:
    return "" if pd.isna(x) else str(x).strip()

def _to_date_rep(x) -> str:
    """Excel may hand back real datetimes; write them back as DD/MM/YYYY."""
    if isinstance(x, pd.Timestamp):
        return x.strftime("%d/%m/%Y")
    return _cell_text(x)

def _column_key(name) -> str:
    """`popData2019`, `pop_data_2019` and `Pop Data 2019` all map to `popdata2019`."""
    return re.sub(r"[^a-z0-9]+", "", str(name).lower())

def _find_column(df: pd.DataFrame, *candidates: str) -> str:
    """First candidate present verbatim, else first one matching by `_column_key`."""
    exact = [c for c in candidates if c in df.columns]
    if exact:
        return exact[0]
    by_key = {_column_key(c): c for c in df.columns}
    for c in candidates:
        if _column_key(c) in by_key:
            return by_key[_column_key(c)]
    raise KeyError(f"No column for {candidates[0]!r} (accepted: {list(candidates)}); "
                   f"columns in file: {list(df.columns)}")

def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))

def _read_frame(source: str) -> pd.DataFrame:
    suffix = Path(source).suffix.lower() if not _is_url(source) else ""
    if suffix == ".xlsx":
        return pd.read_excel(source, engine="openpyxl")
    if suffix == ".json":
        with open(source, "r", encoding="utf-8") as f:
            payload = json.load(f)
        rows = payload["records"] if isinstance(payload, dict) else payload
        return pd.json_normalize(rows)
    # keep dateRep and the identifiers as text; pandas would guess otherwise
    return pd.read_csv(source, dtype={"dateRep": str, "geoId": str, "countryterritoryCode": str},
                       keep_default_na=False, na_values=[""])

def records_from_frame(df: pd.DataFrame) -> List[RawRecord]:
    """Convert an ECDC-shaped DataFrame into RawRecord objects (one per row)."""
    df = df.rename(columns={c: str(c).strip() for c in df.columns})

    date_col = _find_column(df, "dateRep", "date_rep", "Date", "date")
    cases_col = _find_column(df, "cases", "Cases")
    deaths_col = _find_column(df, "deaths", "Deaths")
    country_col = _find_column(df, "countriesAndTerritories", "Country", "country", "Countries and territories")
    pop_col = next((c for c in df.columns if _column_key(c) in ("popdata2019", "population", "popdata")), None)

    records: List[RawRecord] = []
    for _, row in df.iterrows():
        records.append(RawRecord(
            date_rep=_to_date_rep(row[date_col]),
            cases=_to_int(row[cases_col]),
            deaths=_to_int(row[deaths_col]),
            country=_cell_text(row[country_col]),
            population=_to_population(row[pop_col]) if pop_col else None,
        ))
    return records

def load_raw_records(source: str = ECDC_CSV_URL) -> List[RawRecord]:
    """Read the whole dataset from a file path or URL.

    Raises DataSourceError if the source cannot be read, KeyError if a
    required column is missing.
    """
    logger.info("Reading dataset from %s", source)
    try:
        df = _read_frame(source)
    except (OSError, ValueError, KeyError, zipfile.BadZipFile, InvalidFileException) as e:
        raise DataSourceError(f"Could not read dataset from {source}: {e}") from e
    records = records_from_frame(df)
    logger.info("Read %d raw records", len(records))
    return records
