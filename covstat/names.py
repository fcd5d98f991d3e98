"""Display names for ECDC country identifiers (e.g. `United_States_of_America`)."""

from __future__ import annotations
import re

_WS_RE = re.compile(r"\s+")

def clean_country_name(identifier: str) -> str:
    """Return the display form of a country identifier.

    Underscores become spaces and runs of whitespace collapse to one.
    Total and deterministic: any string in, a string out.
    """
    return _WS_RE.sub(" ", str(identifier).replace("_", " ")).strip()
