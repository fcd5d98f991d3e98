"""
Chart view
----------
Renders the time-series chart of the current filtered subset: daily cases and
daily deaths as two lines, one tick per year on the x axis.

Design goals:
- Keep covstat usable without matplotlib until a chart is requested
  (lazy import).
- Render off-screen (Agg backend) so it works in a terminal session.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Tuple
import os

@dataclass
class ChartConfig:
    """Knobs for the chart image."""
    title: str = "COVID-19 daily cases and deaths"
    width: float = 12.0
    height: float = 5.0
    dpi: int = 150
    cases_color: str = "#8884d8"
    deaths_color: str = "#ff7300"

def year_ticks(dates: Sequence[date]) -> list:
    """January 1st of every year spanned by `dates`."""
    if not dates:
        return []
    return [date(y, 1, 1) for y in range(min(dates).year, max(dates).year + 1)]

def render_chart(
    series: Sequence[Tuple[date, int, int]],
    out_path: str,
    *,
    config: Optional[ChartConfig] = None,
    subtitle: str = "",
) -> str:
    """Write a PNG line chart of (date, cases, deaths) points and return its path."""
    config = config or ChartConfig()

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import matplotlib.dates as mdates
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install it with: python -m pip install matplotlib"
        ) from e

    if not series:
        raise ValueError("No data to chart (result set is empty).")

    xs = [d for d, _, _ in series]
    cases = [c for _, c, _ in series]
    deaths = [k for _, _, k in series]

    fig, ax = plt.subplots(figsize=(config.width, config.height))
    ax.plot(xs, cases, color=config.cases_color, linewidth=2, label="cases")
    ax.plot(xs, deaths, color=config.deaths_color, linewidth=2, label="deaths")
    ax.grid(True, linestyle="--", linewidth=0.5)
    ticks = year_ticks(xs)
    if len(ticks) > 1:
        ax.set_xticks(ticks)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y"))
    ax.set_title(f"{config.title} ({subtitle})" if subtitle else config.title)
    ax.set_ylabel("Count")
    ax.legend()

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path, dpi=config.dpi)
    plt.close(fig)
    return out_path
