"""
===========================================================
loaders.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Minimal loaders for daily cumulative case tables (confirmed,
    recovered, deaths). Returns a tidy frame with canonical column
    names that sirfit.series.ObservedSeries can validate.

Notes:
    - Source may be a local path or a URL; anything pandas reads.
    - Column names differ between providers, so they are mapped
      onto 'date', 'confirmed', 'recovered', 'deaths'.
    - Optional filtering to a single location.
-----------------------------------------------------------
License: MIT
===========================================================
"""

from __future__ import annotations
import pandas as pd
from typing import Optional


def load_case_table(
        source,
        date_col: str = "date",
        confirmed_col: str = "confirmed",
        recovered_col: str = "recovered",
        deaths_col: str = "deaths",
        location: Optional[str] = None,     # e.g. "Brazil"
        location_col: str = "country",
        ) -> pd.DataFrame:
    """
    Load a cumulative case table and return tidy daily rows.

    Return columns:
        date (datetime64[ns])
        confirmed (float)     # cumulative confirmed cases
        recovered (float)     # cumulative recoveries
        deaths (float)        # cumulative deaths
    """
    df = pd.read_csv(source)

    if location is not None:
        df = df.loc[df[location_col] == location]

    renames = {date_col: "date", confirmed_col: "confirmed",
               recovered_col: "recovered", deaths_col: "deaths"}
    missing = [c for c in renames if c not in df.columns]
    if missing:
        raise KeyError(f"Expected column(s) {missing} not found. Available: {list(df.columns)}")

    sub = (
        df[list(renames)].rename(columns=renames)
        .assign(date=lambda d: pd.to_datetime(d["date"]))
        .sort_values("date")
        .reset_index(drop=True)
    )
    for col in ("confirmed", "recovered", "deaths"):
        sub[col] = sub[col].astype(float)
    return sub


def select_window(table: pd.DataFrame,
                  start: Optional[str] = None,
                  end: Optional[str] = None) -> pd.DataFrame:
    """Restrict a case table to [start, end] (inclusive)."""
    sub = table
    if start:
        sub = sub[sub["date"] >= pd.to_datetime(start)]
    if end:
        sub = sub[sub["date"] <= pd.to_datetime(end)]
    return sub.reset_index(drop=True)
