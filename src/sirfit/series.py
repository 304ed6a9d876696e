"""
===========================================================
series.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================
Observed Active / Removed series used as the fitting target.

Active  = confirmed - recovered - deaths
Removed = recovered + deaths

The cumulative table is validated here before anything is
fitted; every problem is reported as a DataError naming the
offending column and date.
"""
from __future__ import annotations
import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Sequence

from sirfit.errors import DataError

CUMULATIVE_COLUMNS = ("confirmed", "recovered", "deaths")
MIN_POINTS = 2


@dataclass(frozen=True)
class ObservedSeries:
    """
    Daily observations over a contiguous date range.

    Attributes:
    -----------
    dates: pd.DatetimeIndex
        Calendar date of each observation
    days: np.ndarray
        Day index, starting at 1
    active: np.ndarray
        Currently active cases
    removed: np.ndarray
        Cumulative recovered + dead
    """
    dates: pd.DatetimeIndex
    days: np.ndarray
    active: np.ndarray
    removed: np.ndarray

    def __len__(self) -> int:
        return len(self.days)

    @property
    def start_date(self) -> pd.Timestamp:
        return self.dates[0]

    @property
    def end_date(self) -> pd.Timestamp:
        return self.dates[-1]

    @property
    def active0(self) -> float:
        return float(self.active[0])

    @property
    def removed0(self) -> float:
        return float(self.removed[0])

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({"day": self.days, "active": self.active, "removed": self.removed},
                            index=self.dates)

    @classmethod
    def from_arrays(cls,
                    active: Sequence[float],
                    removed: Sequence[float],
                    start_date: str = "2020-01-01") -> "ObservedSeries":
        """Build a series from already-derived active/removed counts."""
        active = np.asarray(active, dtype=float)
        removed = np.asarray(removed, dtype=float)
        if active.shape != removed.shape or active.ndim != 1:
            raise DataError("active and removed must be 1-D and of equal length", field="active")
        dates = pd.date_range(pd.Timestamp(start_date), periods=len(active), freq="D")
        _check_length(len(active), dates)
        for name, values in (("active", active), ("removed", removed)):
            _check_finite_non_negative(name, values, dates)
        return cls(dates=dates, days=np.arange(1, len(active) + 1, dtype=float),
                   active=active, removed=removed)

    @classmethod
    def from_cumulative(cls, table: pd.DataFrame) -> "ObservedSeries":
        """
        Derive the series from a cumulative case table.

        The table needs a 'date' column and the cumulative columns
        'confirmed', 'recovered' and 'deaths', one row per day.
        """
        missing = [c for c in ("date",) + CUMULATIVE_COLUMNS if c not in table.columns]
        if missing:
            raise DataError(f"missing required column(s): {', '.join(missing)}", field=missing[0])

        df = table.sort_values("date").reset_index(drop=True)
        dates = pd.DatetimeIndex(pd.to_datetime(df["date"]))
        _check_length(len(df), dates)

        gaps = np.flatnonzero(np.asarray((dates[1:] - dates[:-1]).days) != 1)
        if len(gaps):
            i = int(gaps[0])
            raise DataError(f"series is not contiguous daily data after {dates[i].date()}",
                            field="date", date=dates[i + 1].date())

        for col in CUMULATIVE_COLUMNS:
            values = df[col].to_numpy(dtype=float)
            _check_finite_non_negative(col, values, dates)
            drops = np.flatnonzero(np.diff(values) < 0)
            if len(drops):
                i = int(drops[0]) + 1
                raise DataError(f"cumulative count decreases ({values[i-1]:.0f} -> {values[i]:.0f})",
                                field=col, date=dates[i].date())

        confirmed = df["confirmed"].to_numpy(dtype=float)
        removed = df["recovered"].to_numpy(dtype=float) + df["deaths"].to_numpy(dtype=float)
        active = confirmed - removed
        _check_finite_non_negative("active", active, dates)

        return cls(dates=dates, days=np.arange(1, len(df) + 1, dtype=float),
                   active=active, removed=removed)


def _check_length(n: int, dates) -> None:
    if n < MIN_POINTS:
        when = dates[0].date() if n else None
        raise DataError(f"need at least {MIN_POINTS} daily observations to fit, got {n}",
                        field="date", date=when)


def _check_finite_non_negative(name: str, values: np.ndarray, dates) -> None:
    bad = np.flatnonzero(~np.isfinite(values))
    if len(bad):
        raise DataError("missing or non-finite value", field=name, date=dates[int(bad[0])].date())
    neg = np.flatnonzero(values < 0)
    if len(neg):
        i = int(neg[0])
        raise DataError(f"negative count {values[i]:.0f}", field=name, date=dates[i].date())
