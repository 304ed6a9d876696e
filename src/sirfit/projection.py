"""
===========================================================
projection.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Forward projection of a fitted SIR model past the observed
    window, optionally inflating the initial state to account
    for undetected (asymptomatic) infections.

Example Usage:
    from sirfit.projection import project
    base = project(fit.params, fit.population, fit.initial_state,
                   observed, end_date="2020-12-31")
    wide = project(fit.params, fit.population, fit.initial_state,
                   observed, end_date="2020-12-31", asymptomatic_fraction=0.5)

Notes:
    - Asymptomatic inflation multiplies S, I and R by 1/(1-p); the
      population is scaled with them so S + I + R = N still holds.
    - Peaks resolve ties to the earliest date.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Optional, Tuple

from sirfit.series import ObservedSeries
from sirfit.sir import CompartmentState, SIRParams, simulate_sir

PROJECTION_COLUMNS = ["S", "I", "R", "total_infected", "new_cases", "active", "removed"]


@dataclass(frozen=True)
class ProjectionResult:
    frame: pd.DataFrame
    params: SIRParams
    population: float
    initial_state: CompartmentState
    asymptomatic_fraction: float = 0.0

    @property
    def peak_active_date(self) -> pd.Timestamp:
        return self.frame.index[int(np.argmax(self.frame["I"].to_numpy()))]

    @property
    def peak_active(self) -> float:
        return float(self.frame["I"].max())

    @property
    def peak_total_date(self) -> pd.Timestamp:
        return self.frame.index[int(np.argmax(self.frame["total_infected"].to_numpy()))]

    def fitted_vs_observed(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """(I, active, R, removed) restricted to dates with observations."""
        window = self.frame.dropna(subset=["active", "removed"])
        return (window["I"].to_numpy(), window["active"].to_numpy(),
                window["R"].to_numpy(), window["removed"].to_numpy())


def inflate_state(state: CompartmentState, asymptomatic_fraction: float) -> CompartmentState:
    """Scale every compartment by 1 / (1 - p)."""
    if not (0 <= asymptomatic_fraction < 1):
        raise ValueError(f"asymptomatic fraction must be in [0, 1), got {asymptomatic_fraction}")
    return state.scaled(1.0 / (1.0 - asymptomatic_fraction))


def project(params: SIRParams,
            population: float,
            initial_state: CompartmentState,
            observed: ObservedSeries,
            end_date: Optional[str] = None,
            asymptomatic_fraction: float = 0.0,
            rtol: float = 1e-8,
            atol: float = 1e-8,
            max_rhs_evaluations: int = 200_000) -> ProjectionResult:
    """
    Simulate from the first observed date through end_date (defaults to
    the last observed date) and align with the observations.
    """
    start = observed.start_date
    end = pd.Timestamp(end_date) if end_date is not None else observed.end_date
    if end < observed.end_date:
        end = observed.end_date
    dates = pd.date_range(start, end, freq="D")
    t = np.arange(1, len(dates) + 1, dtype=float)

    if asymptomatic_fraction:
        y0 = inflate_state(initial_state, asymptomatic_fraction)
        N = population / (1.0 - asymptomatic_fraction)
    else:
        y0, N = initial_state, population

    sim = simulate_sir(t, y0, N, params, rtol=rtol, atol=atol,
                       max_rhs_evaluations=max_rhs_evaluations)
    total = sim["I"] + sim["R"]
    frame = pd.DataFrame({
        "S": sim["S"],
        "I": sim["I"],
        "R": sim["R"],
        "total_infected": total,
        "new_cases": np.diff(total, prepend=total[0]),
    }, index=pd.DatetimeIndex(dates, name="date"))
    obs = observed.to_dataframe()
    frame["active"] = obs["active"].reindex(frame.index)
    frame["removed"] = obs["removed"].reindex(frame.index)

    return ProjectionResult(frame=frame[PROJECTION_COLUMNS], params=params, population=N,
                            initial_state=y0, asymptomatic_fraction=asymptomatic_fraction)
