"""Shared fixtures: synthetic observations generated from known parameters."""

from dataclasses import replace

import numpy as np
import pandas as pd
import pytest

from sirfit.config import FitConfig
from sirfit.series import ObservedSeries
from sirfit.sir import CompartmentState, SIRParams, simulate_sir


def synthetic_series(beta, gamma, N, days, I0=10.0, R0=0.0, start_date="2020-03-01"):
    """Noiseless observed series produced by simulating the model forward."""
    t = np.arange(1, days + 1, dtype=float)
    y0 = CompartmentState(S=N - I0 - R0, I=I0, R=R0)
    sim = simulate_sir(t, y0, N, SIRParams(beta, gamma))
    return ObservedSeries.from_arrays(sim["I"], sim["R"], start_date=start_date)


def cumulative_table(series: ObservedSeries, death_share=0.1) -> pd.DataFrame:
    """Integer cumulative confirmed/recovered/deaths table consistent with a series."""
    removed = np.round(series.removed)
    deaths = np.floor(removed * death_share)
    recovered = removed - deaths
    confirmed = np.round(series.active + series.removed)
    return pd.DataFrame({
        "date": series.dates,
        "confirmed": confirmed,
        "recovered": recovered,
        "deaths": deaths,
    })


@pytest.fixture
def make_series():
    return synthetic_series


@pytest.fixture
def case_table():
    """Sixty days of cumulative counts from N=100,000, beta=0.25, gamma=0.05."""
    return cumulative_table(synthetic_series(0.25, 0.05, 100_000.0, days=60))


@pytest.fixture
def true_params():
    return {"beta": 0.25, "gamma": 0.05, "N": 100_000.0}


@pytest.fixture
def observed(true_params):
    return synthetic_series(true_params["beta"], true_params["gamma"], true_params["N"], days=120)


@pytest.fixture
def small_config():
    """Reduced grid and round count centered on N = 100,000."""
    return replace(
        FitConfig(),
        population_ceiling=400_000.0,
        default_center_fraction=0.25,
        multiplier_start=0.5,
        multiplier_stop=1.5,
        multiplier_step=0.25,
        rounds=2,
    )
