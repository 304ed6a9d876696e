"""
===========================================================
config.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Run configuration for the SIR calibration pipeline. Every
    empirical tuning choice (loss weights, optimizer bounds and
    starting point, population grid, round count) lives here so
    it can be overridden per run instead of hard-coded.

Example Usage:
    from dataclasses import replace
    from sirfit.config import FitConfig
    config = replace(FitConfig(), rounds=3, start_date="2020-03-16")

Notes:
    - Population ceiling defaults to a national estimate (211M).
    - The default center N0 is ceiling * default_center_fraction.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

NATIONAL_POPULATION = 211_000_000


@dataclass(frozen=True)
class LossWeights:
    active: float = 3.0     # w1, on I vs observed active
    removed: float = 1.0    # w2, on R vs observed removed
    total: float = 3.0      # w3, on I+R vs active+removed


@dataclass(frozen=True)
class FitConfig:
    # fit window (inclusive); None keeps the full table
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    # effective population search
    population_ceiling: float = NATIONAL_POPULATION
    default_center_fraction: float = 0.25
    multiplier_start: float = 0.05
    multiplier_stop: float = 4.0
    multiplier_step: float = 0.05
    rounds: int = 7
    workers: int = 1

    # bounded optimizer
    beta_bounds: Tuple[float, float] = (0.1, 1.0)
    gamma_bounds: Tuple[float, float] = (0.01, 0.07)
    initial_guess: Tuple[float, float] = (0.273, 0.033)
    loss_weights: LossWeights = LossWeights()
    max_iterations: int = 15000

    # integrator
    rtol: float = 1e-8
    atol: float = 1e-8
    max_rhs_evaluations: int = 200_000

    # projection
    projection_end: Optional[str] = None
    asymptomatic_fractions: Tuple[float, ...] = (0.05, 0.5)

    @property
    def default_center(self) -> float:
        return self.population_ceiling * self.default_center_fraction

    @property
    def lower_bounds(self) -> Tuple[float, float]:
        return (self.beta_bounds[0], self.gamma_bounds[0])

    @property
    def upper_bounds(self) -> Tuple[float, float]:
        return (self.beta_bounds[1], self.gamma_bounds[1])

    def multipliers(self) -> np.ndarray:
        """Multiplicative population grid, inclusive of multiplier_stop."""
        n = int(round((self.multiplier_stop - self.multiplier_start) / self.multiplier_step)) + 1
        grid = self.multiplier_start + self.multiplier_step * np.arange(n)
        # rounded so that multiplier 1.0 is exact
        return np.round(grid, 10)

    def validate(self) -> "FitConfig":
        """Check that settings are mutually consistent. Returns self."""
        for name, (lo, hi) in (("beta_bounds", self.beta_bounds),
                               ("gamma_bounds", self.gamma_bounds)):
            if not (0 < lo < hi):
                raise ValueError(f"{name} must satisfy 0 < lower < upper, got {(lo, hi)}")
        beta0, gamma0 = self.initial_guess
        if not (self.beta_bounds[0] <= beta0 <= self.beta_bounds[1]):
            raise ValueError(f"initial beta {beta0} outside {self.beta_bounds}")
        if not (self.gamma_bounds[0] <= gamma0 <= self.gamma_bounds[1]):
            raise ValueError(f"initial gamma {gamma0} outside {self.gamma_bounds}")
        if self.population_ceiling <= 0:
            raise ValueError("population_ceiling must be positive")
        if not (0 < self.default_center_fraction <= 1):
            raise ValueError("default_center_fraction must be in (0, 1]")
        if self.multiplier_step <= 0 or self.multiplier_start <= 0:
            raise ValueError("multiplier grid must have positive start and step")
        if self.multiplier_stop < self.multiplier_start:
            raise ValueError("multiplier_stop must be >= multiplier_start")
        if self.rounds < 1:
            raise ValueError("rounds must be at least 1")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        w = self.loss_weights
        if min(w.active, w.removed, w.total) < 0:
            raise ValueError("loss weights must be non-negative")
        for p in self.asymptomatic_fractions:
            if not (0 <= p < 1):
                raise ValueError(f"asymptomatic fraction must be in [0, 1), got {p}")
        return self
