"""
===========================================================
loss.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Weighted residual sum of squares between a simulated SIR
    trajectory and the observed Active / Removed series:

      RSS = w1 * sum((A - I)^2)
          + w2 * sum((Rm - R)^2)
          + w3 * sum(((A + Rm) - (I + R))^2)

Notes:
    - Simulation failures are scored with INSTABILITY_LOSS so the
      optimizer can still rank and reject the candidate.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import logging
import numpy as np
from typing import Callable, Sequence

from sirfit.config import LossWeights
from sirfit.errors import NumericalInstability
from sirfit.series import ObservedSeries
from sirfit.sir import CompartmentState, SIRParams, simulate_sir

logger = logging.getLogger(__name__)

INSTABILITY_LOSS = 1e100

LossFn = Callable[[Sequence[float]], float]


def weighted_rss(active: np.ndarray,
                 removed: np.ndarray,
                 I: np.ndarray,
                 R: np.ndarray,
                 weights: LossWeights = LossWeights()) -> float:
    """Weighted RSS of simulated I, R against observed active, removed."""
    sse_active = np.sum((active - I) ** 2)
    sse_removed = np.sum((removed - R) ** 2)
    sse_total = np.sum(((active + removed) - (I + R)) ** 2)
    return float(weights.active * sse_active
                 + weights.removed * sse_removed
                 + weights.total * sse_total)


def make_loss(observed: ObservedSeries,
              y0: CompartmentState,
              N: float,
              weights: LossWeights = LossWeights(),
              rtol: float = 1e-8,
              atol: float = 1e-8,
              max_rhs_evaluations: int = 200_000) -> LossFn:
    """
    Close over a fixed (observed series, initial state, N) and return
    loss(point) where point = (beta, gamma).
    """
    t = observed.days
    active, removed = observed.active, observed.removed

    def loss(point: Sequence[float]) -> float:
        beta, gamma = float(point[0]), float(point[1])
        try:
            sim = simulate_sir(t, y0, N, SIRParams(beta, gamma), rtol=rtol, atol=atol,
                               max_rhs_evaluations=max_rhs_evaluations)
        except NumericalInstability as e:
            logger.debug("unstable candidate beta=%.5f gamma=%.5f N=%.0f: %s", beta, gamma, N, e)
            return INSTABILITY_LOSS
        value = weighted_rss(active, removed, sim["I"], sim["R"], weights)
        if not np.isfinite(value):
            return INSTABILITY_LOSS
        return value

    return loss
