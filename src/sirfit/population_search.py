"""
===========================================================
population_search.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Calibrate the effective susceptible population N together
    with (beta, gamma) by repeated multiplicative grid search:

      1) round 0 is centered on N0 = ceiling * default_center_fraction
      2) each round fits (beta, gamma) for every N = m * N0 over the
         multiplier grid (0.05 .. 4.0, step 0.05 by default)
      3) the minimal-loss N becomes the next round's center; a winner
         above the population ceiling resets the center to N0
      4) after a fixed number of rounds the last winner is accepted

Example Usage:
    from sirfit.config import FitConfig
    from sirfit.population_search import calibrate_population
    fit = calibrate_population(observed, FitConfig())
    print(fit.params.beta, fit.params.gamma, fit.population, fit.R0)

Notes:
    - There is no tolerance between rounds; the round count is the
      only stopping rule.
    - When the optimum sits near the ceiling the center can swing
      between a large winner and the reset value from round to
      round. This is a known limitation of the procedure and is kept.
    - Each round depends only on the previous winner's N.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import logging
import warnings
import numpy as np
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Dict, List

from sirfit.config import FitConfig
from sirfit.errors import BoundsExhaustionWarning, NonConvergenceWarning
from sirfit.loss import INSTABILITY_LOSS, make_loss
from sirfit.optimizer import OptimizationResult, fit_beta_gamma
from sirfit.series import ObservedSeries
from sirfit.sir import CompartmentState, SIRParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopulationCandidate:
    population: float
    multiplier: float
    result: OptimizationResult

    @property
    def loss(self) -> float:
        return self.result.loss


@dataclass(frozen=True)
class RoundResult:
    round_index: int
    center: float
    candidates: Dict[int, PopulationCandidate]
    best_index: int

    @property
    def best(self) -> PopulationCandidate:
        return self.candidates[self.best_index]


@dataclass(frozen=True)
class RoundSummary:
    """What the search keeps of a round once its grid is discarded."""
    round_index: int
    center: float
    best: PopulationCandidate
    clamped: bool = False


@dataclass(frozen=True)
class PopulationSearchResult:
    params: SIRParams
    population: float
    loss: float
    converged: bool
    message: str
    initial_state: CompartmentState
    history: List[RoundSummary] = field(default_factory=list)
    clamp_count: int = 0
    ceiling_exceeded: bool = False

    @property
    def R0(self) -> float:
        return self.params.R0

    @property
    def recovery_days(self) -> float:
        return self.params.recovery_days

    def summary(self) -> Dict[str, float]:
        return {
            "beta": self.params.beta,
            "gamma": self.params.gamma,
            "R0": self.R0,
            "recovery_days": self.recovery_days,
            "population": self.population,
            "loss": self.loss,
            "converged": self.converged,
        }


def fit_population_candidate(observed: ObservedSeries,
                             population: float,
                             config: FitConfig) -> OptimizationResult:
    """Fit (beta, gamma) with N held fixed at population."""
    y0 = CompartmentState.from_observed(population, observed.active0, observed.removed0)
    if y0.S < 0:
        return OptimizationResult(
            params=SIRParams(*config.initial_guess),
            loss=INSTABILITY_LOSS,
            converged=False,
            message=f"population {population:.0f} is smaller than the observed case count",
        )
    loss = make_loss(observed, y0, population, weights=config.loss_weights,
                     rtol=config.rtol, atol=config.atol,
                     max_rhs_evaluations=config.max_rhs_evaluations)
    return fit_beta_gamma(loss,
                          initial_guess=config.initial_guess,
                          lower=config.lower_bounds,
                          upper=config.upper_bounds,
                          max_iterations=config.max_iterations)


def search_round(observed: ObservedSeries,
                 center: float,
                 config: FitConfig,
                 round_index: int = 0) -> RoundResult:
    """
    Sweep the multiplier grid around center and pick the minimal-loss N.
    Ties go to the lowest grid index.
    """
    multipliers = config.multipliers()
    populations = [float(m * center) for m in multipliers]
    fit = partial(fit_population_candidate, observed, config=config)

    if config.workers > 1:
        with ProcessPoolExecutor(max_workers=config.workers) as pool:
            results = list(pool.map(fit, populations))
    else:
        results = [fit(n) for n in populations]

    candidates: Dict[int, PopulationCandidate] = {}
    for idx, (m, n, res) in enumerate(zip(multipliers, populations, results)):
        candidates[idx] = PopulationCandidate(population=n, multiplier=float(m), result=res)
        logger.debug("round %d  m=%.2f  N=%.0f  beta=%.5f  gamma=%.5f  loss=%.6g  %s",
                     round_index, m, n, res.params.beta, res.params.gamma, res.loss,
                     "ok" if res.converged else res.message)

    losses = np.array([candidates[i].loss for i in range(len(candidates))])
    best_index = int(np.argmin(losses))
    return RoundResult(round_index=round_index, center=float(center),
                       candidates=candidates, best_index=best_index)


def calibrate_population(observed: ObservedSeries, config: FitConfig) -> PopulationSearchResult:
    """
    Run the fixed number of refinement rounds and return the last
    round's winner as the accepted fit.
    """
    config.validate()
    center = config.default_center
    history: List[RoundSummary] = []
    clamp_count = 0

    for r in range(config.rounds):
        rnd = search_round(observed, center, config, round_index=r)
        best = rnd.best
        logger.info("round %d/%d  center=%.0f  best N=%.0f (x%.2f)  beta=%.5f  gamma=%.5f  loss=%.6g",
                    r + 1, config.rounds, center, best.population, best.multiplier,
                    best.result.params.beta, best.result.params.gamma, best.loss)

        clamped = False
        is_last = r == config.rounds - 1
        if not is_last:
            center = best.population
            if center > config.population_ceiling:
                clamped = True
                clamp_count += 1
                logger.warning("round %d winner N=%.0f exceeds ceiling %.0f; resetting center to %.0f",
                               r + 1, center, config.population_ceiling, config.default_center)
                if clamp_count > 1:
                    warnings.warn(
                        f"population search hit the ceiling {clamp_count} times; "
                        f"center reset to {config.default_center:.0f}",
                        BoundsExhaustionWarning
                    )
                center = config.default_center
        history.append(RoundSummary(round_index=r, center=rnd.center, best=best, clamped=clamped))

    final = history[-1].best
    ceiling_exceeded = final.population > config.population_ceiling
    if ceiling_exceeded:
        logger.warning("accepted N=%.0f exceeds the population ceiling %.0f",
                       final.population, config.population_ceiling)
    if not final.result.converged:
        warnings.warn(
            f"accepted fit did not converge: {final.result.message}",
            NonConvergenceWarning
        )

    return PopulationSearchResult(
        params=final.result.params,
        population=final.population,
        loss=final.loss,
        converged=final.result.converged,
        message=final.result.message,
        initial_state=CompartmentState.from_observed(final.population, observed.active0,
                                                     observed.removed0),
        history=history,
        clamp_count=clamp_count,
        ceiling_exceeded=ceiling_exceeded,
    )
