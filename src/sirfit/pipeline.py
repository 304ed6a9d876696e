"""
===========================================================
pipeline.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    End-to-end batch run: window the case table, validate it,
    calibrate (beta, gamma, N), project forward under the
    baseline and each asymptomatic assumption, and score the fit.

Example Usage:
    from dataio.loaders import load_case_table
    from sirfit.config import FitConfig
    from sirfit.pipeline import run_analysis
    table = load_case_table("brazil.csv")
    analysis = run_analysis(table, FitConfig(start_date="2020-03-16",
                                             end_date="2020-05-31",
                                             projection_end="2020-12-31"))
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import logging
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List

from dataio.loaders import select_window
from sirfit.config import FitConfig
from sirfit.evaluation import evaluate_projection
from sirfit.population_search import PopulationSearchResult, calibrate_population
from sirfit.projection import ProjectionResult, project
from sirfit.series import ObservedSeries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    observed: ObservedSeries
    fit: PopulationSearchResult
    baseline: ProjectionResult
    scenarios: List[ProjectionResult] = field(default_factory=list)
    statistics: Dict[str, Dict[str, float]] = field(default_factory=dict)


def run_analysis(table: pd.DataFrame, config: FitConfig) -> AnalysisResult:
    """Fit and project one date window of a cumulative case table."""
    config.validate()
    window = select_window(table, config.start_date, config.end_date)
    observed = ObservedSeries.from_cumulative(window)
    logger.info("fitting %d days (%s .. %s)", len(observed),
                observed.start_date.date(), observed.end_date.date())

    fit = calibrate_population(observed, config)
    logger.info("accepted fit: beta=%.5f gamma=%.5f N=%.0f R0=%.3f converged=%s",
                fit.params.beta, fit.params.gamma, fit.population, fit.R0, fit.converged)

    solver = dict(rtol=config.rtol, atol=config.atol,
                  max_rhs_evaluations=config.max_rhs_evaluations)
    baseline = project(fit.params, fit.population, fit.initial_state, observed,
                       end_date=config.projection_end, **solver)
    scenarios = [
        project(fit.params, fit.population, fit.initial_state, observed,
                end_date=config.projection_end, asymptomatic_fraction=p, **solver)
        for p in config.asymptomatic_fractions
    ]
    for res in [baseline] + scenarios:
        logger.info("p=%.2f  peak active %.0f on %s  peak total on %s",
                    res.asymptomatic_fraction, res.peak_active,
                    res.peak_active_date.date(), res.peak_total_date.date())

    return AnalysisResult(observed=observed, fit=fit, baseline=baseline,
                          scenarios=scenarios, statistics=evaluate_projection(baseline))
