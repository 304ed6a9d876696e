"""
===========================================================
optimizer.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Bounded minimization of the weighted RSS over (beta, gamma)
    with scipy's L-BFGS-B. The gradient is approximated by
    finite differences.

Example Usage:
    from sirfit.optimizer import fit_beta_gamma
    result = fit_beta_gamma(loss, initial_guess=(0.273, 0.033),
                            lower=(0.1, 0.01), upper=(1.0, 0.07))

Notes:
    - Non-convergence is reported on the result, never raised.
    - Deterministic: identical inputs give identical output.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from typing import Tuple
from scipy.optimize import minimize

from sirfit.loss import LossFn
from sirfit.sir import SIRParams


@dataclass(frozen=True)
class OptimizationResult:
    params: SIRParams
    loss: float
    converged: bool
    message: str
    n_iterations: int = 0
    n_evaluations: int = 0


def fit_beta_gamma(loss: LossFn,
                   initial_guess: Tuple[float, float] = (0.273, 0.033),
                   lower: Tuple[float, float] = (0.1, 0.01),
                   upper: Tuple[float, float] = (1.0, 0.07),
                   max_iterations: int = 15000) -> OptimizationResult:
    """
    Minimize loss((beta, gamma)) inside the box [lower, upper].

    Returns:
        OptimizationResult with the best parameters, their loss and
        the optimizer's convergence flag and message.
    """
    x0 = np.clip(np.asarray(initial_guess, dtype=float), lower, upper)
    bounds = list(zip(lower, upper))

    result = minimize(
        fun=loss,
        x0=x0,
        method="L-BFGS-B",
        bounds=bounds,
        options={"maxiter": max_iterations}
    )

    beta, gamma = (float(v) for v in result.x)
    message = result.message
    if isinstance(message, bytes):
        message = message.decode()

    return OptimizationResult(
        params=SIRParams(beta, gamma),
        loss=float(result.fun),
        converged=bool(result.success),
        message=str(message),
        n_iterations=int(getattr(result, "nit", 0)),
        n_evaluations=int(getattr(result, "nfev", 0)),
    )
