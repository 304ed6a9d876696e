"""
===========================================================
sir.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Deterministic SIR (Susceptible-Infectious-Removed) model
    integrated with scipy's adaptive Runge-Kutta solver.

    Defines:
        - CompartmentState: immutable (S, I, R) triple.
        - SIRParams: (beta, gamma) with derived R0.
        - sir_rhs(): the ODE right-hand side.
        - simulate_sir(): integrates the system over day indices.

Example Usage:
    from sirfit.sir import CompartmentState, SIRParams, simulate_sir
    y0 = CompartmentState(S=99990, I=10, R=0)
    traj = simulate_sir([1, 2, 3], y0, N=1e5, params=SIRParams(0.3, 0.05))

Notes:
    - Runge-Kutta stages and their dense output preserve linear
      invariants, so S + I + R stays at N to round-off.
    - Integration is capped by a budget of RHS evaluations; running
      out raises NumericalInstability instead of hanging.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple
from scipy.integrate import solve_ivp

from sirfit.errors import NumericalInstability


@dataclass(frozen=True)
class CompartmentState:
    S: float    # susceptible
    I: float    # active infections
    R: float    # removed (recovered + dead)

    @property
    def total(self) -> float:
        return self.S + self.I + self.R

    def as_tuple(self) -> Tuple[float, float, float]:
        return (float(self.S), float(self.I), float(self.R))

    def scaled(self, factor: float) -> "CompartmentState":
        return CompartmentState(self.S * factor, self.I * factor, self.R * factor)

    @classmethod
    def from_observed(cls, N: float, active0: float, removed0: float) -> "CompartmentState":
        """Initial state for population N given the first observed counts."""
        return cls(S=float(N) - active0 - removed0, I=float(active0), R=float(removed0))


@dataclass(frozen=True)
class SIRParams:
    beta: float     # infectious contact rate
    gamma: float    # recovery rate

    @property
    def R0(self) -> float:
        """Basic reproduction number beta / gamma."""
        return self.beta / self.gamma if self.gamma else np.inf

    @property
    def recovery_days(self) -> float:
        """Mean infectious duration 1 / gamma."""
        return 1.0 / self.gamma if self.gamma else np.inf


def sir_rhs(S: float, I: float, R: float, N: float, beta: float, gamma: float) -> Tuple[float, float, float]:
    """Right-hand side of the SIR equations. Derivatives sum to zero."""
    infection = beta * I * S / N
    recovery = gamma * I
    dS = -infection
    dI = infection - recovery
    dR = recovery
    return dS, dI, dR


def simulate_sir(
        t: Sequence[float],
        y0: CompartmentState,
        N: float,
        params: SIRParams,
        rtol: float = 1e-8,
        atol: float = 1e-8,
        max_rhs_evaluations: int = 200_000
) -> Dict[str, np.ndarray]:
    """
    Integrate the SIR system from y0 (taken at t[0]) over the time points t.

    Args:
        t: strictly increasing day indices, usually starting at 1.
        y0: state at t[0].
        N: population size used in the force of infection.
        params: transmission and recovery rates.
        max_rhs_evaluations: integration budget before giving up.

    Returns:
        dict with t, S, I, R arrays of len(t).

    Raises:
        NumericalInstability: solver failure, exhausted budget or
        non-finite output.
    """
    t = np.asarray(t, dtype=float)
    if t.ndim != 1 or len(t) == 0:
        raise ValueError("t must be a non-empty 1-D sequence")
    if len(t) > 1 and np.any(np.diff(t) <= 0):
        raise ValueError("t must be strictly increasing")
    if N <= 0:
        raise NumericalInstability(f"population N must be positive, got {N}")

    if len(t) == 1:
        S0, I0, R0 = y0.as_tuple()
        return {"t": t, "S": np.array([S0]), "I": np.array([I0]), "R": np.array([R0])}

    beta, gamma = float(params.beta), float(params.gamma)
    evaluations = 0

    def rhs(_t, y):
        nonlocal evaluations
        evaluations += 1
        if evaluations > max_rhs_evaluations:
            raise NumericalInstability(
                f"RHS evaluation budget ({max_rhs_evaluations}) exhausted at t={_t:.3f}"
            )
        return sir_rhs(y[0], y[1], y[2], N, beta, gamma)

    with np.errstate(over="ignore", invalid="ignore"):
        sol = solve_ivp(rhs, (t[0], t[-1]), y0.as_tuple(), t_eval=t,
                        method="RK45", rtol=rtol, atol=atol)

    if not sol.success:
        raise NumericalInstability(f"ODE solver failed: {sol.message}")
    if sol.y.shape[1] != len(t) or not np.all(np.isfinite(sol.y)):
        raise NumericalInstability("ODE solver produced non-finite or truncated output")

    S, I, R = sol.y
    return {"t": t, "S": S, "I": I, "R": R}
