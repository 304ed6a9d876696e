"""
===========================================================
errors.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================
Error and warning types raised while fitting the SIR model.

    DataError               observed series cannot be fitted (fatal)
    NumericalInstability    ODE integration failed for a candidate
    NonConvergenceWarning   optimizer stopped before its tolerance
    BoundsExhaustionWarning population search hit the ceiling

License: MIT
===========================================================
"""
from __future__ import annotations
from typing import Optional


class DataError(ValueError):
    """Invalid or insufficient case data. Aborts the run before fitting."""

    def __init__(self, message: str, field: Optional[str] = None, date=None):
        self.field = field
        self.date = date
        parts = [message]
        if field is not None:
            parts.append(f"field={field}")
        if date is not None:
            parts.append(f"date={date}")
        super().__init__(" | ".join(parts))


class NumericalInstability(RuntimeError):
    """ODE integration could not produce finite output."""


class NonConvergenceWarning(UserWarning):
    pass


class BoundsExhaustionWarning(UserWarning):
    pass
