"""
===========================================================
evaluation.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================
Goodness-of-fit statistics for a fitted projection.

License: MIT
===========================================================
"""
import numpy as np
from typing import Dict

from sirfit.projection import ProjectionResult


def fit_statistics(y_true: np.ndarray, y_pred: np.ndarray) -> Dict[str, float]:
    """Calculate goodness-of-fit metrics.
    Parameters:
    y_true : ndarray. Observed data
    y_pred : ndarray. Model predictions

    Returns:
    metrics : dict. R2, RMSE, MAE and MAPE (percent)
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    residuals = y_true - y_pred

    mae = np.mean(np.abs(residuals))
    rmse = np.sqrt(np.mean(residuals**2))

    ss_res = np.sum(residuals**2)
    ss_tot = np.sum((y_true - np.mean(y_true))**2)
    r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 0.0

    # zero observations are left out of the percentage error
    nonzero = y_true != 0
    mape = np.mean(np.abs(residuals[nonzero] / y_true[nonzero])) * 100 if nonzero.any() else np.nan

    return {
        'R2': float(r_squared),
        'RMSE': float(rmse),
        'MAE': float(mae),
        'MAPE': float(mape)
    }


def evaluate_projection(result: ProjectionResult) -> Dict[str, Dict[str, float]]:
    """Fit statistics for active and removed over the observed window."""
    I, active, R, removed = result.fitted_vs_observed()
    return {
        'active': fit_statistics(active, I),
        'removed': fit_statistics(removed, R),
    }
