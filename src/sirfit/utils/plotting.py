import matplotlib.pyplot as plt
from typing import Optional, Sequence
from matplotlib.axes import Axes

from sirfit.projection import ProjectionResult


def plot_projection(result: ProjectionResult, ax: Optional[Axes] = None, title: Optional[str] = None) -> Axes:
    """Fitted I and R against observed active and removed cases."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 5))
    df = result.frame
    ax.plot(df.index, df["I"], 'r-', lw=2, label="Model active (I)")
    ax.plot(df.index, df["R"], 'g-', lw=2, label="Model removed (R)")
    ax.plot(df.index, df["active"], 'ro', ms=3, alpha=0.6, label="Observed active")
    ax.plot(df.index, df["removed"], 'go', ms=3, alpha=0.6, label="Observed removed")
    ax.axvline(result.peak_active_date, color='gray', linestyle='--', alpha=0.7,
               label=f"Peak {result.peak_active_date.date()}")
    if title is None:
        title = (f"SIR fit: R0={result.params.R0:.2f}, "
                 f"1/gamma={result.params.recovery_days:.1f} days")
        if result.asymptomatic_fraction:
            title += f" (asymptomatic {result.asymptomatic_fraction:.0%})"
    ax.set_title(title)
    ax.set_ylabel("Individuals")
    ax.legend()
    ax.grid(alpha=0.25)
    return ax


def plot_scenarios(results: Sequence[ProjectionResult], ax: Optional[Axes] = None) -> Axes:
    """Active-case curves for several asymptomatic assumptions."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 5))
    for res in results:
        label = f"p={res.asymptomatic_fraction:.2f}" if res.asymptomatic_fraction else "baseline"
        ax.plot(res.frame.index, res.frame["I"], lw=2, label=label)
    ax.set_ylabel("Active infections")
    ax.legend()
    ax.grid(alpha=0.25)
    return ax
