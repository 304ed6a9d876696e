"""
===========================================================
cli.py
Author: Veronica Scerra
Last Updated: 2026-10-18
===========================================================

Description:
    Command line front end for the SIR calibration pipeline.
    Loads a cumulative case table, runs the population search
    and projections, and prints a short report.

Example Usage:
    sirfit --data cases.csv --location Brazil \
           --start 2020-03-16 --end 2020-05-31 \
           --projection-end 2020-12-31 --asymptomatic 0.05 0.5

Notes:
    - -v logs round summaries, -vv logs every grid candidate.
    - --plot shows the fit and scenario figures.
-----------------------------------------------------------
License: MIT
===========================================================
"""
from __future__ import annotations
import argparse
import logging
from dataclasses import replace

from dataio.loaders import load_case_table
from sirfit.config import FitConfig
from sirfit.pipeline import AnalysisResult, run_analysis


def build_parser() -> argparse.ArgumentParser:
    defaults = FitConfig()
    p = argparse.ArgumentParser(description="Fit an SIR model with effective population search")
    p.add_argument("--data", required=True, help="CSV path or URL of the cumulative case table")
    p.add_argument("--location", default=None, help="keep rows for one location only")
    p.add_argument("--location-col", default="country")
    p.add_argument("--date-col", default="date")
    p.add_argument("--confirmed-col", default="confirmed")
    p.add_argument("--recovered-col", default="recovered")
    p.add_argument("--deaths-col", default="deaths")
    p.add_argument("--start", default=None, help="first day of the fit window (YYYY-MM-DD)")
    p.add_argument("--end", default=None, help="last day of the fit window (YYYY-MM-DD)")
    p.add_argument("--projection-end", default=None, help="last projected day (YYYY-MM-DD)")
    p.add_argument("--rounds", type=int, default=defaults.rounds)
    p.add_argument("--ceiling", type=float, default=defaults.population_ceiling,
                   help="upper bound for the effective population")
    p.add_argument("--center-fraction", type=float, default=defaults.default_center_fraction)
    p.add_argument("--asymptomatic", type=float, nargs="*", default=list(defaults.asymptomatic_fractions))
    p.add_argument("--workers", type=int, default=defaults.workers)
    p.add_argument("--grid", type=float, nargs=3, metavar=("START", "STOP", "STEP"),
                   default=[defaults.multiplier_start, defaults.multiplier_stop, defaults.multiplier_step],
                   help="population multiplier grid")
    p.add_argument("--plot", action="store_true", help="show fit and scenario figures")
    p.add_argument("-v", "--verbose", action="count", default=0)
    return p


def config_from_args(args: argparse.Namespace) -> FitConfig:
    return replace(
        FitConfig(),
        start_date=args.start,
        end_date=args.end,
        projection_end=args.projection_end,
        rounds=args.rounds,
        population_ceiling=args.ceiling,
        default_center_fraction=args.center_fraction,
        asymptomatic_fractions=tuple(args.asymptomatic),
        workers=args.workers,
        multiplier_start=args.grid[0],
        multiplier_stop=args.grid[1],
        multiplier_step=args.grid[2],
    )


def format_report(analysis: AnalysisResult) -> str:
    fit = analysis.fit
    lines = [
        f"beta            {fit.params.beta:.5f}",
        f"gamma           {fit.params.gamma:.5f}",
        f"R0              {fit.R0:.3f}",
        f"recovery days   {fit.recovery_days:.1f}",
        f"population N    {fit.population:,.0f}",
        f"loss            {fit.loss:.6g}",
        f"converged       {fit.converged} ({fit.message})",
    ]
    if fit.clamp_count:
        lines.append(f"ceiling clamps  {fit.clamp_count}")
    for res in [analysis.baseline] + analysis.scenarios:
        lines.append(
            f"p={res.asymptomatic_fraction:.2f}  peak active {res.peak_active:,.0f} "
            f"on {res.peak_active_date.date()}, peak total on {res.peak_total_date.date()}"
        )
    for series, stats in analysis.statistics.items():
        lines.append(f"{series:<8} R2={stats['R2']:.4f} RMSE={stats['RMSE']:.1f} MAPE={stats['MAPE']:.2f}%")
    return "\n".join(lines)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    table = load_case_table(args.data, date_col=args.date_col,
                            confirmed_col=args.confirmed_col,
                            recovered_col=args.recovered_col,
                            deaths_col=args.deaths_col,
                            location=args.location,
                            location_col=args.location_col)
    analysis = run_analysis(table, config_from_args(args))
    print(format_report(analysis))

    if args.plot:
        import matplotlib.pyplot as plt
        from sirfit.utils.plotting import plot_projection, plot_scenarios
        plot_projection(analysis.baseline)
        plot_scenarios([analysis.baseline] + analysis.scenarios)
        plt.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
