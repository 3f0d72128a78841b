#!/usr/bin/env python3
# src/reproduction_number/runner.py — CLI for estimating and plotting R_t

import argparse
import logging
import time
from pathlib import Path

from .data.case_series import load_case_series
from .estimate.wallinga_teunis import (
    EstimatorConfig,
    estimate_reproduction_number,
    summarize_estimates,
)
from .plotting import plot_rt

logger = logging.getLogger(__name__)


def add_series_args(p):
    p.add_argument("--csv", required=True, metavar="PATH",
                   help="Case data CSV, local path or URL")
    p.add_argument("--date-col", default="date", metavar="COL",
                   help="Date column name (default: date)")
    p.add_argument("--cases-col", default="cases", metavar="COL",
                   help="Case count column name (default: cases)")
    p.add_argument("--cumulative", action="store_true",
                   help="Case column holds cumulative totals; difference into daily counts")
    p.add_argument("--smooth", type=int, default=None, metavar="DAYS",
                   help="Centred rolling mean window (default: off)")


def add_estimator_args(p):
    p.add_argument("--mean", type=float, default=3.96,
                   help="Serial interval mean in days (default: 3.96)")
    p.add_argument("--std", type=float, default=4.75,
                   help="Serial interval standard deviation in days (default: 4.75)")
    p.add_argument("--k-max", type=int, default=18, metavar="K",
                   help="Serial interval truncation length in days (default: 18)")
    p.add_argument("--family", choices=["normal", "gamma"], default="normal",
                   help="Continuous serial interval family (default: normal)")
    p.add_argument("--tail-tolerance", type=float, default=0.01,
                   help="Largest acceptable serial interval mass beyond K (default: 0.01)")
    p.add_argument("--strict-tail", action="store_true",
                   help="Fail instead of warning when the tail tolerance is exceeded")


def build_parser():
    p = argparse.ArgumentParser(description="Wallinga-Teunis reproduction number estimates")
    sub = p.add_subparsers(dest="cmd", required=True)

    # ---------- estimate ----------
    est_p = sub.add_parser("estimate", help="Estimate R_t and write it as CSV")
    add_series_args(est_p)
    add_estimator_args(est_p)
    est_p.add_argument("--out", default=None, metavar="PATH",
                       help="Output CSV path (default: print the first rows)")

    # ---------- plot ----------
    plot_p = sub.add_parser("plot", help="Plot daily cases and R_t")
    add_series_args(plot_p)
    add_estimator_args(plot_p)
    plot_p.add_argument("--out-cases", default="figs/daily_cases.png", metavar="PNG")
    plot_p.add_argument("--out-rt", default="figs/reproduction_number.png", metavar="PNG")
    return p


def config_from_args(args) -> EstimatorConfig:
    return EstimatorConfig(
        mean_serial=args.mean,
        std_serial=args.std,
        k_max=args.k_max,
        family=args.family,
        tail_tolerance=args.tail_tolerance,
        strict_tail=args.strict_tail,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    t0 = time.perf_counter()

    frame = load_case_series(
        args.csv,
        date_col=args.date_col,
        cases_col=args.cases_col,
        cumulative=args.cumulative,
        smooth=args.smooth,
    )
    logger.info("Loaded %d days of cases from %s", len(frame), args.csv)
    estimates = estimate_reproduction_number(frame, config_from_args(args))
    average = summarize_estimates(estimates)

    if args.cmd == "estimate":
        if args.out:
            out = Path(args.out)
            out.parent.mkdir(parents=True, exist_ok=True)
            estimates.to_csv(out, index=False)
            print("Estimates ->", out)
        else:
            print(estimates.head(10).to_string(index=False))

    elif args.cmd == "plot":
        plot_rt.plot_cases(frame, save_path=args.out_cases)
        plot_rt.plot_estimates(estimates, save_path=args.out_rt)
        print("Plots ->", args.out_cases, args.out_rt)

    if average is None:
        print("Mean R_t: n/a (series shorter than 2 * k_max)")
    else:
        print(f"Mean R_t over reliable days: {average:.3f}")
    print(f"Done in {time.perf_counter() - t0:.2f}s")


def cli(argv=None):
    logging.basicConfig(level=logging.INFO)
    try:
        main(argv)
    except Exception:
        logger.exception("Estimation failed")
        raise


if __name__ == "__main__":
    cli()
