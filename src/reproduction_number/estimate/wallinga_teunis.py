# src/reproduction_number/estimate/wallinga_teunis.py
"""
Wallinga-Teunis estimate of the effective reproduction number R_t.

Pipeline: discretize serial interval -> build weight matrix ->
reweight rows by expected infections -> sum columns weighted by cases.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import numpy as np
import pandas as pd

from .serial_interval import compute_serial_interval
from .weight_matrix import build_weight_matrix
from .normalize import reweight_matrix
from .reduce import column_estimates

# Start logger
logger = logging.getLogger(__name__)


@dataclass
class EstimatorConfig:
    mean_serial: float = 3.96
    std_serial: float = 4.75
    k_max: int = 18
    family: str = "normal"
    tail_tolerance: float = 0.01
    strict_tail: bool = False


def validate_cases(cases) -> np.ndarray:
    """Return cases as a float array, rejecting non-numeric, non-finite or negative counts."""
    try:
        arr = np.asarray(cases, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Case counts must be numeric: {exc}") from exc
    if arr.ndim != 1:
        raise ValueError("cases must be a 1D sequence of counts")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Case counts must be finite (found NaN or inf)")
    if np.any(arr < 0):
        raise ValueError("Case counts must be >= 0")
    return arr


def boundary_mask(n: int, k: int) -> np.ndarray:
    """True where an estimate is away from both edges by at least k days."""
    idx = np.arange(n)
    return (idx >= k) & (idx < n - k)


def wallinga_teunis(dates, cases, w) -> np.ndarray:
    """R_t for every day in the series, given serial interval weights w.

    Returns an array aligned with `cases`. The first and last len(w)
    values are biased by the edges of the series; see boundary_mask.
    """
    c = validate_cases(cases)
    if len(dates) != c.size:
        raise ValueError(f"Got {len(dates)} dates for {c.size} case counts")

    weights = build_weight_matrix(dates, w)
    probabilities = reweight_matrix(weights, c)
    return column_estimates(probabilities, c)


def estimate_reproduction_number(frame: pd.DataFrame, config: Optional[EstimatorConfig] = None) -> pd.DataFrame:
    """Estimate R_t for a case series.

    Parameters
    ----------
    frame :
        DataFrame with a `date` column and a `cases` column, one row per day.
    config :
        Serial interval and truncation settings (defaults to EstimatorConfig()).

    Returns
    -------
    DataFrame with columns date, cases, R_t and reliable, in input order.
    `reliable` is False for the first and last k_max days.
    """
    if config is None:
        config = EstimatorConfig()
    missing = [c for c in ("date", "cases") if c not in frame.columns]
    if missing:
        raise ValueError(f"Case series is missing columns: {missing}")

    w = compute_serial_interval(
        mean=float(config.mean_serial),
        std=float(config.std_serial),
        k_max=config.k_max,
        family=config.family,
        tail_tolerance=float(config.tail_tolerance),
        strict=bool(config.strict_tail),
    )

    dates = frame["date"].to_numpy()
    cases = validate_cases(frame["cases"].to_numpy())
    r_t = wallinga_teunis(dates, cases, w)

    out = pd.DataFrame({
        "date": frame["date"].to_numpy(),
        "cases": cases,
        "R_t": r_t,
        "reliable": boundary_mask(len(r_t), int(config.k_max)),
    })
    n_reliable = int(out["reliable"].sum())
    if n_reliable == 0:
        logger.warning("Series of %d days is too short for k_max=%d; no estimate is reliable",
                       len(out), config.k_max)
    logger.info("Estimated R_t for %d days (%d reliable)", len(out), n_reliable)
    return out


def summarize_estimates(estimates: pd.DataFrame) -> Optional[float]:
    """Mean R_t over the reliable window only, None if there is none."""
    reliable = estimates.loc[estimates["reliable"].astype(bool), "R_t"]
    if reliable.empty:
        return None
    return float(reliable.mean())
