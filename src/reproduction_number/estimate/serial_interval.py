# src/reproduction_number/estimate/serial_interval.py
# This will compute discrete-time serial interval weights w_1..w_k
# from a continuous distribution g(u) by differencing its CDF
from functools import lru_cache
import logging
import numbers

import numpy as np
from scipy.stats import gamma, norm

logger = logging.getLogger(__name__)

FAMILIES = ("normal", "gamma")


def continuous_distribution(mean, std, family="normal"):
    """Frozen scipy distribution for the serial interval."""
    if family == "normal":
        return norm(loc=mean, scale=std)
    if family == "gamma":
        # Method of moments: shape (mean/std)^2, scale std^2/mean
        alpha = (mean / std) ** 2
        theta = std ** 2 / mean
        return gamma(a=alpha, scale=theta)
    raise ValueError(f"Unknown serial interval family: {family}")


def truncated_tail_fraction(mean, std, k_max, family="normal"):
    """Fraction of the positive-lag mass that falls beyond lag k_max."""
    g = continuous_distribution(mean, std, family)
    positive = float(g.sf(0.0))
    if positive <= 0.0:
        return 1.0
    return float(g.sf(k_max)) / positive


@lru_cache(maxsize=64)
def discretize_serial_interval(mean, std, k_max, family="normal"):
    """CDF differences on lags 1..k_max, renormalised to sum to one.

    Cached on the parameters, so the returned array is read-only.
    """
    g = continuous_distribution(mean, std, family)

    # CDF evaluated on the lag grid 0, 1, ..., k_max
    cdf = g.cdf(np.arange(k_max + 1, dtype=float))
    w = np.diff(cdf)

    total = float(w.sum())
    if not np.isfinite(total) or total <= 0:
        raise RuntimeError(
            f"Serial interval has no mass on lags 1..{k_max} "
            f"(mean={mean}, std={std}, family={family})"
        )

    # Normalize w so that they sum to 1
    w = w / total
    w.setflags(write=False)
    logger.debug("Computed serial interval (k_max=%d, family=%s)", k_max, family)
    return w


def compute_serial_interval(mean, std, k_max, family="normal", tail_tolerance=0.01, strict=False):
    """Calculates daily serial interval weights
    For lag = 1..k_max the weight is CDF(lag) - CDF(lag - 1); the weights are
    then renormalised so that the mass lost outside [0, k_max] is spread back
    over the support.
    Args:
        mean (float): mean of the serial interval in days
        std (float): standard deviation of the serial interval in days
        k_max (int): truncation length, the largest lag with nonzero weight
        family (str): "normal" or "gamma"
        tail_tolerance (float): largest acceptable fraction of mass beyond k_max
        strict (bool): raise instead of warning when tail_tolerance is exceeded
    Returns:
        w (nparray(k_max,)): read-only array with weights that sum to one
    Raises:
        ValueError, RuntimeError
    """
    if isinstance(k_max, bool) or not isinstance(k_max, numbers.Integral):
        raise ValueError("k_max must be an integer")
    if k_max < 1:
        raise ValueError("k_max must be >= 1")
    if family not in FAMILIES:
        raise ValueError(f"family must be one of {FAMILIES}, got {family!r}")
    if not np.isfinite(mean) or not np.isfinite(std):
        raise ValueError("Mean and std must be finite")
    if std <= 0:
        raise ValueError("std must be > 0")
    if family == "gamma" and mean <= 0:
        raise ValueError("A gamma serial interval needs mean > 0")

    w = discretize_serial_interval(mean, std, int(k_max), family)

    # Checked on every call, not just the first one that fills the cache
    tail = truncated_tail_fraction(mean, std, k_max, family)
    if tail > tail_tolerance:
        msg = (f"Serial interval truncated at k_max={k_max} drops {tail:.2%} of its mass "
               f"(tolerance {tail_tolerance:.2%})")
        if strict:
            raise ValueError(msg)
        logger.warning(msg)
    return w
