# src/reproduction_number/estimate/weight_matrix.py
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def as_day_numbers(dates) -> np.ndarray:
    """Convert dates to integer day numbers.

    Plain integers are taken to already be day indices; anything else goes
    through pandas and is floored to whole days.
    """
    arr = np.asarray(dates)
    if arr.ndim != 1:
        raise ValueError("dates must be a 1D sequence")
    if arr.size and np.issubdtype(arr.dtype, np.integer):
        return arr.astype(np.int64)
    days = pd.to_datetime(arr).to_numpy().astype("datetime64[D]")
    return days.astype(np.int64)


def check_increasing(days: np.ndarray):
    """Raise unless day numbers are strictly increasing; log any gaps."""
    if days.size < 2:
        return
    steps = np.diff(days)
    if np.any(steps <= 0):
        raise ValueError("dates must be strictly increasing with no duplicates")
    n_gaps = int(np.count_nonzero(steps > 1))
    if n_gaps:
        logger.warning("Case series has %d gap(s) between consecutive dates", n_gaps)


def build_weight_matrix(dates, w) -> np.ndarray:
    """Pairwise transmission weights between reporting days.

    Entry (i, j) is the serial interval weight for lag date[i] - date[j],
    i.e. how likely a case on day j is to have infected a case on day i.
    Lags <= 0 or beyond len(w) get 0, and row 0 is always zero since
    nothing precedes the first observation.

    Parameters
    ----------
    dates :
        Strictly increasing dates (or integer day indices), length T.
    w :
        Serial interval weights w_1..w_k.

    Returns
    -------
    np.ndarray of shape (T, T)
    """
    w_arr = np.asarray(w, dtype=float)
    if w_arr.ndim != 1 or w_arr.size == 0:
        raise ValueError("w must be a non-empty 1D sequence of weights")
    k_support = w_arr.size

    days = as_day_numbers(dates)
    check_increasing(days)

    # lags[i, j] = date[i] - date[j]
    lags = days[:, None] - days[None, :]
    valid = (lags > 0) & (lags <= k_support)

    matrix = np.zeros(lags.shape, dtype=float)
    matrix[valid] = w_arr[lags[valid] - 1]
    if matrix.shape[0]:
        matrix[0, :] = 0.0

    logger.debug("Built weight matrix %s with %d nonzero entries", matrix.shape, int(valid.sum()))
    return matrix
