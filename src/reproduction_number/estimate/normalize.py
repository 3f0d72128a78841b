# src/reproduction_number/estimate/normalize.py
import numpy as np


def reweight_matrix(weights, cases) -> np.ndarray:
    """Turn serial interval weights into infector probabilities.

    Each row i is divided by sum_j weights[i, j] * cases[j], the expected
    infections behind day i. Rows where that is zero carry no transmission
    and come back as zeros, never NaN.
    """
    W = np.asarray(weights, dtype=float)
    c = np.asarray(cases, dtype=float)
    if W.ndim != 2 or W.shape[0] != W.shape[1]:
        raise ValueError("weights must be a square matrix")
    if c.ndim != 1 or c.size != W.shape[0]:
        raise ValueError(f"cases has length {c.size}, weights is {W.shape}")

    row_sums = W @ c
    out = np.zeros_like(W)
    nonzero = row_sums != 0
    out[nonzero] = W[nonzero] / row_sums[nonzero, None]
    return out
