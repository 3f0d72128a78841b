# src/reproduction_number/estimate/reduce.py
import numpy as np


def column_estimates(probabilities, cases) -> np.ndarray:
    """R_t for each column t: sum_i probabilities[i, t] * cases[i]."""
    P = np.asarray(probabilities, dtype=float)
    c = np.asarray(cases, dtype=float)
    if P.ndim != 2 or c.ndim != 1 or P.shape[0] != c.size:
        raise ValueError(f"cases has length {c.size}, probabilities is {P.shape}")
    # scale row i by cases[i] and sum down the columns
    return (P * c[:, None]).sum(axis=0)
