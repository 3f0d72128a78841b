# src/reproduction_number/plotting/plot_rt.py
from pathlib import Path
from typing import Tuple
import logging

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.dates as mdates

logger = logging.getLogger(__name__)


def _save(fig, save_path: str) -> Path:
    out = Path(save_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out, dpi=150)
    plt.close(fig)
    logger.info("Figure written to: %s", out)
    return out


def plot_cases(
    frame: pd.DataFrame,
    save_path: str = "figs/daily_cases.png",
    title: str = "Daily reported cases",
    figsize: Tuple[int, int] = (10, 5),
) -> Path:
    """Bar chart of daily case counts."""
    if frame.empty:
        raise ValueError("Nothing to plot: case series is empty")
    fig, ax = plt.subplots(figsize=figsize)
    ax.bar(pd.to_datetime(frame["date"]), frame["cases"].to_numpy(dtype=float),
           width=0.8, color="tab:blue", alpha=0.8)
    ax.set_xlabel("Date")
    ax.set_ylabel("Cases")
    ax.set_title(title)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y-%m-%d"))
    fig.autofmt_xdate()
    ax.grid(axis="y", alpha=0.3)
    fig.tight_layout()
    return _save(fig, save_path)


def plot_estimates(
    estimates: pd.DataFrame,
    save_path: str = "figs/reproduction_number.png",
    title: str = "Effective reproduction number (Wallinga-Teunis)",
    figsize: Tuple[int, int] = (10, 5),
) -> Path:
    """
    R_t over time:
    - reliable estimates as a solid line with markers
    - boundary estimates (first/last k days) greyed out
    - dashed reference line at R = 1
    """
    if estimates.empty:
        raise ValueError("Nothing to plot: estimate series is empty")
    dates = pd.to_datetime(estimates["date"])
    r_t = estimates["R_t"].to_numpy(dtype=float)
    reliable = estimates["reliable"].to_numpy(dtype=bool)

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(dates, np.where(reliable, np.nan, r_t), color="0.6", marker="o", ms=3,
            lw=1, ls=":", label="edge (unreliable)")
    ax.plot(dates, np.where(reliable, r_t, np.nan), color="tab:red", marker="o", ms=3,
            lw=1.5, label="R_t")
    ax.axhline(1.0, color="k", ls="--", lw=1)
    if reliable.any():
        ax.axvspan(dates[reliable].min(), dates[reliable].max(), color="tab:red", alpha=0.05)
    ax.set_xlabel("Date")
    ax.set_ylabel("R_t")
    ax.set_title(title)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y-%m-%d"))
    fig.autofmt_xdate()
    ax.legend(loc="upper right")
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return _save(fig, save_path)
