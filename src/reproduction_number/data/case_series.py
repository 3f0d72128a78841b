# src/reproduction_number/data/case_series.py
from pathlib import Path
from typing import Optional
import logging

import pandas as pd

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return str(source).startswith(("http://", "https://", "ftp://"))


def tidy_case_series(
    df: pd.DataFrame,
    date_col: str = "date",
    cases_col: str = "cases",
    cumulative: bool = False,
    fill_missing: bool = True,
    smooth: Optional[int] = None,
) -> pd.DataFrame:
    """
    Reduce a raw table to a daily case series with columns `date` and `cases`.

    - rows are sorted by date and duplicate dates summed
    - cumulative totals are differenced into daily counts (negative
      differences from backfills are clipped at 0)
    - missing days are filled with 0 cases when fill_missing is True
    - smooth > 1 applies a centred rolling mean
    """
    missing = [c for c in (date_col, cases_col) if c not in df.columns]
    if missing:
        raise ValueError(f"Columns not found in case data: {missing}")

    sub = df[[date_col, cases_col]].rename(columns={date_col: "date", cases_col: "cases"}).copy()
    sub["date"] = pd.to_datetime(sub["date"]).dt.normalize()
    sub["cases"] = pd.to_numeric(sub["cases"], errors="raise").astype(float)
    blank = sub["cases"].isna()
    if blank.any():
        days = sub.loc[blank, "date"].dt.strftime("%Y-%m-%d").tolist()
        raise ValueError(f"Missing case counts on: {days}")

    daily = sub.groupby("date", sort=True)["cases"].sum()

    if cumulative:
        first = daily.iloc[0] if len(daily) else 0.0
        daily = daily.diff().fillna(first)
        n_neg = int((daily < 0).sum())
        if n_neg:
            logger.warning("Clipped %d negative daily differences to 0", n_neg)
        daily = daily.clip(lower=0)

    if fill_missing and len(daily):
        full_index = pd.date_range(daily.index.min(), daily.index.max(), freq="D")
        n_filled = len(full_index) - len(daily)
        if n_filled:
            logger.info("Filled %d missing day(s) with zero cases", n_filled)
        daily = daily.reindex(full_index, fill_value=0.0)

    if smooth and smooth > 1:
        daily = daily.rolling(smooth, center=True, min_periods=1).mean()

    out = daily.rename("cases").rename_axis("date").reset_index()
    return out


def load_case_series(
    source,
    date_col: str = "date",
    cases_col: str = "cases",
    cumulative: bool = False,
    fill_missing: bool = True,
    smooth: Optional[int] = None,
) -> pd.DataFrame:
    """Read a CSV (local path or URL) and return a tidy daily case series."""
    if not _is_url(source):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Case data not found: {source}")
        source = path
    df = pd.read_csv(source)
    logger.debug("Read %d rows from %s", len(df), source)
    return tidy_case_series(
        df,
        date_col=date_col,
        cases_col=cases_col,
        cumulative=cumulative,
        fill_missing=fill_missing,
        smooth=smooth,
    )
