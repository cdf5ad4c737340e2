# src/gini_report/gap_fill.py
from __future__ import annotations
from typing import List, Optional, Sequence
import pandas as pd

DEFAULT_WINDOW = 5


def _is_absent(v) -> bool:
    return v is None or bool(pd.isna(v))


def _check_window(window: int) -> None:
    if window < 0:
        raise ValueError(f"window must be >= 0, got {window}")


def forward_fill(series: Sequence[Optional[float]], window: int = DEFAULT_WINDOW) -> List[Optional[float]]:
    """
    Left-to-right pass: each present value is copied into at most `window`
    absent slots after it. Copies never act as sources themselves.
    """
    _check_window(window)
    out: List[Optional[float]] = []
    last, steps = None, 0
    for v in series:
        if not _is_absent(v):
            last, steps = v, window
            out.append(v)
        elif steps > 0:
            out.append(last)
            steps -= 1
        else:
            out.append(None)
    return out


def backward_fill(series: Sequence[Optional[float]], window: int = DEFAULT_WINDOW) -> List[Optional[float]]:
    """Right-to-left mirror of `forward_fill`."""
    return forward_fill(list(series)[::-1], window=window)[::-1]


def fill(series: Sequence[Optional[float]], window: int = DEFAULT_WINDOW) -> List[Optional[float]]:
    """
    Repair a year-indexed series: forward pass first, then a backward pass over
    its result. The backward pass only writes slots the forward pass left
    absent, so the output never alters a present value and keeps the length.

    >>> fill([5, None, None, None, None, None, None, 9])
    [5, 5, 5, 5, 5, 5, 9, 9]
    """
    return backward_fill(forward_fill(series, window=window), window=window)


def fill_series(s: pd.Series, window: int = DEFAULT_WINDOW) -> pd.Series:
    """`fill` for a pandas Series; index and name are kept, NaN marks absent."""
    filled = fill(s.tolist(), window=window)
    return pd.Series(filled, index=s.index, name=s.name, dtype="float64")


def fill_by_group(
    df: pd.DataFrame,
    group_col: str,
    value_cols: Sequence[str],
    window: int = DEFAULT_WINDOW,
) -> pd.DataFrame:
    """
    Apply `fill_series` to each of `value_cols` within every `group_col`
    partition. Rows are expected to be sorted by year inside each group;
    the returned frame keeps the input's row order and index.
    """
    miss = set(value_cols) - set(df.columns)
    if group_col not in df.columns:
        miss.add(group_col)
    if miss:
        raise ValueError(f"frame is missing columns: {sorted(miss)}")

    out = df.copy()
    if out.empty:
        return out
    for col in value_cols:
        out[col] = (out.groupby(group_col, sort=False, group_keys=False)[col]
                       .transform(lambda s: fill_series(s, window=window)))
    return out
