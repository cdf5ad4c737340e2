# src/gini_report/data_prep.py
from __future__ import annotations
import logging
from typing import Dict, Optional
import numpy as np
import pandas as pd

from .config import DEFAULT_COLUMNS
from .gap_fill import DEFAULT_WINDOW, fill_by_group

logger = logging.getLogger(__name__)

GINI_COLS = ["gini_pretax", "gini_posttax"]


def normalize_name(s: str) -> str:
    return " ".join(str(s).strip().lower().split())


def load_gini(path: str, columns: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """
    Load the Gini CSV and rename its columns to the canonical names:
      entity, code, year, gini_pretax, gini_posttax, population, continent
    (matched case/whitespace-insensitively against `columns`).
    """
    columns = columns or DEFAULT_COLUMNS
    df = pd.read_csv(path)
    found = {normalize_name(c): c for c in df.columns}
    missing = [canon for canon, raw in columns.items() if normalize_name(raw) not in found]
    if missing:
        raise ValueError(f"CSV is missing required columns: {missing}. Found: {list(df.columns)}")

    df = df.rename(columns={found[normalize_name(raw)]: canon for canon, raw in columns.items()})
    df = df[list(columns)].copy()

    # numeric coercion: bad cells become NaN instead of crashing
    df["year"] = pd.to_numeric(df["year"], errors="coerce")
    df = df.dropna(subset=["entity", "year"]).copy()
    df["year"] = df["year"].astype(int)
    for c in GINI_COLS + ["population"]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    df["continent"] = df["continent"].map(lambda x: (x.strip() or np.nan) if isinstance(x, str) else x)

    logger.info("Loaded %s: %d rows, %d entities", path, len(df), df["entity"].nunique())
    return df


def exclude_aggregates(df: pd.DataFrame) -> pd.DataFrame:
    """Drop regional / income-group aggregates (no ISO code, or an OWID_ code)."""
    code = df["code"].astype("string")
    keep = code.notna() & ~code.str.startswith("OWID_", na=False)
    dropped = df.loc[~keep, "entity"].nunique()
    if dropped:
        logger.debug("Excluding %d aggregate entities", dropped)
    return df.loc[keep].copy()


def complete_years(df: pd.DataFrame) -> pd.DataFrame:
    """
    Reindex every entity onto the same contiguous run of years (the frame-wide
    min..max) so that one row is one year and a value reported near either
    end of an entity's history can still be carried past it. Inserted rows
    carry entity and code; every other column is NaN.
    """
    dup = df.duplicated(subset=["entity", "year"])
    if dup.any():
        sample = df.loc[dup, ["entity", "year"]].head(5).values.tolist()
        raise ValueError(f"Duplicate entity/year rows, e.g. {sample}")
    if df.empty:
        return df.copy()

    years = pd.RangeIndex(df["year"].min(), df["year"].max() + 1, name="year")
    parts = []
    for entity, sub in df.groupby("entity", sort=True):
        sub = sub.set_index("year").sort_index()
        sub = sub.reindex(years)
        sub["entity"] = entity
        sub["code"] = sub["code"].ffill().bfill()
        parts.append(sub.reset_index())

    out = pd.concat(parts, ignore_index=True)[list(df.columns)]
    added = len(out) - len(df)
    if added:
        logger.debug("Inserted %d missing year rows", added)
    return out


def fill_continent(df: pd.DataFrame) -> pd.DataFrame:
    # continent is only reported for one reference year; spread it with no limit
    out = df.copy()
    out["continent"] = (out.groupby("entity", sort=False)["continent"]
                           .transform(lambda s: s.ffill().bfill()))
    return out


def fill_gini_gaps(df: pd.DataFrame, window: int = DEFAULT_WINDOW) -> pd.DataFrame:
    out = df.sort_values(["entity", "year"]).reset_index(drop=True)
    return fill_by_group(out, "entity", GINI_COLS, window=window)


def drop_empty_rows(df: pd.DataFrame) -> pd.DataFrame:
    keep = df[GINI_COLS].notna().any(axis=1)
    logger.info("Dropping %d rows without any Gini value", int((~keep).sum()))
    return df.loc[keep].reset_index(drop=True)


def prepare(df: pd.DataFrame, window: int = DEFAULT_WINDOW) -> pd.DataFrame:
    """
    Full cleaning step:
      sort -> contiguous years -> continent spread -> windowed Gini fill
      -> drop rows with neither Gini value
    """
    out = df.sort_values(["entity", "year"]).reset_index(drop=True)
    out = complete_years(out)
    out = fill_continent(out)
    out = fill_gini_gaps(out, window=window)
    return drop_empty_rows(out)
