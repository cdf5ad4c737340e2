import logging
import pandas as pd

from .data_prep import GINI_COLS

logger = logging.getLogger(__name__)


def snapshot(df: pd.DataFrame, year: int = 2020) -> pd.DataFrame:
    # one row per country for `year`, both Gini values and a continent required
    snap = df.loc[df["year"] == year].dropna(subset=GINI_COLS + ["continent"])
    logger.info("Snapshot %d: %d countries", year, len(snap))
    return snap.sort_values("entity").reset_index(drop=True)


def redistribution(snap: pd.DataFrame) -> pd.DataFrame:
    out = snap.copy()
    out["gini_reduction"] = out["gini_pretax"] - out["gini_posttax"]
    # pre-tax Gini of 0 has no meaningful relative reduction
    out["gini_reduction_pct"] = 100 * out["gini_reduction"] / out["gini_pretax"].where(out["gini_pretax"] != 0)
    return out


def continent_summary(snap: pd.DataFrame) -> pd.DataFrame:
    snap = snap if "gini_reduction" in snap.columns else redistribution(snap)
    agg = snap.groupby("continent").agg(
        countries=("entity", "nunique"),
        mean_pretax=("gini_pretax", "mean"),
        mean_posttax=("gini_posttax", "mean"),
        mean_reduction=("gini_reduction", "mean"),
    ).reset_index()
    return agg.sort_values("mean_reduction", ascending=False).reset_index(drop=True)


def coverage_report(before: pd.DataFrame, after: pd.DataFrame) -> pd.DataFrame:
    """Present-value counts per Gini column before and after gap filling."""
    rows = []
    for c in GINI_COLS:
        n_before = int(before[c].notna().sum())
        n_after = int(after[c].notna().sum())
        rows.append({"metric": c, "present_before": n_before,
                     "present_after": n_after, "filled": n_after - n_before})
    return pd.DataFrame(rows)
