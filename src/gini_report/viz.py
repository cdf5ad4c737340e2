from __future__ import annotations
import logging
import os
import textwrap
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib import font_manager
from matplotlib.lines import Line2D

from .metrics import redistribution

logger = logging.getLogger(__name__)

PRETAX_COLOR = "#B13507"
POSTTAX_COLOR = "#2C8465"
STEM_COLOR = "#A2A2A2"
SORT_KEYS = ("gini_pretax", "gini_posttax", "gini_reduction")


def _ensure_dir(p: Optional[str]) -> None:
    if p:
        d = os.path.dirname(p)
        if d and not os.path.exists(d):
            os.makedirs(d, exist_ok=True)

def _wrap(s: str, width: int) -> str:
    s = (s or "").strip()
    return "\n".join(textwrap.wrap(s, width=width)) if s else ""

def _require(df: pd.DataFrame, need: set, name: str = "snapshot") -> None:
    miss = need - set(df.columns)
    if miss:
        raise ValueError(f"'{name}' is missing columns: {sorted(miss)}")
    if df.empty:
        raise ValueError(f"'{name}' is empty; nothing to plot.")

def _finish(fig: plt.Figure, out_path: Optional[str], show: bool, dpi: int) -> Optional[str]:
    saved = None
    if out_path:
        out_path = str(out_path)
        _ensure_dir(out_path)
        fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
        saved = out_path
        logger.info("Saved %s", out_path)
    if show:
        plt.show()
    else:
        plt.close(fig)
    return saved


def register_fonts(font_dir: Optional[str | Path]) -> List[str]:
    """
    Register every .ttf/.otf under `font_dir` with matplotlib and make the
    first family found the default. Returns the family names registered.
    """
    if not font_dir:
        return []
    font_dir = Path(font_dir)
    if not font_dir.is_dir():
        logger.warning("Font directory not found: %s; using matplotlib defaults", font_dir)
        return []

    families: List[str] = []
    for path in sorted(font_dir.rglob("*")):
        if path.suffix.lower() not in (".ttf", ".otf"):
            continue
        font_manager.fontManager.addfont(str(path))
        name = font_manager.FontProperties(fname=str(path)).get_name()
        if name not in families:
            families.append(name)

    if families:
        plt.rcParams["font.family"] = families[0]
        logger.debug("Registered font families: %s", families)
    return families


def sample_labels(entities: Iterable[str], n: int, seed: int = 42) -> List[str]:
    """Seeded random subset of entity names to annotate; all of them if n >= count."""
    uniq = sorted(set(entities))
    if n >= len(uniq):
        return uniq
    if n <= 0:
        return []
    rng = np.random.default_rng(seed)
    return sorted(rng.choice(uniq, size=n, replace=False).tolist())


def continent_colors(continents: Iterable[str]) -> dict:
    colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    return {c: colors[i % len(colors)] for i, c in enumerate(sorted(set(continents)))}


def plot_gini_scatter(
    snap: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    year: Optional[int] = None,
    label_count: int = 25,
    seed: int = 42,
    pop_scale: float = 1e-6,   # marker area in pt^2 per person
    min_size: float = 12.0,
    dpi: int = 150,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """
    Pre-tax (x) vs post-tax (y) Gini, one bubble per country:
      colour = continent, area ~ population, dashed y = x line.
    Points below the line are countries whose taxes and transfers reduce
    inequality. A seeded random subset of countries is labelled.
    """
    _require(snap, {"entity", "continent", "gini_pretax", "gini_posttax"})

    x = snap["gini_pretax"].to_numpy(dtype=float)
    y = snap["gini_posttax"].to_numpy(dtype=float)
    if "population" in snap.columns:
        pop = snap["population"].to_numpy(dtype=float)
        sizes = np.maximum(np.nan_to_num(pop * pop_scale, nan=0.0), min_size)
    else:
        sizes = np.full(len(snap), min_size * 3)

    color_map = continent_colors(snap["continent"])
    colors = snap["continent"].map(color_map).tolist()

    fig, ax = plt.subplots(figsize=(10, 8))
    ax.scatter(x, y, s=sizes, c=colors, alpha=0.7, linewidths=0.5, edgecolors="white", zorder=3)

    # y = x reference across the shared data range
    lo = float(np.nanmin(np.concatenate([x, y])))
    hi = float(np.nanmax(np.concatenate([x, y])))
    pad = 0.05 * (hi - lo or 1.0)
    ax.plot([lo - pad, hi + pad], [lo - pad, hi + pad], "--", color=STEM_COLOR, lw=1, zorder=1)
    ax.text(hi + pad, hi + pad, "no redistribution", ha="right", va="bottom",
            fontsize=8, color=STEM_COLOR)
    ax.set_xlim(lo - pad, hi + pad)
    ax.set_ylim(lo - pad, hi + pad)

    labelled = set(sample_labels(snap["entity"], label_count, seed=seed))
    for _, row in snap.loc[snap["entity"].isin(labelled)].iterrows():
        ax.annotate(_wrap(row["entity"], 18), xy=(row["gini_pretax"], row["gini_posttax"]),
                    xytext=(0, 5), textcoords="offset points", ha="center", va="bottom", fontsize=7)

    handles = [Line2D([0], [0], marker="o", lw=0, markersize=8, alpha=0.7,
                      markerfacecolor=col, markeredgewidth=0, label=cont)
               for cont, col in color_map.items()]
    ax.legend(handles=handles, title="Continent", loc="upper left", frameon=False, fontsize=9)

    suffix = f" ({year})" if year is not None else ""
    ax.set_title(f"Income inequality before and after taxes{suffix}", loc="left")
    ax.set_xlabel("Gini coefficient before tax")
    ax.set_ylabel("Gini coefficient after tax")
    ax.spines[["top", "right"]].set_visible(False)
    fig.tight_layout()

    saved = _finish(fig, out_path, show, dpi)
    return fig, ax, saved


def plot_gini_lollipop(
    snap: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    year: Optional[int] = None,
    sort_by: str = "gini_pretax",
    top_n: Optional[int] = None,
    dpi: int = 150,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """
    One row per country: a stem from the post-tax to the pre-tax Gini with a
    marker at each end. Rows sorted by `sort_by` (largest at the top) and
    optionally cut to the first `top_n`.
    """
    _require(snap, {"entity", "gini_pretax", "gini_posttax"})
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {SORT_KEYS}, got {sort_by!r}")

    data = snap if "gini_reduction" in snap.columns else redistribution(snap)
    data = data.sort_values(sort_by, ascending=False)
    if top_n:
        data = data.head(top_n)
    data = data.iloc[::-1].reset_index(drop=True)  # barh-style: first row on top

    ypos = np.arange(len(data))
    fig_h = max(4.0, 0.22 * len(data) + 1.5)
    fig, ax = plt.subplots(figsize=(9, fig_h))

    ax.hlines(ypos, data["gini_posttax"], data["gini_pretax"], color=STEM_COLOR, lw=1.5, zorder=1)
    ax.scatter(data["gini_pretax"], ypos, s=36, color=PRETAX_COLOR, label="Before tax", zorder=3)
    ax.scatter(data["gini_posttax"], ypos, s=36, color=POSTTAX_COLOR, label="After tax", zorder=3)

    ax.set_yticks(ypos)
    ax.set_yticklabels(data["entity"], fontsize=8)
    ax.set_ylim(-0.8, len(data) - 0.2)
    ax.set_xlabel("Gini coefficient")
    suffix = f" ({year})" if year is not None else ""
    ax.set_title(f"Gini coefficient before and after taxes{suffix}", loc="left")
    ax.legend(loc="lower right", frameon=False, ncols=2, fontsize=9)
    ax.grid(axis="x", alpha=0.3)
    ax.spines[["top", "right", "left"]].set_visible(False)
    fig.tight_layout()

    saved = _finish(fig, out_path, show, dpi)
    return fig, ax, saved
