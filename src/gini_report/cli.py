# src/gini_report/cli.py
"""
gini-report: load the Gini dataset, repair sparse coverage, and render the
scatter and lollipop charts for one snapshot year.

    gini-report --config config/report.yaml --year 2020
"""
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ReportConfig, load_report_config, validate_config
from .data_prep import exclude_aggregates, load_gini, prepare
from .metrics import continent_summary, coverage_report, redistribution, snapshot
from .viz import plot_gini_lollipop, plot_gini_scatter, register_fonts

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gini-report",
                                description="Pre-tax vs post-tax Gini charts for one year.")
    p.add_argument("--config", type=Path, default=None, help="YAML report config")
    p.add_argument("--input", type=Path, default=None, help="Gini CSV (overrides config)")
    p.add_argument("--year", type=int, default=None, help="snapshot year (default 2020)")
    p.add_argument("--out-dir", type=Path, default=None, help="where charts are written")
    p.add_argument("--window", type=int, default=None, help="gap-fill window in years")
    p.add_argument("--show", action="store_true", help="open the charts interactively")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def resolve_config(args: argparse.Namespace) -> ReportConfig:
    cfg = load_report_config(args.config) if args.config else ReportConfig()
    if args.input is not None:
        cfg.input_path = args.input
    if args.year is not None:
        cfg.year = args.year
    if args.out_dir is not None:
        cfg.output_dir = args.out_dir
    if args.window is not None:
        cfg.window = args.window
    validate_config(cfg)
    return cfg


def run_report(cfg: ReportConfig, show: bool = False) -> dict:
    """Run every stage; returns the paths written, keyed by artifact."""
    register_fonts(cfg.font_dir)

    if not Path(cfg.input_path).exists():
        raise FileNotFoundError(f"Input CSV not found: {cfg.input_path}")
    raw = load_gini(str(cfg.input_path), cfg.columns)
    if cfg.countries_only:
        raw = exclude_aggregates(raw)

    clean = prepare(raw, window=cfg.window)
    for _, row in coverage_report(raw, clean).iterrows():
        logger.info("%s: %d present -> %d after fill (+%d)",
                    row["metric"], row["present_before"], row["present_after"], row["filled"])

    snap = redistribution(snapshot(clean, cfg.year))
    if snap.empty:
        raise ValueError(f"No country has both Gini values in {cfg.year}.")

    out_dir = Path(cfg.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    table_path = out_dir / f"snapshot_{cfg.year}.csv"
    snap.to_csv(table_path, index=False)

    _, _, scatter_path = plot_gini_scatter(
        snap, str(out_dir / f"gini_scatter_{cfg.year}.png"), show,
        year=cfg.year, label_count=cfg.label_count, seed=cfg.seed, dpi=cfg.dpi,
    )
    _, _, lollipop_path = plot_gini_lollipop(
        snap, str(out_dir / f"gini_lollipop_{cfg.year}.png"), show,
        year=cfg.year, sort_by=cfg.sort_by, top_n=cfg.top_n, dpi=cfg.dpi,
    )

    summary = continent_summary(snap)
    logger.info("Mean Gini reduction by continent:\n%s", summary.to_string(index=False))
    return {"table": str(table_path), "scatter": scatter_path, "lollipop": lollipop_path}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = resolve_config(args)
        written = run_report(cfg, show=args.show)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    for kind, path in written.items():
        logger.info("%s -> %s", kind, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
