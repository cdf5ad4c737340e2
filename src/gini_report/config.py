# src/gini_report/config.py

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

# canonical column -> column name in the Our World in Data export
DEFAULT_COLUMNS: Dict[str, str] = {
    "entity": "Entity",
    "code": "Code",
    "year": "Year",
    "gini_pretax": "Gini coefficient (before tax) (World Inequality Database)",
    "gini_posttax": "Gini coefficient (after tax) (World Inequality Database)",
    "population": "Population (historical estimates)",
    "continent": "Continent",
}


@dataclass
class ReportConfig:
    input_path: Path = Path("data/economic-inequality-gini-index.csv")
    output_dir: Path = Path("output/figures")
    year: int = 2020
    window: int = 5
    columns: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLUMNS))
    countries_only: bool = True
    label_count: int = 25
    seed: int = 42
    top_n: Optional[int] = None
    sort_by: str = "gini_pretax"
    font_dir: Optional[Path] = None
    dpi: int = 150


def load_report_config(config_path: str | Path = "config/report.yaml") -> ReportConfig:
    """
    Load report settings from YAML config file.
    Keys that are absent fall back to the ReportConfig defaults; relative paths
    are resolved against the config file's directory parent (the project root).
    """

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        yaml_data = yaml.safe_load(f) or {}

    if not isinstance(yaml_data, dict):
        raise ValueError(f"{config_path} must contain a mapping at the top level.")

    root = config_path.resolve().parent.parent
    defaults = ReportConfig()

    columns = dict(DEFAULT_COLUMNS)
    columns.update(yaml_data.get("columns") or {})
    unknown = set(columns) - set(DEFAULT_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown columns in {config_path}: {sorted(unknown)}")

    font_dir = yaml_data.get("font_dir")
    top_n = yaml_data.get("top_n", defaults.top_n)

    cfg = ReportConfig(
        input_path=_resolve(root, yaml_data.get("input_path", defaults.input_path)),
        output_dir=_resolve(root, yaml_data.get("output_dir", defaults.output_dir)),
        year=int(yaml_data.get("year", defaults.year)),
        window=int(yaml_data.get("window", defaults.window)),
        columns=columns,
        countries_only=bool(yaml_data.get("countries_only", defaults.countries_only)),
        label_count=int(yaml_data.get("label_count", defaults.label_count)),
        seed=int(yaml_data.get("seed", defaults.seed)),
        top_n=int(top_n) if top_n is not None else None,
        sort_by=yaml_data.get("sort_by", defaults.sort_by),
        font_dir=_resolve(root, font_dir) if font_dir else None,
        dpi=int(yaml_data.get("dpi", defaults.dpi)),
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: ReportConfig) -> None:
    if cfg.window < 0:
        raise ValueError(f"window must be >= 0, got {cfg.window}")
    if cfg.label_count < 0:
        raise ValueError(f"label_count must be >= 0, got {cfg.label_count}")
    if cfg.top_n is not None and int(cfg.top_n) <= 0:
        raise ValueError(f"top_n must be positive, got {cfg.top_n}")
    if cfg.sort_by not in ("gini_pretax", "gini_posttax", "gini_reduction"):
        raise ValueError(f"Unsupported sort_by: {cfg.sort_by}")


def _resolve(root: Path, p: str | Path) -> Path:
    p = Path(p)
    return p if p.is_absolute() else root / p
