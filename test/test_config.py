# test/test_config.py

from pathlib import Path

import pytest

from gini_report.config import DEFAULT_COLUMNS, ReportConfig, load_report_config

ROOT = Path(__file__).resolve().parents[1]


def test_load_shipped_config():
    cfg = load_report_config(ROOT / "config" / "report.yaml")
    assert isinstance(cfg, ReportConfig)
    assert cfg.year == 2020
    assert cfg.window == 5
    assert cfg.columns == DEFAULT_COLUMNS
    assert cfg.input_path == ROOT / "data" / "economic-inequality-gini-index.csv"
    assert cfg.font_dir is None


def test_partial_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config" / "report.yaml"
    path.parent.mkdir()
    path.write_text("year: 2015\ncolumns:\n  entity: Country\n", encoding="utf-8")
    cfg = load_report_config(path)
    assert cfg.year == 2015
    assert cfg.window == 5
    assert cfg.columns["entity"] == "Country"
    assert cfg.columns["year"] == "Year"
    assert cfg.output_dir == tmp_path.resolve() / "output" / "figures"


def test_missing_config():
    with pytest.raises(FileNotFoundError):
        load_report_config("does/not/exist.yaml")


@pytest.mark.parametrize("body, match", [
    ("window: -1\n", "window"),
    ("sort_by: population\n", "sort_by"),
    ("columns:\n  region: Region\n", "Unknown columns"),
    ("- just\n- a list\n", "mapping"),
])
def test_invalid_config(tmp_path, body, match):
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError, match=match):
        load_report_config(path)


def test_top_n_is_coerced_to_int(tmp_path):
    path = tmp_path / "report.yaml"
    path.write_text('top_n: "10"\n', encoding="utf-8")
    assert load_report_config(path).top_n == 10
