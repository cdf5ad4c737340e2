import numpy as np
import pandas as pd
import pytest
import matplotlib

# headless backend for every plotting test
matplotlib.use("Agg")

from gini_report.config import DEFAULT_COLUMNS  # noqa: E402

nan = np.nan


@pytest.fixture
def raw_frame() -> pd.DataFrame:
    """
    A small canonical-column frame shaped like the OWID export: rows only
    where something is reported, continent only on the 2015 row.
    """
    rows = [
        # entity, code, year, pretax, posttax, population, continent
        ("Alpha", "ALP", 2012, 0.50, nan, 1_000_000, nan),
        ("Alpha", "ALP", 2014, nan, 0.30, 1_000_000, nan),
        ("Alpha", "ALP", 2015, nan, nan, 1_000_000, "Europe"),
        ("Alpha", "ALP", 2021, 0.48, 0.29, 1_000_000, nan),
        ("Beta", "BET", 2000, 0.60, 0.40, 5_000_000, nan),
        ("Beta", "BET", 2015, nan, nan, 5_000_000, "Asia"),
        ("Gamma", "GAM", 2015, nan, nan, 2_000_000, "Africa"),
        ("Gamma", "GAM", 2018, 0.70, nan, 2_000_000, nan),
        ("Gamma", "GAM", 2020, nan, 0.45, 2_000_000, nan),
        ("Delta", "DEL", 2020, 0.40, 0.30, 3_000_000, nan),
        ("World", "OWID_WRL", 2020, 0.65, 0.60, 8_000_000_000, nan),
    ]
    return pd.DataFrame(rows, columns=list(DEFAULT_COLUMNS))


@pytest.fixture
def gini_csv(tmp_path, raw_frame):
    """The raw frame written with the export's original column headers."""
    path = tmp_path / "data" / "gini.csv"
    path.parent.mkdir(parents=True)
    raw_frame.rename(columns=DEFAULT_COLUMNS).to_csv(path, index=False)
    return path


@pytest.fixture
def snap() -> pd.DataFrame:
    return pd.DataFrame({
        "entity": ["Alpha", "Gamma", "Epsilon", "Zeta"],
        "code": ["ALP", "GAM", "EPS", "ZET"],
        "year": [2020] * 4,
        "gini_pretax": [0.48, 0.70, 0.55, 0.52],
        "gini_posttax": [0.29, 0.45, 0.50, 0.30],
        "population": [1e6, 2e6, nan, 4e7],
        "continent": ["Europe", "Africa", "Asia", "Europe"],
    })
