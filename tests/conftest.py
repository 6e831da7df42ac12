from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config and ROUTEINFO_* variables out of every test."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in (
        "ROUTEINFO_DISTANCE_THRESHOLD",
        "ROUTEINFO_SLOPE_SECTION_THRESHOLD",
        "ROUTEINFO_ELEVATION_DISTANCE_THRESHOLD",
        "ROUTEINFO_WORK_ROOT",
    ):
        monkeypatch.delenv(var, raising=False)
