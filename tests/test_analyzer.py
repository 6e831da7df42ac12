import math

import pytest

from routeinfo.analyze.analyzer import RouteAnalyzer, analyze_track
from routeinfo.analyze.geodesic import EARTH_RADIUS_M
from routeinfo.analyze.models import SteepnessCategory as C
from routeinfo.config import AnalyzerConfig
from routeinfo.errors import EmptyOrInsufficientTrackError

STEP_M = EARTH_RADIUS_M * math.radians(0.001)


def test_analyze_sample_gpx(sample_gpx_path):
    result = analyze_track(sample_gpx_path, AnalyzerConfig(distance_threshold=50))

    assert result.points == 8
    assert result.thinned_points == 7  # the last point is always dropped
    s = result.summary
    assert s.distance_km == pytest.approx(6 * STEP_M / 1000, rel=1e-6)
    assert s.ascent_m == pytest.approx(30.0)
    assert s.descent_m == pytest.approx(35.0)
    assert s.average_elevation_m == 511
    assert s.ascent_segments[C.GRADE_5_10].count == 1
    assert s.descent_segments[C.GRADE_15_20].count == 1
    assert s.segment_length_m() == pytest.approx(s.distance_km * 1000)


def test_analyze_pipeline_matches_stages():
    analyzer = RouteAnalyzer(AnalyzerConfig(50, 30, 100))
    points = [(0, 0, 100), (0, 0.001, 100), (0, 0.002, 150), (0, 0.01, 100)]

    thinned = analyzer.thin(points)
    assert len(thinned) == 3
    assert analyzer.analyze(points) == analyzer.summarize(thinned)


def test_rerun_on_thinned_output_is_stable():
    analyzer = RouteAnalyzer(AnalyzerConfig(distance_threshold=20))
    points = [(23.0, 42.0 + 0.0003 * i, 600.0 + 7 * (i % 4)) for i in range(30)]
    thinned = analyzer.thin(points)
    assert analyzer.summarize(thinned) == analyzer.summarize(list(thinned))


def test_analyze_gpx_text(sample_gpx_path):
    analyzer = RouteAnalyzer(AnalyzerConfig(distance_threshold=50))
    text = sample_gpx_path.read_text(encoding="utf-8")
    assert analyzer.analyze_gpx_text(text) == analyzer.analyze_gpx(sample_gpx_path)


def test_track_thinned_to_nothing_fails():
    analyzer = RouteAnalyzer(AnalyzerConfig(distance_threshold=5000))
    with pytest.raises(EmptyOrInsufficientTrackError) as exc:
        analyzer.analyze([(0.0, 0.0, 1.0), (0.0, 0.001, 2.0)])
    assert exc.value.stage == "aggregation"
