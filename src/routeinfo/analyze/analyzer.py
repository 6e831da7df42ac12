# routeinfo/analyze/analyzer.py
"""
Route analyzer: thinning followed by track statistics.

An analyzer holds only its (frozen) thresholds, so one instance can serve
any number of tracks, including from several threads at once. Results are
returned to the caller; how they are delivered is up to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from routeinfo.analyze.models import RouteSummary, TrackPoint
from routeinfo.analyze.thinning import thin_points
from routeinfo.analyze.track import summarize_track
from routeinfo.config import AnalyzerConfig
from routeinfo.formats.gpx import load_track_points, load_track_points_text

logger = logging.getLogger(__name__)


class RouteAnalyzer:

    def __init__(self, config: AnalyzerConfig) -> None:
        self.config = config

    def thin(self, points: Iterable[Any]) -> list[TrackPoint]:
        return thin_points(points, self.config.distance_threshold)

    def summarize(self, points: Iterable[Any]) -> RouteSummary:
        return summarize_track(
            points,
            elevation_distance_threshold=self.config.elevation_distance_threshold,
            distance_slope_section_threshold=self.config.distance_slope_section_threshold,
        )

    def analyze(self, points: Iterable[Any]) -> RouteSummary:
        """Thin the raw track and summarize what is left."""
        return self.summarize(self.thin(points))

    def analyze_gpx_text(self, text: str) -> RouteSummary:
        return self.analyze(load_track_points_text(text))

    def analyze_gpx(self, path: Path) -> RouteSummary:
        return self.analyze(load_track_points(path))


@dataclass(frozen=True)
class TrackAnalysis:
    path: Path
    points: int
    thinned_points: int
    summary: RouteSummary


def analyze_track(gpx_path: Path, config: Optional[AnalyzerConfig] = None) -> TrackAnalysis:
    """Analyze one GPX file, keeping the point counts for reporting."""
    analyzer = RouteAnalyzer(config or AnalyzerConfig())
    points = load_track_points(gpx_path)
    thinned = analyzer.thin(points)
    logger.info("%s: %d points, %d after thinning", gpx_path.name, len(points), len(thinned))

    return TrackAnalysis(
        path=gpx_path,
        points=len(points),
        thinned_points=len(thinned),
        summary=analyzer.summarize(thinned),
    )
