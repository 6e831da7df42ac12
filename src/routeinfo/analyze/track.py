# routeinfo/analyze/track.py
"""
Track statistics for routeinfo

One pass over the edges of a (thinned) track computes:
- horizontal distance
- elevation gain/loss, credited only once enough distance has accumulated
  since the last elevation checkpoint
- a slope histogram of ascent/descent segments per steepness category
- mean elevation of all points
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from routeinfo.analyze.geodesic import point_distance_m
from routeinfo.analyze.models import (
    RouteSummary,
    SegmentBucket,
    SteepnessCategory,
    TrackPoint,
    coerce_points,
    freeze_buckets,
)
from routeinfo.config import (
    DEFAULT_ELEVATION_DISTANCE_THRESHOLD,
    DEFAULT_SLOPE_SECTION_THRESHOLD,
    validate_threshold,
)
from routeinfo.errors import EmptyOrInsufficientTrackError

logger = logging.getLogger(__name__)

STAGE = "aggregation"


def iter_edges(points: list[TrackPoint]) -> Iterator[tuple[TrackPoint, TrackPoint, float]]:
    """Yield (prev, curr, distance_m) for each pair of consecutive points."""
    for p0, p1 in zip(points, points[1:]):
        yield p0, p1, point_distance_m(p0, p1)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


@dataclass
class _Segment:
    distance_m: float = 0.0
    elevation_change_m: float = 0.0
    category: Optional[SteepnessCategory] = None
    is_ascent: bool = True


class _Histogram:
    def __init__(self) -> None:
        self._ascent = {c: [0, 0.0] for c in SteepnessCategory}
        self._descent = {c: [0, 0.0] for c in SteepnessCategory}

    def close(self, segment: _Segment) -> None:
        target = self._ascent if segment.is_ascent else self._descent
        bucket = target[segment.category]
        bucket[0] += 1
        bucket[1] += segment.distance_m

    def frozen(self):
        def _freeze(buckets):
            return freeze_buckets(
                {c: SegmentBucket(count=n, total_length_m=length)
                 for c, (n, length) in buckets.items()}
            )
        return _freeze(self._ascent), _freeze(self._descent)


def summarize_track(
        points: Iterable[Any], *,
        elevation_distance_threshold: float = DEFAULT_ELEVATION_DISTANCE_THRESHOLD,
        distance_slope_section_threshold: float = DEFAULT_SLOPE_SECTION_THRESHOLD,
) -> RouteSummary:
    """
    Aggregate a track into a RouteSummary.

    Slope segments grow edge by edge. Once a segment reaches
    `distance_slope_section_threshold` it is committed under the label it
    carried before the current edge, and a new empty segment starts with the
    label computed from the current totals. Below the threshold a label change
    only relabels the segment. The last segment is always committed.

    Raises:
      InvalidConfigurationError for out-of-range thresholds
      EmptyOrInsufficientTrackError for an empty track
      MalformedPointError for an invalid point
    """
    validate_threshold(
        "elevation_distance_threshold", elevation_distance_threshold, allow_zero=True
    )
    validate_threshold("distance_slope_section_threshold", distance_slope_section_threshold)

    pts = coerce_points(points, stage=STAGE)
    if not pts:
        raise EmptyOrInsufficientTrackError("track has no points", stage=STAGE)

    total_distance = 0.0
    total_ascent = 0.0
    total_descent = 0.0

    elevation_sum = pts[0].ele
    elevation_count = 1

    # elevation checkpoint for the gain/loss filter
    checkpoint_distance = 0.0
    checkpoint_ele = pts[0].ele

    segment = _Segment()
    histogram = _Histogram()

    for prev, curr, d_m in iter_edges(pts):
        elevation_sum += curr.ele
        elevation_count += 1

        if d_m == 0:
            continue

        total_distance += d_m

        checkpoint_distance += d_m
        if checkpoint_distance >= elevation_distance_threshold:
            delta = curr.ele - checkpoint_ele
            if delta > 0:
                total_ascent += delta
            elif delta < 0:
                total_descent += -delta
            checkpoint_distance = 0.0
            checkpoint_ele = curr.ele

        segment.distance_m += d_m
        segment.elevation_change_m += curr.ele - prev.ele

        grade = segment.elevation_change_m / segment.distance_m * 100.0
        category = SteepnessCategory.from_grade(grade)
        is_ascent = segment.elevation_change_m >= 0

        if segment.category is None:
            segment.category = category
            segment.is_ascent = is_ascent
            continue

        if segment.distance_m >= distance_slope_section_threshold:
            histogram.close(segment)
            segment = _Segment(category=category, is_ascent=is_ascent)
        elif category is not segment.category or is_ascent != segment.is_ascent:
            segment.category = category
            segment.is_ascent = is_ascent

    # all-zero-length tracks never open a segment
    if segment.category is not None:
        histogram.close(segment)

    ascent_segments, descent_segments = histogram.frozen()

    summary = RouteSummary(
        distance_km=total_distance / 1000.0,
        ascent_m=total_ascent,
        descent_m=total_descent,
        ascent_segments=ascent_segments,
        descent_segments=descent_segments,
        average_elevation_m=round_half_up(elevation_sum / elevation_count),
    )
    logger.debug(
        "aggregation: %d points, %.3f km, +%.1f m / -%.1f m",
        len(pts), summary.distance_km, summary.ascent_m, summary.descent_m,
    )
    return summary
