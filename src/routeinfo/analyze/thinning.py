# routeinfo/analyze/thinning.py
"""
Forward greedy point thinning.

Starting from the first point, each anchor looks ahead for the first later
point at least `distance_threshold` meters away. If one exists the anchor is
kept and that point becomes the next anchor; points jumped over are never
anchors themselves and stay in the track. If none exists the anchor is dropped
and the following point becomes the anchor.

The last point has nothing after it, so it is always dropped, together with
any trailing run of points that are within the threshold of everything after
them.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from routeinfo.analyze.geodesic import point_distance_m
from routeinfo.analyze.models import TrackPoint, coerce_points
from routeinfo.config import validate_threshold
from routeinfo.errors import EmptyOrInsufficientTrackError

logger = logging.getLogger(__name__)

STAGE = "thinning"


def _first_far_index(points: list[TrackPoint], anchor: int, threshold: float) -> Optional[int]:
    p0 = points[anchor]
    for j in range(anchor + 1, len(points)):
        if point_distance_m(p0, points[j]) >= threshold:
            return j
    return None


def thin_points(points: Iterable[Any], distance_threshold: float) -> list[TrackPoint]:
    """
    Return the thinned track as an order-preserving subsequence of `points`.

    Raises:
      InvalidConfigurationError if the threshold is not a positive number
      EmptyOrInsufficientTrackError for an empty track
      MalformedPointError for an invalid point
    """
    distance_threshold = validate_threshold("distance_threshold", distance_threshold)

    pts = coerce_points(points, stage=STAGE)
    if not pts:
        raise EmptyOrInsufficientTrackError("track has no points", stage=STAGE)

    dropped = [False] * len(pts)
    i = 0
    while i < len(pts):
        j = _first_far_index(pts, i, distance_threshold)
        if j is None:
            dropped[i] = True
            i += 1
        else:
            i = j

    kept = [p for p, drop in zip(pts, dropped) if not drop]
    logger.debug(
        "thinning: %d points in, %d kept, %d dropped (threshold %.1f m)",
        len(pts), len(kept), len(pts) - len(kept), distance_threshold,
    )
    return kept
