# routeinfo/analyze/models.py
"""
Value types shared by the thinner, the aggregator and the report layer.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from numbers import Real
from types import MappingProxyType
from typing import Any, Iterable, Mapping, NamedTuple

from routeinfo.errors import MalformedPointError


class TrackPoint(NamedTuple):
    """One geodetic sample: longitude/latitude in degrees, elevation in meters."""

    lon: float
    lat: float
    ele: float


def _check_coordinate(value: Any, name: str, *, stage: str, index: int) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MalformedPointError(
            f"{name} is not a number: {value!r}", stage=stage, index=index
        )
    value = float(value)
    if not math.isfinite(value):
        raise MalformedPointError(
            f"{name} is not finite: {value!r}", stage=stage, index=index
        )
    return value


def coerce_points(points: Iterable[Any], *, stage: str) -> list[TrackPoint]:
    """
    Validate a point sequence and return it as TrackPoints.

    Each item must hold exactly (lon, lat, ele) as finite real numbers with
    latitude in [-90, 90] and longitude in [-180, 180]. Nothing is coerced to
    zero; the first bad point raises MalformedPointError.
    """
    out: list[TrackPoint] = []
    for index, point in enumerate(points):
        try:
            values = tuple(point)
        except TypeError:
            raise MalformedPointError(
                f"point is not a sequence: {point!r}", stage=stage, index=index
            ) from None
        if len(values) != 3:
            raise MalformedPointError(
                f"expected (lon, lat, ele), got {len(values)} values",
                stage=stage, index=index,
            )

        lon = _check_coordinate(values[0], "longitude", stage=stage, index=index)
        lat = _check_coordinate(values[1], "latitude", stage=stage, index=index)
        ele = _check_coordinate(values[2], "elevation", stage=stage, index=index)

        if not -90.0 <= lat <= 90.0:
            raise MalformedPointError(
                f"latitude out of range: {lat}", stage=stage, index=index
            )
        if not -180.0 <= lon <= 180.0:
            raise MalformedPointError(
                f"longitude out of range: {lon}", stage=stage, index=index
            )

        out.append(TrackPoint(lon=lon, lat=lat, ele=ele))
    return out


class SteepnessCategory(enum.Enum):
    """Percent-grade bands used by the slope histogram."""

    GRADE_0_5 = "0-5"
    GRADE_5_10 = "5-10"
    GRADE_10_15 = "10-15"
    GRADE_15_20 = "15-20"
    GRADE_20_25 = "20-25"
    GRADE_25_30 = "25-30"
    GRADE_30_PLUS = "30+"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_grade(cls, grade_pct: float) -> "SteepnessCategory":
        """Classify a percent grade; each band includes its upper bound."""
        steepness = abs(grade_pct)
        for upper, category in _UPPER_BOUNDS:
            if steepness <= upper:
                return category
        return cls.GRADE_30_PLUS


_UPPER_BOUNDS = (
    (5.0, SteepnessCategory.GRADE_0_5),
    (10.0, SteepnessCategory.GRADE_5_10),
    (15.0, SteepnessCategory.GRADE_10_15),
    (20.0, SteepnessCategory.GRADE_15_20),
    (25.0, SteepnessCategory.GRADE_20_25),
    (30.0, SteepnessCategory.GRADE_25_30),
)


@dataclass(frozen=True)
class SegmentBucket:
    count: int = 0
    total_length_m: float = 0.0


def freeze_buckets(
        buckets: Mapping[SteepnessCategory, SegmentBucket],
) -> Mapping[SteepnessCategory, SegmentBucket]:
    """Return a read-only mapping holding every category in declaration order."""
    return MappingProxyType(
        {c: buckets.get(c, SegmentBucket()) for c in SteepnessCategory}
    )


@dataclass(frozen=True)
class RouteSummary:
    """
    Final result of one analysis run.

    Attributes:
    - distance_km: total horizontal distance
    - ascent_m / descent_m: hysteresis-filtered elevation gain and loss
    - ascent_segments / descent_segments: slope histogram per category
    - average_elevation_m: mean elevation of the analysed points, rounded
    """

    distance_km: float
    ascent_m: float
    descent_m: float
    ascent_segments: Mapping[SteepnessCategory, SegmentBucket]
    descent_segments: Mapping[SteepnessCategory, SegmentBucket]
    average_elevation_m: int

    def segment_length_m(self) -> float:
        """Sum of all histogram lengths (ascent and descent)."""
        return sum(
            b.total_length_m
            for buckets in (self.ascent_segments, self.descent_segments)
            for b in buckets.values()
        )

    def to_dict(self) -> dict[str, Any]:
        def _buckets(buckets: Mapping[SteepnessCategory, SegmentBucket]) -> dict:
            return {
                c.label: {"count": b.count, "total_length_m": b.total_length_m}
                for c, b in buckets.items()
            }

        return {
            "distance_km": self.distance_km,
            "ascent_m": self.ascent_m,
            "descent_m": self.descent_m,
            "ascent_segments": _buckets(self.ascent_segments),
            "descent_segments": _buckets(self.descent_segments),
            "average_elevation_m": self.average_elevation_m,
        }
