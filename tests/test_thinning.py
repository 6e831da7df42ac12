import pytest

from routeinfo.analyze.geodesic import point_distance_m
from routeinfo.analyze.models import TrackPoint
from routeinfo.analyze.thinning import thin_points
from routeinfo.errors import (
    EmptyOrInsufficientTrackError,
    InvalidConfigurationError,
    MalformedPointError,
)


def _meridian(*lats, ele=100.0):
    return [(0.0, lat, ele) for lat in lats]


def _is_subsequence(sub, seq):
    it = iter(seq)
    return all(any(p == q for q in it) for p in sub)


def test_four_point_scenario():
    points = [(0, 0, 100), (0, 0.001, 100), (0, 0.002, 150), (0, 0.01, 100)]
    # 0 -> 1 (~111 m), 1 -> 2 (~111 m), 2 -> 3 (~890 m), 3 has nothing after it
    assert thin_points(points, 50) == [
        TrackPoint(0.0, 0.0, 100.0),
        TrackPoint(0.0, 0.001, 100.0),
        TrackPoint(0.0, 0.002, 150.0),
    ]


def test_single_point_is_dropped():
    assert thin_points([(0.0, 0.0, 10.0)], 5) == []


def test_trailing_points_close_to_everything_after_them_are_dropped():
    # 0.002, 0.0021, 0.0022 are all within 50 m of every later point
    points = _meridian(0.0, 0.001, 0.002, 0.0021, 0.0022)
    kept = thin_points(points, 50)
    assert kept == [TrackPoint(*p) for p in points[:2]]


def test_points_jumped_over_by_an_anchor_are_kept():
    # anchor 0 first reaches 50 m at index 3, anchor 3 at index 5
    points = _meridian(0.0, 0.0002, 0.0004, 0.0006, 0.001, 0.002)
    kept = thin_points(points, 50)
    assert kept == [TrackPoint(*p) for p in points[:5]]


def test_anchor_without_far_point_is_dropped_mid_track():
    # p0 is 44 m from both later points, p1 and p2 are 89 m apart
    points = _meridian(0.0004, 0.0008, 0.0)
    assert thin_points(points, 50) == [TrackPoint(*points[1])]


def test_all_points_dropped_when_track_is_shorter_than_threshold():
    points = _meridian(0.0, 0.0001, 0.0002, 0.0003)
    assert thin_points(points, 1000) == []


def _splice_filter(points, threshold):
    """Straightforward version that deletes dropped anchors in place."""
    coords = [TrackPoint(*p) for p in points]
    i = 0
    while i < len(coords):
        for j in range(i + 1, len(coords)):
            if point_distance_m(coords[i], coords[j]) >= threshold:
                i = j
                break
        else:
            del coords[i]
    return coords


@pytest.mark.parametrize("threshold", [5, 40, 75, 300])
def test_matches_in_place_filter_and_is_subsequence(threshold):
    points = [
        (23.0 + 0.0001 * (i % 7), 42.0 + 0.0003 * (i % 23), 500.0 + (i % 5))
        for i in range(60)
    ]
    kept = thin_points(points, threshold)
    assert kept == _splice_filter(points, threshold)
    assert _is_subsequence(kept, [TrackPoint(*p) for p in points])
    assert TrackPoint(*points[-1]) not in kept


def test_accepts_track_points_and_lists():
    pts = [TrackPoint(0.0, 0.0, 1.0), [0.0, 0.001, 2.0], (0.0, 0.002, 3.0)]
    assert thin_points(pts, 50) == [TrackPoint(0.0, 0.0, 1.0), TrackPoint(0.0, 0.001, 2.0)]


def test_empty_track_raises():
    with pytest.raises(EmptyOrInsufficientTrackError) as exc:
        thin_points([], 10)
    assert exc.value.stage == "thinning"


@pytest.mark.parametrize("threshold", [0, -5, float("nan"), float("inf")])
def test_invalid_threshold_raises(threshold):
    with pytest.raises(InvalidConfigurationError):
        thin_points(_meridian(0.0, 0.001), threshold)


@pytest.mark.parametrize(
    "bad",
    [
        (0.0, float("nan"), 10.0),
        (0.0, 0.001, None),
        (0.0, 0.001),
        (200.0, 0.001, 10.0),
        (0.0, 91.0, 10.0),
    ],
)
def test_malformed_point_reports_index(bad):
    with pytest.raises(MalformedPointError) as exc:
        thin_points([(0.0, 0.0, 10.0), bad], 10)
    assert exc.value.index == 1
    assert exc.value.stage == "thinning"
