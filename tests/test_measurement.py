"""Tests for the geometry/measurement engine."""

import math
import random

import pytest

from polymeasure_core.errors import InvalidNumericInputError, MalformedGeometryError, ProjectionError
from polymeasure_core.geometry.measurement import (
    Measurement,
    bearing,
    copy_line,
    destination_point,
    interior_angle,
    is_valid_coordinate,
    last_segment_measurement,
    segment_length,
)
from polymeasure_core.geometry.projection import from_lonlat, to_lonlat


class TestBearing:
    @pytest.mark.parametrize(
        "target, expected",
        [
            ((0.0, 10.0), 0.0),
            ((10.0, 0.0), 90.0),
            ((0.0, -10.0), 180.0),
            ((-10.0, 0.0), 270.0),
            ((10.0, 10.0), 45.0),
            ((-10.0, 10.0), 315.0),
        ],
    )
    def test_cardinal_and_diagonal_directions(self, target, expected):
        assert bearing((0.0, 0.0), target) == pytest.approx(expected)

    def test_result_is_in_half_open_range(self):
        rng = random.Random(7)
        for _ in range(200):
            a = (rng.uniform(-1e4, 1e4), rng.uniform(-1e4, 1e4))
            b = (rng.uniform(-1e4, 1e4), rng.uniform(-1e4, 1e4))
            assert 0.0 <= bearing(a, b) < 360.0

    @pytest.mark.parametrize(
        "bad",
        [None, (), (1.0,), ("a", 1.0), (float("nan"), 0.0), (True, 0.0), "xy", 5],
    )
    def test_malformed_coordinate_gives_nan(self, bad):
        assert math.isnan(bearing(bad, (1.0, 1.0)))
        assert math.isnan(bearing((1.0, 1.0), bad))

    def test_extra_ordinates_are_ignored(self):
        assert bearing((0.0, 0.0, 5.0), (10.0, 0.0, 9.0)) == pytest.approx(90.0)


class TestInteriorAngle:
    def test_right_angle(self):
        assert interior_angle((0.0, 0.0), (0.0, 1000.0), (1000.0, 1000.0)) == pytest.approx(90.0)

    def test_collinear_gives_180(self):
        assert interior_angle((0.0, 0.0), (5.0, 5.0), (10.0, 10.0)) == pytest.approx(180.0)

    def test_reversal_gives_zero(self):
        assert interior_angle((0.0, 0.0), (10.0, 0.0), (3.0, 0.0)) == pytest.approx(0.0)

    def test_symmetric_and_bounded(self):
        rng = random.Random(11)
        for _ in range(200):
            a, b, c = [(rng.uniform(-500, 500), rng.uniform(-500, 500)) for _ in range(3)]
            angle = interior_angle(a, b, c)
            assert 0.0 <= angle <= 180.0
            assert angle == pytest.approx(interior_angle(c, b, a))

    def test_malformed_gives_nan(self):
        assert math.isnan(interior_angle((0.0, 0.0), None, (1.0, 1.0)))


class TestLastSegmentMeasurement:
    def test_scenario_a_last_segment(self):
        line = [(0.0, 0.0), (0.0, 1000.0), (1000.0, 1000.0)]
        measurement = last_segment_measurement(line)

        assert measurement.valid
        assert measurement.azimuth_degrees == pytest.approx(90.0)
        assert measurement.distance_meters == pytest.approx(1000.0, rel=1e-6)

    def test_only_last_two_points_matter(self):
        tail = [(250.0, -40.0), (900.0, 1200.0)]
        base = last_segment_measurement(tail)
        for prefix in ([(0.0, 0.0)], [(1e5, 1e5), (-3.0, 7.0)], [("junk",), None]):
            measurement = last_segment_measurement(prefix + tail)
            assert measurement.distance_meters == pytest.approx(base.distance_meters)
            assert measurement.azimuth_degrees == pytest.approx(base.azimuth_degrees)

    @pytest.mark.parametrize(
        "line",
        [None, [], [(0.0, 0.0)], [(0.0, 0.0), (None, 1.0)], [(0.0, 0.0), "ab"], 42],
    )
    def test_indeterminate_input(self, line):
        assert last_segment_measurement(line) == Measurement.indeterminate()

    def test_indeterminate_reports_zeroes(self):
        measurement = Measurement.indeterminate()
        assert (measurement.distance_meters, measurement.azimuth_degrees) == (0.0, 0.0)
        assert not measurement.valid


class TestDestinationPoint:
    @pytest.mark.parametrize("origin", [(0.0, 0.0), (15000.0, -22000.0), (-3.0e5, 1.2e5)])
    @pytest.mark.parametrize("distance", [1.0, 750.0, 10000.0])
    @pytest.mark.parametrize("azimuth", [0.0, 45.0, 90.0, 181.5, 300.0])
    def test_round_trip(self, origin, distance, azimuth):
        destination = destination_point(origin, distance, azimuth)
        measurement = last_segment_measurement([origin, destination])

        assert measurement.distance_meters == pytest.approx(distance, rel=1e-6)
        diff = (measurement.azimuth_degrees - azimuth + 180.0) % 360.0 - 180.0
        assert abs(diff) < 1e-2

    def test_scenario_b_due_south(self):
        destination = destination_point((0.0, 1000.0), 2000.0, 180.0)

        assert destination[0] == pytest.approx(0.0, abs=1e-6)
        assert destination[1] == pytest.approx(-1000.0, abs=0.01)

    def test_bearing_is_normalized(self):
        origin = (500.0, 500.0)
        assert destination_point(origin, 100.0, 370.0) == pytest.approx(
            destination_point(origin, 100.0, 10.0)
        )
        assert destination_point(origin, 100.0, -90.0) == pytest.approx(
            destination_point(origin, 100.0, 270.0)
        )

    @pytest.mark.parametrize("distance", [0.0, -5.0, float("nan"), float("inf")])
    def test_rejects_invalid_distance(self, distance):
        with pytest.raises(InvalidNumericInputError):
            destination_point((0.0, 0.0), distance, 90.0)

    def test_rejects_malformed_origin(self):
        with pytest.raises(MalformedGeometryError):
            destination_point(("x", 0.0), 10.0, 90.0)


class TestProjection:
    def test_origin_maps_to_null_island(self):
        lon, lat = to_lonlat((0.0, 0.0))
        assert (lon, lat) == pytest.approx((0.0, 0.0), abs=1e-9)

    def test_round_trip(self):
        coord = (123456.0, -654321.0)
        assert from_lonlat(to_lonlat(coord)) == pytest.approx(coord, abs=1e-6)

    def test_non_finite_input_raises(self):
        with pytest.raises(ProjectionError):
            to_lonlat((float("inf"), 0.0))

    def test_pole_cannot_be_projected(self):
        with pytest.raises(ProjectionError):
            from_lonlat((0.0, 90.0))


def test_segment_length_is_symmetric():
    a, b = (1000.0, 2000.0), (-4000.0, 7000.0)
    assert segment_length(a, b) == pytest.approx(segment_length(b, a))


def test_copy_line_is_deep_and_validated():
    source = [[0, 0], [1, 2]]
    copied = copy_line(source)
    source[0][0] = 99

    assert copied == [(0.0, 0.0), (1.0, 2.0)]
    with pytest.raises(MalformedGeometryError):
        copy_line([(0.0, 0.0), ("a", "b")])


def test_is_valid_coordinate_accepts_numpy_values():
    np = pytest.importorskip("numpy")
    assert is_valid_coordinate(np.array([1.0, 2.0]))
    assert not is_valid_coordinate(np.array([1.0, np.nan]))
