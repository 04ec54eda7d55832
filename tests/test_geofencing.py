"""Tests for distance calculation and safe zone evaluation."""

import pytest

from app.core.geofencing import calculate_distance, evaluate_safe_zones, is_within_zone
from app.models.safe_zone import SafeZone


def make_zone(name="Home", latitude=0.0, longitude=0.0, radius=100.0):
    return SafeZone(name=name, latitude=latitude, longitude=longitude, radius=radius)


class TestCalculateDistance:
    """Haversine distance in meters."""

    @pytest.mark.parametrize("lat,lon", [(0.0, 0.0), (7.5227, 4.5198), (-33.86, 151.21), (89.9, -179.9)])
    def test_same_point_is_zero(self, lat, lon):
        assert calculate_distance(lat, lon, lat, lon) == 0

    def test_symmetric(self):
        a = (51.5074, -0.1278)
        b = (48.8566, 2.3522)
        assert calculate_distance(*a, *b) == pytest.approx(calculate_distance(*b, *a))

    def test_one_degree_of_longitude_on_equator(self):
        assert calculate_distance(0, 0, 0, 1) == pytest.approx(111_195, rel=0.01)

    def test_out_of_range_coordinates_do_not_raise(self):
        distance = calculate_distance(120, 200, -95, -400)
        assert distance >= 0

    def test_antipodal_points(self):
        # Half the circumference of a 6371 km sphere
        assert calculate_distance(0, 0, 0, 180) == pytest.approx(20_015_086, rel=0.001)


class TestEvaluateSafeZones:
    """Inside/outside decisions and violation policy."""

    def test_member_at_center_is_inside(self):
        [check] = evaluate_safe_zones(0.0, 0.0, [make_zone()])
        assert check.inside is True
        assert check.violated is False
        assert check.distance == 0

    def test_member_111m_away_is_outside(self):
        [check] = evaluate_safe_zones(0.0, 0.001, [make_zone()])
        assert check.inside is False
        assert check.violated is True
        assert check.distance == pytest.approx(111.2, abs=0.5)

    def test_each_zone_is_checked_independently(self):
        zones = [
            make_zone("Home", 0.0, 0.0, 100),
            make_zone("School", 0.0, 0.01, 2000),
        ]
        checks = evaluate_safe_zones(0.0, 0.005, zones)
        assert [c.zone.name for c in checks] == ["Home", "School"]
        assert [c.violated for c in checks] == [True, False]

    def test_no_zones(self):
        assert evaluate_safe_zones(10.0, 10.0, []) == []

    def test_level_triggered_refires_while_outside(self):
        # Previous position is ignored unless edge-triggering is requested
        [check] = evaluate_safe_zones(0.0, 0.01, [make_zone()], previous=(0.0, 0.02))
        assert check.violated is True

    def test_edge_triggered_fires_on_exit(self):
        [check] = evaluate_safe_zones(
            0.0, 0.01, [make_zone()], previous=(0.0, 0.0), edge_triggered=True
        )
        assert check.violated is True

    def test_edge_triggered_is_quiet_while_staying_outside(self):
        [check] = evaluate_safe_zones(
            0.0, 0.01, [make_zone()], previous=(0.0, 0.02), edge_triggered=True
        )
        assert check.inside is False
        assert check.violated is False

    def test_edge_triggered_without_history_fires(self):
        [check] = evaluate_safe_zones(0.0, 0.01, [make_zone()], edge_triggered=True)
        assert check.violated is True

    def test_is_within_zone_boundary(self):
        zone = make_zone(radius=calculate_distance(0, 0, 0, 0.001))
        assert is_within_zone(0.0, 0.001, zone) is True
