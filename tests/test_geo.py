"""Tests for continental/oceanic classification and map zones."""
import random

import pytest

from impact_api.assessment import assess
from impact_api.geo import (
    DEEP_OCEAN_DEPTH_M,
    SHELF_DEPTH_M,
    SLOPE_DEPTH_M,
    GeospatialClassifier,
    haversine_km,
    impact_zones_geojson,
    landmass_at,
    ocean_depth_m,
)
from impact_api.params import GeoLocation


class TestLandmass:

    @pytest.mark.parametrize("lat, lon, name", [
        (40.7128, -74.0060, "North America"),
        (-15.0, -50.0, "South America"),
        (48.85, 2.35, "Europe"),
        (35.0, 105.0, "Asia"),
        (0.0, 20.0, "Africa"),
        (-25.0, 135.0, "Australia"),
        (-75.0, 0.0, "Antarctica"),
    ])
    def test_continental(self, lat, lon, name):
        assert landmass_at(lat, lon) == name

    @pytest.mark.parametrize("lat, lon", [(0.0, -140.0), (-40.0, -20.0), (-20.0, 80.0)])
    def test_oceanic(self, lat, lon):
        assert landmass_at(lat, lon) is None


class TestHaversine:

    def test_zero(self):
        assert haversine_km(10.0, 20.0, 10.0, 20.0) == 0.0

    def test_one_degree_meridian(self):
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.05)


class TestOceanDepth:

    @pytest.mark.parametrize("dist, depth", [
        (0.0, SHELF_DEPTH_M),
        (49.9, SHELF_DEPTH_M),
        (50.0, SLOPE_DEPTH_M),
        (199.9, SLOPE_DEPTH_M),
        (200.0, DEEP_OCEAN_DEPTH_M),
        (5000.0, DEEP_OCEAN_DEPTH_M),
    ])
    def test_tiers(self, dist, depth):
        assert ocean_depth_m(dist) == depth


class TestClassify:

    def test_new_york_is_continental(self, new_york):
        c = GeospatialClassifier().classify(new_york)
        assert c.is_continental
        assert c.terrain == "Continental"
        assert c.ocean_depth_m == 0.0
        assert c.distance_from_coast_km == pytest.approx(0.0, abs=1e-6)
        # US East Coast band is 50-250 m
        assert c.coastal_elevation_m == 150.0

    def test_deep_ocean(self, mid_pacific):
        c = GeospatialClassifier().classify(mid_pacific)
        assert not c.is_continental
        assert c.terrain == "Oceanic"
        assert c.coastal_elevation_m == 0.0
        assert c.ocean_depth_m == DEEP_OCEAN_DEPTH_M
        assert c.distance_from_coast_km > 200.0

    def test_slope_off_cape_town(self):
        c = GeospatialClassifier().classify(GeoLocation(-35.5, 18.4241))
        assert not c.is_continental
        assert 50.0 <= c.distance_from_coast_km < 200.0
        assert c.ocean_depth_m == SLOPE_DEPTH_M

    def test_deterministic_without_rng(self, new_york):
        assert GeospatialClassifier().classify(new_york) == GeospatialClassifier().classify(new_york)

    def test_seeded_jitter_is_reproducible_and_bounded(self, new_york):
        a = GeospatialClassifier(random.Random(7)).classify(new_york)
        b = GeospatialClassifier(random.Random(7)).classify(new_york)
        assert a == b
        assert 50.0 <= a.coastal_elevation_m <= 250.0


class TestZonesGeojson:

    def test_land_zones(self, rocky_10m, new_york):
        a = assess(rocky_10m, new_york)
        gj = impact_zones_geojson(new_york, a, steps=32)
        assert gj["type"] == "FeatureCollection"
        zones = {f["properties"]["zone"]: f for f in gj["features"]}
        assert set(zones) == {"crater", "fireball", "blast"}
        blast = zones["blast"]["properties"]
        assert blast["radius_m"] == pytest.approx(blast["radius_km"] * 1000.0)
        assert blast["radius_km"] == pytest.approx(a.blast_radius_km)
        ring = zones["blast"]["geometry"]["coordinates"][0]
        assert len(ring) == 33
        assert ring[0] == ring[-1]

    def test_largest_zone_first(self, rocky_10m, mid_pacific):
        a = assess(rocky_10m, mid_pacific)
        gj = impact_zones_geojson(mid_pacific, a)
        radii = [f["properties"]["radius_km"] for f in gj["features"]]
        assert radii == sorted(radii, reverse=True)
        assert "tsunami" in {f["properties"]["zone"] for f in gj["features"]}

    def test_ring_radius(self, new_york):
        from impact_api.geo import circle_feature
        f = circle_feature(new_york, 10.0, {}, steps=16)
        for lon, lat in f["geometry"]["coordinates"][0]:
            assert haversine_km(new_york.latitude, new_york.longitude, lat, lon) == pytest.approx(10.0, rel=1e-6)
