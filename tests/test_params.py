"""Tests for input validation and composition resolution."""
import math

import pytest

from impact_api.params import (
    Composition,
    GeoLocation,
    ImpactParameters,
    UnknownCompositionWarning,
    ValidationError,
    resolve_composition,
    validate_location,
    validate_parameters,
)


def _params(**kw):
    base = dict(diameter_m=100.0, velocity_kms=20.0, impact_angle_deg=45.0, composition="rocky")
    base.update(kw)
    return ImpactParameters(**base)


class TestBoundaryRejection:

    @pytest.mark.parametrize("field, value", [
        ("diameter_m", 0.0),
        ("diameter_m", -5.0),
        ("diameter_m", 10_000.1),
        ("velocity_kms", 0.0),
        ("velocity_kms", 100.5),
        ("impact_angle_deg", -1.0),
        ("impact_angle_deg", 91.0),
        ("diameter_m", math.nan),
        ("velocity_kms", math.inf),
    ])
    def test_rejected(self, field, value):
        with pytest.raises(ValidationError) as exc:
            validate_parameters(_params(**{field: value}))
        assert exc.value.field == field
        assert field in str(exc.value)
        assert exc.value.valid_range in str(exc.value)

    def test_non_numeric(self):
        with pytest.raises(ValidationError) as exc:
            validate_parameters(_params(diameter_m="big"))
        assert exc.value.field == "diameter_m"

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_parameters(_params(velocity_kms=0.0))

    @pytest.mark.parametrize("kw", [
        dict(diameter_m=10_000.0),
        dict(velocity_kms=100.0),
        dict(impact_angle_deg=0.0),
        dict(impact_angle_deg=90.0),
        dict(diameter_m=1e-3, velocity_kms=1e-3),
    ])
    def test_accepted_edges(self, kw):
        v = validate_parameters(_params(**kw))
        assert v.diameter_m > 0


class TestComposition:

    @pytest.mark.parametrize("name, comp, density", [
        ("rocky", Composition.ROCKY, 3000.0),
        ("metallic", Composition.METALLIC, 7800.0),
        ("iron", Composition.METALLIC, 7800.0),
        ("icy", Composition.ICY, 1500.0),
        ("carbonaceous", Composition.CARBONACEOUS, 2500.0),
        ("mixed", Composition.MIXED, 2500.0),
        ("  Rocky ", Composition.ROCKY, 3000.0),
    ])
    def test_known(self, name, comp, density):
        v = validate_parameters(_params(composition=name))
        assert v.composition is comp
        assert v.density_kgpm3 == density
        assert not v.composition_fallback

    @pytest.mark.parametrize("name", ["unobtainium", "", None])
    def test_unknown_falls_back_to_mixed(self, name):
        with pytest.warns(UnknownCompositionWarning):
            v = validate_parameters(_params(composition=name))
        assert v.composition is Composition.MIXED
        assert v.density_kgpm3 == 2500.0
        assert v.composition_fallback

    def test_resolve_returns_flag(self):
        assert resolve_composition("icy") == (Composition.ICY, False)


class TestValidatedParameters:

    def test_velocity_conversion(self):
        v = validate_parameters(_params(velocity_kms=5.0))
        assert v.velocity_mps == 5000.0

    def test_angle_carried(self):
        v = validate_parameters(_params(impact_angle_deg=30.0))
        assert v.impact_angle_deg == 30.0


class TestLocation:

    @pytest.mark.parametrize("lat, lon, field", [
        (90.5, 0.0, "latitude"),
        (-91.0, 0.0, "latitude"),
        (0.0, 180.5, "longitude"),
        (0.0, -181.0, "longitude"),
    ])
    def test_rejected(self, lat, lon, field):
        with pytest.raises(ValidationError) as exc:
            validate_location(GeoLocation(lat, lon))
        assert exc.value.field == field

    def test_poles_and_antimeridian(self):
        assert validate_location(GeoLocation(90.0, 180.0)) == GeoLocation(90.0, 180.0)
        assert validate_location(GeoLocation(-90.0, -180.0)) == GeoLocation(-90.0, -180.0)
