import pytest
from fastapi.testclient import TestClient

from impact_api.app import app, get_population_source
from impact_api.config import get_settings, load_settings
from impact_api.params import GeoLocation, ImpactParameters
from impact_api.population import RegionalPopulation


@pytest.fixture
def rocky_10m():
    return ImpactParameters(diameter_m=10.0, velocity_kms=5.0, impact_angle_deg=45.0, composition="rocky")


@pytest.fixture
def new_york():
    return GeoLocation(40.7128, -74.0060)


@pytest.fixture
def mid_pacific():
    return GeoLocation(0.0, -140.0)


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: load_settings(env={})
    app.dependency_overrides[get_population_source] = lambda: RegionalPopulation()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
