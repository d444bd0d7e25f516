import pytest

from models.directions import GeoPoint
from fakes import FakeGeocoder, FakeRouter, osrm_payload
from services.directions import DirectionsPipeline


@pytest.fixture
def berlin_places():
    return {
        "Brandenburg Gate": GeoPoint(lat=52.5163, lon=13.3777, label="Brandenburger Tor, Berlin"),
        "Alexanderplatz": GeoPoint(lat=52.5219, lon=13.4132, label="Alexanderplatz, Berlin"),
    }


@pytest.fixture
def geocoder(berlin_places):
    return FakeGeocoder(berlin_places)


@pytest.fixture
def router():
    return FakeRouter(osrm_payload())


@pytest.fixture
def pipeline(geocoder, router):
    return DirectionsPipeline(geocoder, router)
