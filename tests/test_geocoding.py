import pytest

from fakes import FakeResponse, FakeSession
from services.errors import NotFound, ProviderError
from services.geocoding import NominatimGeocoder


def _geocoder(*responses, **kwargs):
    session = FakeSession(list(responses))
    return NominatimGeocoder("https://nominatim.test/", session=session, **kwargs), session


def test_resolve_takes_first_candidate():
    geocoder, session = _geocoder(FakeResponse([
        {"lat": "52.5163", "lon": "13.3777", "display_name": "Brandenburger Tor, Berlin"},
        {"lat": "0", "lon": "0", "display_name": "somewhere else"},
    ]))

    point = geocoder.resolve("Brandenburg Gate")

    assert point.lat == pytest.approx(52.5163)
    assert point.lon == pytest.approx(13.3777)
    assert point.label == "Brandenburger Tor, Berlin"

    call = session.calls[0]
    assert call["url"] == "https://nominatim.test/search"
    assert call["params"] == {"format": "json", "q": "Brandenburg Gate", "limit": 1}


def test_resolve_sends_identifying_headers():
    geocoder, session = _geocoder(
        FakeResponse([{"lat": "1", "lon": "2", "display_name": "x"}]),
        user_agent="FastestPathFinder/test",
        language="de",
        referer="https://example.org",
    )
    geocoder.resolve("x")

    assert session.calls[0]["headers"] == {
        "User-Agent": "FastestPathFinder/test",
        "Accept-Language": "de",
        "Referer": "https://example.org",
    }


def test_no_candidates_is_not_found():
    geocoder, _ = _geocoder(FakeResponse([]))

    with pytest.raises(NotFound) as info:
        geocoder.resolve("Atlantis")

    assert "Location not found" in str(info.value)
    assert info.value.status_code == 400


def test_http_error_is_provider_error():
    geocoder, session = _geocoder(FakeResponse(None, status_code=503, reason="Service Unavailable"))

    with pytest.raises(ProviderError) as info:
        geocoder.resolve("Berlin")

    assert str(info.value) == "Nominatim error: 503 Service Unavailable"
    assert info.value.status_code == 500
    assert len(session.calls) == 1


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse.not_json(status_code=200, reason="OK"),
        FakeResponse([{"lat": "north", "lon": "2"}]),
        FakeResponse({"error": "Unable to geocode"}),
        FakeResponse([{"lat": "95", "lon": "2", "display_name": "off the globe"}]),
    ],
)
def test_malformed_payloads_are_provider_errors(response):
    geocoder, _ = _geocoder(response)

    with pytest.raises(ProviderError):
        geocoder.resolve("Berlin")


def test_user_agent_is_required():
    with pytest.raises(ValueError):
        NominatimGeocoder(user_agent="")
