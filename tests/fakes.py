# tests/fakes.py
"""Deterministic stand-ins for the network and the providers."""
from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from models.directions import GeoPoint, ProviderRoute
from services.errors import NotFound
from services.geocoding import GeocodingProvider
from services.routing import RoutingProvider

_NOT_JSON = object()


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, reason: str = "OK"):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._payload is _NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload

    @classmethod
    def not_json(cls, status_code: int = 502, reason: str = "Bad Gateway") -> "FakeResponse":
        return cls(_NOT_JSON, status_code=status_code, reason=reason)


class FakeSession:
    """
    Plays back `outcomes` in order: an exception instance is raised,
    anything else is returned. Every call is recorded.
    """

    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeGeocoder(GeocodingProvider):
    def __init__(self, places: Dict[str, GeoPoint]):
        self.places = places
        self.queries: List[str] = []
        self._lock = threading.Lock()

    def resolve(self, query: str) -> GeoPoint:
        with self._lock:
            self.queries.append(query)
        if query not in self.places:
            raise NotFound(f"Location not found: {query}")
        return self.places[query]


class FakeRouter(RoutingProvider):
    def __init__(self, payload: Dict[str, Any], error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls: List[tuple] = []

    def route(self, origin: GeoPoint, destination: GeoPoint) -> ProviderRoute:
        self.calls.append((origin, destination))
        if self.error is not None:
            raise self.error
        return ProviderRoute.model_validate(self.payload)


def osrm_payload(steps: Optional[List[Dict[str, Any]]] = None, geometry: Any = "default") -> Dict[str, Any]:
    """A small but complete OSRM /route answer."""
    if steps is None:
        steps = [
            {"maneuver": {"type": "depart"}, "name": "Main St", "distance": 120.4, "duration": 30},
            {"maneuver": {"type": "turn", "modifier": "Left"}, "name": "Oak Ave", "distance": 1530, "duration": 185},
            {"maneuver": {"type": "new_name", "modifier": "straight"}, "name": "", "distance": 800, "duration": 60},
            {"maneuver": {"type": "arrive"}, "name": "Oak Ave", "distance": 0, "duration": 0},
        ]
    if geometry == "default":
        geometry = {"type": "LineString", "coordinates": [[13.388, 52.517], [13.397, 52.529], [13.428, 52.523]]}
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": 2450.4,
                "duration": 275,
                "geometry": geometry,
                "legs": [{"steps": steps, "distance": 2450.4, "duration": 275}],
            }
        ],
        "waypoints": [],
    }
