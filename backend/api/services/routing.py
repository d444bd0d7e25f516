# backend/api/services/routing.py
from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

import requests
from pydantic import ValidationError

from models.directions import GeoPoint, LineString, ProviderRoute
from services.errors import NoRouteFound, ProviderError
from services.resilient_fetch import fetch_with_retry

log = logging.getLogger(__name__)

OSRM_URL = os.getenv("OSRM_URL", "https://router.project-osrm.org").rstrip("/")
OSRM_PROFILE = os.getenv("OSRM_PROFILE", "driving")
# "geojson" (default) or "polyline" for routers without GeoJSON output
OSRM_GEOMETRIES = os.getenv("OSRM_GEOMETRIES", "geojson").lower()


# ---------------- Geometry helpers ----------------
def decode_polyline(polyline_str: str, precision: int = 5) -> List[Tuple[float, float]]:
    """
    Decode an encoded polyline into GeoJSON-ordered (lon, lat) pairs.
    The encoding itself stores lat first.
    """
    factor = 10 ** precision
    index, lat, lng, coordinates = 0, 0, 0, []
    changes = {"lat": 0, "lng": 0}
    while index < len(polyline_str):
        for unit in ["lat", "lng"]:
            shift, result = 0, 0
            while True:
                b = ord(polyline_str[index]) - 63
                index += 1
                result |= (b & 0x1F) << shift
                shift += 5
                if b < 0x20:
                    break
            changes[unit] = ~(result >> 1) if (result & 1) else (result >> 1)
        lat += changes["lat"]
        lng += changes["lng"]
        coordinates.append((lng / factor, lat / factor))
    return coordinates


def format_coordinates(points: List[GeoPoint]) -> str:
    """OSRM wants 'lon,lat;lon,lat;...'"""
    return ";".join(f"{p.lon},{p.lat}" for p in points)


# ---------------- Providers ----------------
class RoutingProvider(ABC):
    """Computes a drivable path between two resolved points."""

    @abstractmethod
    def route(self, origin: GeoPoint, destination: GeoPoint) -> ProviderRoute:
        """Return a route with at least one itinerary or raise NoRouteFound."""


class OsrmRouter(RoutingProvider):
    """
    OSRM /route client.

    Requests full overview geometry and per-step maneuvers, since the
    response contract needs both the path and the turn list.
    """

    def __init__(
        self,
        base_url: str = OSRM_URL,
        *,
        profile: str = OSRM_PROFILE,
        geometries: str = OSRM_GEOMETRIES,
        language: str = "en",
        session: Optional[requests.Session] = None,
        fetch: Callable[..., requests.Response] = fetch_with_retry,
    ):
        if geometries not in ("geojson", "polyline"):
            raise ValueError(f"Unsupported OSRM geometries: {geometries}")
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.geometries = geometries
        self.language = language
        self.session = session
        self.fetch = fetch

    def route(self, origin: GeoPoint, destination: GeoPoint) -> ProviderRoute:
        coords = format_coordinates([origin, destination])
        log.info("Requesting route from OSRM: %s", coords)
        res = self.fetch(
            f"{self.base_url}/route/v1/{self.profile}/{coords}",
            params={
                "overview": "full",
                "geometries": self.geometries,
                "steps": "true",
            },
            headers={"Accept-Language": self.language},
            session=self.session,
        )

        # OSRM puts its failure reason in a JSON body, usually with a 4xx
        try:
            data = res.json()
        except ValueError as e:
            raise ProviderError(f"OSRM error: {res.status_code} {res.reason or ''}".strip()) from e

        if not isinstance(data, dict):
            raise ProviderError("OSRM returned an unexpected payload")

        log.info("OSRM response status: %s", data.get("code"))
        if data.get("code") != "Ok" or not data.get("routes"):
            raise NoRouteFound(data.get("message") or "No route found")

        try:
            return ProviderRoute.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f"OSRM returned an unexpected payload: {e}") from e


def itinerary_geometry(geometry) -> Tuple[Optional[LineString], Optional[str]]:
    """
    Normalize provider geometry to (LineString, encoded polyline or None).
    """
    if geometry is None:
        return None, None
    if isinstance(geometry, str):
        return LineString(coordinates=tuple(decode_polyline(geometry))), geometry
    return geometry, None
