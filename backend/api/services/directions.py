# backend/api/services/directions.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict

from models.directions import GeoPoint, ProviderItinerary, RouteResult
from services.errors import InvalidRequest, NoRouteFound
from services.formatting import format_distance, format_duration, format_step
from services.geocoding import GeocodingProvider, NominatimGeocoder
from services.routing import OsrmRouter, RoutingProvider, itinerary_geometry

log = logging.getLogger(__name__)


def format_route(itinerary: ProviderItinerary, start: GeoPoint, end: GeoPoint) -> RouteResult:
    """Map one provider itinerary (first leg only) into the stable contract."""
    leg = itinerary.legs[0] if itinerary.legs else None
    steps = tuple(format_step(s) for s in (leg.steps if leg else []))
    geometry, polyline = itinerary_geometry(itinerary.geometry)
    return RouteResult(
        distance=format_distance(itinerary.distance),
        duration=format_duration(itinerary.duration),
        steps=steps,
        geometry=geometry,
        start=start,
        end=end,
        polyline=polyline,
    )


class DirectionsPipeline:
    """
    Address pair -> RouteResult.

    Holds nothing but its providers, so one instance can serve any number
    of concurrent requests.
    """

    def __init__(self, geocoder: GeocodingProvider, router: RoutingProvider):
        self.geocoder = geocoder
        self.router = router

    def _resolve_pair(self, source: str, destination: str) -> Dict[str, GeoPoint]:
        # both lookups run at once; whichever fails first fails the request
        pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="geocode")
        try:
            futures = {
                pool.submit(self.geocoder.resolve, source): "source",
                pool.submit(self.geocoder.resolve, destination): "destination",
            }
            resolved: Dict[str, GeoPoint] = {}
            for fut in as_completed(futures):
                resolved[futures[fut]] = fut.result()
            return resolved
        finally:
            # a sibling lookup already running finishes on its own; its outcome is discarded
            pool.shutdown(wait=False, cancel_futures=True)

    def plan(self, source: str, destination: str) -> RouteResult:
        if not (source and source.strip()) or not (destination and destination.strip()):
            log.info("Missing required fields: source=%s destination=%s", bool(source), bool(destination))
            raise InvalidRequest("Source and destination are required")

        points = self._resolve_pair(source.strip(), destination.strip())
        start, end = points["source"], points["destination"]

        provider_route = self.router.route(start, end)
        if not provider_route.routes:
            raise NoRouteFound(provider_route.message or "No route found")

        result = format_route(provider_route.routes[0], start, end)
        log.info(
            "Route prepared: distance=%s duration=%s steps=%d",
            result.distance, result.duration, len(result.steps),
        )
        return result


def build_default_pipeline() -> DirectionsPipeline:
    """Nominatim + OSRM wired from environment settings."""
    return DirectionsPipeline(NominatimGeocoder(), OsrmRouter())
