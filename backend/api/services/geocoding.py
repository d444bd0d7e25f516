# backend/api/services/geocoding.py
from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from models.directions import GeoPoint, ProviderPlace
from services.errors import NotFound, ProviderError
from services.resilient_fetch import fetch_with_retry

log = logging.getLogger(__name__)

NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org").rstrip("/")
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "FastestPathFinder/1.0")
GEOCODER_LANGUAGE = os.getenv("GEOCODER_LANGUAGE", "en")
GEOCODER_REFERER = os.getenv("GEOCODER_REFERER", "").strip()

_PLACES = TypeAdapter(List[ProviderPlace])


class GeocodingProvider(ABC):
    """Turns a free-text address into a GeoPoint."""

    @abstractmethod
    def resolve(self, query: str) -> GeoPoint:
        """Return the provider's first candidate or raise NotFound."""


class NominatimGeocoder(GeocodingProvider):
    """Geocoder backed by the Nominatim /search endpoint."""

    def __init__(
        self,
        base_url: str = NOMINATIM_URL,
        *,
        user_agent: str = GEOCODER_USER_AGENT,
        language: str = GEOCODER_LANGUAGE,
        referer: Optional[str] = GEOCODER_REFERER or None,
        session: Optional[requests.Session] = None,
        fetch: Callable[..., requests.Response] = fetch_with_retry,
    ):
        if not user_agent:
            # Nominatim's usage policy requires an identifying User-Agent
            raise ValueError("A geocoder User-Agent is required")
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.language = language
        self.referer = referer
        self.session = session
        self.fetch = fetch

    def _headers(self) -> dict:
        headers = {
            "User-Agent": self.user_agent,
            "Accept-Language": self.language,
        }
        if self.referer:
            headers["Referer"] = self.referer
        return headers

    def resolve(self, query: str) -> GeoPoint:
        log.info("Geocoding with Nominatim: %r", query)
        res = self.fetch(
            f"{self.base_url}/search",
            params={"format": "json", "q": query, "limit": 1},
            headers=self._headers(),
            session=self.session,
        )
        if not res.ok:
            raise ProviderError(f"Nominatim error: {res.status_code} {res.reason or ''}".strip())

        try:
            places = _PLACES.validate_python(res.json())
        except ValueError as e:
            # covers both an unparseable body and a ValidationError
            raise ProviderError(f"Nominatim returned an unexpected payload: {e}") from e

        if not places:
            raise NotFound(f"Location not found: {query}")

        try:
            return places[0].to_geo_point()
        except ValidationError as e:
            raise ProviderError(f"Nominatim returned invalid coordinates: {e}") from e
