# backend/api/models/directions.py
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

# ---------- PUBLIC MODELS (stable contract) ----------

class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    label: str = ""


class RouteStep(BaseModel):
    # every field is already human-formatted text
    model_config = ConfigDict(frozen=True)

    instruction: str
    distance: str
    duration: str


class LineString(BaseModel):
    """GeoJSON LineString. Coordinates are [lon, lat] pairs."""
    model_config = ConfigDict(frozen=True)

    type: Literal["LineString"] = "LineString"
    coordinates: Tuple[Tuple[float, float], ...] = ()

    def latlon(self) -> List[Tuple[float, float]]:
        """Explicit conversion for consumers that want (lat, lon)."""
        return [(lat, lon) for lon, lat in self.coordinates]


class RouteResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance: str
    duration: str
    steps: Tuple[RouteStep, ...]
    geometry: Optional[LineString] = None
    start: GeoPoint
    end: GeoPoint
    # only set when the router answered with an encoded polyline
    polyline: Optional[str] = None


class DirectionsRequest(BaseModel):
    # presence is checked by the pipeline so a missing field is a 400, not a 422
    source: Optional[str] = Field(None, description="Free-text start address")
    destination: Optional[str] = Field(None, description="Free-text end address")


class ErrorResponse(BaseModel):
    error: str


# ---------- PROVIDER PAYLOADS (partial shapes, boundary only) ----------

class ProviderPlace(BaseModel):
    # Nominatim sends lat/lon as strings; pydantic parses them to float
    lat: float
    lon: float
    display_name: str = ""

    def to_geo_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon, label=self.display_name)


class ProviderManeuver(BaseModel):
    type: Optional[str] = None
    modifier: Optional[str] = None


class ProviderStep(BaseModel):
    maneuver: ProviderManeuver = Field(default_factory=ProviderManeuver)
    name: Optional[str] = None
    distance: float
    duration: float


class ProviderLeg(BaseModel):
    steps: List[ProviderStep] = Field(default_factory=list)


class ProviderItinerary(BaseModel):
    distance: float
    duration: float
    # GeoJSON when geometries=geojson, encoded polyline string otherwise
    geometry: Optional[Union[LineString, str]] = None
    legs: List[ProviderLeg] = Field(default_factory=list)


class ProviderRoute(BaseModel):
    code: str
    message: Optional[str] = None
    routes: List[ProviderItinerary] = Field(default_factory=list)
