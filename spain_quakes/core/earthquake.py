"""Earthquake data models and parsing - Pure functions.

This module handles parsing USGS GeoJSON data into typed Earthquake objects.
All functions are pure with no side effects.

Unlike an alerting pipeline, the table shows whatever the feed returns:
absent fields are kept as None instead of discarding the record.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake data model.

    Attributes:
        id: Unique USGS event ID
        magnitude: Earthquake magnitude, None when the feed has no value
        place: Human-readable location description (may be None)
        time_ms: Event timestamp in epoch milliseconds
        url: USGS event detail URL
        longitude: Epicenter longitude
        latitude: Epicenter latitude
        depth_km: Depth in kilometers
    """
    id: str
    magnitude: float | None
    place: str | None
    time_ms: int
    url: str = ""
    longitude: float | None = None
    latitude: float | None = None
    depth_km: float | None = None

    @property
    def time(self) -> datetime:
        """Event time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.time_ms / 1000, tz=timezone.utc)


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def parse_earthquake(feature: dict[str, Any]) -> Earthquake | None:
    """Parse a single GeoJSON feature into an Earthquake.

    Pure function: takes raw dict, returns typed Earthquake or None if the
    feature cannot be read at all.

    Args:
        feature: GeoJSON feature dict from USGS API

    Returns:
        Earthquake object or None if parsing fails
    """
    try:
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = list(geometry.get("coordinates") or [])
        coords += [None] * (3 - len(coords))

        place = props.get("place")

        return Earthquake(
            id=str(feature.get("id") or ""),
            magnitude=_optional_float(props.get("mag")),
            place=str(place) if place is not None else None,
            time_ms=int(props.get("time") or 0),
            url=props.get("url") or "",
            longitude=_optional_float(coords[0]),
            latitude=_optional_float(coords[1]),
            depth_km=_optional_float(coords[2]),
        )
    except (AttributeError, TypeError, ValueError):
        return None


def parse_earthquakes(geojson: dict[str, Any]) -> list[Earthquake]:
    """Parse USGS GeoJSON response into list of Earthquakes.

    Pure function: skips unreadable features and keeps feed order.
    A missing or null ``features`` member yields an empty list.

    Args:
        geojson: Full GeoJSON FeatureCollection from USGS API

    Returns:
        List of Earthquake objects

    Raises:
        ValueError: If ``features`` is present but not a list
    """
    features = geojson.get("features") or []
    if not isinstance(features, list):
        raise ValueError(f"Malformed feed: features is {type(features).__name__}")
    earthquakes = []

    for feature in features:
        earthquake = parse_earthquake(feature)
        if earthquake is not None:
            earthquakes.append(earthquake)

    return earthquakes
