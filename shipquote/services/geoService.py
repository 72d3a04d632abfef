"""
Geo Service
===========

Location helpers used by callers of the pricing engine:

- ``state_code`` pulls the two-letter state out of a validated location
  string such as ``"Austin, TX"``.
- ``estimate_miles`` gives a straight-line mileage estimate between two
  coordinates when a quote has no routed mileage.
- ``route_bucket_for_miles`` maps a mileage onto the route-modifier bucket
  key configured in settings.

Uses the haversine formula for great-circle distance between two points
on Earth's surface.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Sequence

from shipquote.core.config import Settings, settings

# Earth's mean radius in miles
EARTH_RADIUS_MILES: float = 3958.8

_STATE_CODE = re.compile(r"^[A-Za-z]{2}$")


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate the great-circle distance between two points using the
    haversine formula.

    Args:
        lat1: Latitude of point 1 in decimal degrees.
        lon1: Longitude of point 1 in decimal degrees.
        lat2: Latitude of point 2 in decimal degrees.
        lon2: Longitude of point 2 in decimal degrees.

    Returns:
        Distance in miles.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def estimate_miles(
    origin: Sequence[float],
    destination: Sequence[float],
) -> float:
    """Whole-mile straight-line distance between ``(lat, lon)`` pairs."""
    return float(round(haversine_distance(origin[0], origin[1], destination[0], destination[1])))


def state_code(location: Optional[str]) -> Optional[str]:
    """Extract an upper-cased two-letter state code.

    Accepts a bare code (``"tx"``) or a ``"City, ST"`` / ``"City, ST 78701"``
    location.  Returns None when no code can be found.
    """
    if not location:
        return None
    text = location.strip()
    if "," in text:
        text = text.split(",")[1].strip()
        text = text.split()[0] if text else ""
    if _STATE_CODE.match(text):
        return text.upper()
    return None


def route_bucket_for_miles(miles: float, config: Optional[Settings] = None) -> str:
    """Return the route bucket key for ``miles`` (upper bounds inclusive)."""
    config = config or settings
    if miles <= config.route_short_max_miles:
        return config.route_short_key
    if miles <= config.route_medium_max_miles:
        return config.route_medium_key
    return config.route_long_key
