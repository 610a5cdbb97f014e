# utils/geoutils.py
import math
from typing import Any, Tuple

from utils.exceptions import ValidationError

EARTH_RADIUS_KM = 6371.0


# Haversine distance
def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Compute great-circle distance in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # rounding can push a a hair past 1.0 for antipodal points
    a = min(1.0, a)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def validate_coordinates(lat: Any, lng: Any) -> Tuple[float, float]:
    """
    Parse and range-check a (lat, lng) pair coming from a form.
    Raises ValidationError for non-numeric, non-finite or out-of-range values.
    """
    try:
        lat_f, lng_f = float(lat), float(lng)
    except (TypeError, ValueError):
        raise ValidationError("Latitude and longitude must be numbers.")

    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        raise ValidationError("Latitude and longitude must be finite.")
    if not -90.0 <= lat_f <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90.")
    if not -180.0 <= lng_f <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180.")
    return lat_f, lng_f
