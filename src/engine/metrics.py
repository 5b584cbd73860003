"""
Displacement metrics for coordinate conversions.
"""

from math import radians, sin, cos, sqrt, atan2

from shared.constants import MEAN_EARTH_R

from .coord import TransformKind, apply


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance in meters between two (lat, lng) points.
    """
    dlat = radians(lat2 - lat1)
    dlng = radians(lng2 - lng1)

    a = sin(dlat/2)**2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return MEAN_EARTH_R * c


def shift_m(kind: TransformKind, lat: float, lng: float) -> float:
    """How far a point moves, in meters, when converted with ``kind``."""
    out_lat, out_lng = apply(kind, lat, lng)
    return haversine_m(lat, lng, out_lat, out_lng)


def roundtrip_error_m(kind: TransformKind, lat: float, lng: float) -> float:
    """
    Distance between a point and its conversion there and back again.

    The GCJ02 inverse is a one-step approximation, so this is not zero
    inside the obfuscation region.
    """
    mid_lat, mid_lng = apply(kind, lat, lng)
    back_lat, back_lng = apply(kind.inverse, mid_lat, mid_lng)
    return haversine_m(lat, lng, back_lat, back_lng)
