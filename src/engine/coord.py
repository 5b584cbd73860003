"""
WGS84 / GCJ02 / BD09 point conversions.

All functions take and return (lat, lng) in degrees. Points outside the
obfuscation region pass through unchanged; WGS<->BD composes through GCJ02
so the region gate applies at each step.
"""

import math
from enum import Enum
from typing import Tuple

from shared.constants import (
    CHINA_LAT_RANGE,
    CHINA_LNG_RANGE,
    EARTH_R,
    EE,
    MODE_BD2GCJ,
    MODE_BD2WGS,
    MODE_GCJ2BD,
    MODE_GCJ2WGS,
    MODE_WGS2BD,
    MODE_WGS2GCJ,
)

X_PI = math.pi * 3000.0 / 180.0


class TransformKind(Enum):
    WGS2GCJ = MODE_WGS2GCJ
    GCJ2WGS = MODE_GCJ2WGS
    WGS2BD = MODE_WGS2BD
    BD2WGS = MODE_BD2WGS
    GCJ2BD = MODE_GCJ2BD
    BD2GCJ = MODE_BD2GCJ

    @property
    def inverse(self) -> "TransformKind":
        return _INVERSE[self]

    @classmethod
    def from_name(cls, name: str) -> "TransformKind":
        """Look up a kind by case-insensitive name, e.g. ``"wgs2gcj"``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unsupported transform mode: {name}") from None


_INVERSE = {
    TransformKind.WGS2GCJ: TransformKind.GCJ2WGS,
    TransformKind.GCJ2WGS: TransformKind.WGS2GCJ,
    TransformKind.WGS2BD: TransformKind.BD2WGS,
    TransformKind.BD2WGS: TransformKind.WGS2BD,
    TransformKind.GCJ2BD: TransformKind.BD2GCJ,
    TransformKind.BD2GCJ: TransformKind.GCJ2BD,
}


def out_of_china(lat: float, lng: float) -> bool:
    return (
        lng < CHINA_LNG_RANGE[0]
        or lng > CHINA_LNG_RANGE[1]
        or lat < CHINA_LAT_RANGE[0]
        or lat > CHINA_LAT_RANGE[1]
    )


def _transform(x: float, y: float) -> Tuple[float, float]:
    """Raw GCJ02 perturbation at offset (x, y) = (lng - 105, lat - 35)."""
    xy = x * y
    abs_x = math.sqrt(abs(x))
    x_pi = x * math.pi
    y_pi = y * math.pi

    d = 20.0 * math.sin(6.0 * x_pi) + 20.0 * math.sin(2.0 * x_pi)
    lat = d
    lng = d

    lat += 20.0 * math.sin(y_pi) + 40.0 * math.sin(y_pi / 3.0)
    lng += 20.0 * math.sin(x_pi) + 40.0 * math.sin(x_pi / 3.0)

    lat += 160.0 * math.sin(y_pi / 12.0) + 320.0 * math.sin(y_pi / 30.0)
    lng += 150.0 * math.sin(x_pi / 12.0) + 300.0 * math.sin(x_pi / 30.0)

    d = 2.0 / 3.0
    lat *= d
    lng *= d

    lat += -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * xy + 0.2 * abs_x
    lng += 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * xy + 0.1 * abs_x

    return lat, lng


def _delta(lat: float, lng: float) -> Tuple[float, float]:
    """Scale the raw perturbation into degrees on the WGS84 ellipsoid."""
    d_lat, d_lng = _transform(lng - 105.0, lat - 35.0)
    rad_lat = math.radians(lat)
    sin_lat = math.sin(rad_lat)
    magic = 1.0 - EE * sin_lat * sin_lat
    sqrt_magic = math.sqrt(magic)

    d_lat = (d_lat * 180.0) / (((EARTH_R * (1.0 - EE)) / (magic * sqrt_magic)) * math.pi)
    d_lng = (d_lng * 180.0) / ((EARTH_R / sqrt_magic) * math.cos(rad_lat) * math.pi)
    return d_lat, d_lng


def wgs2gcj(lat: float, lng: float) -> Tuple[float, float]:
    if out_of_china(lat, lng):
        return lat, lng
    d_lat, d_lng = _delta(lat, lng)
    return lat + d_lat, lng + d_lng


def gcj2wgs(lat: float, lng: float) -> Tuple[float, float]:
    """
    One-step inverse of wgs2gcj.
    The delta is evaluated at the GCJ02 point, so the result is only
    accurate to roughly a metre.
    """
    if out_of_china(lat, lng):
        return lat, lng
    d_lat, d_lng = _delta(lat, lng)
    return lat - d_lat, lng - d_lng


def gcj2bd(lat: float, lng: float) -> Tuple[float, float]:
    if out_of_china(lat, lng):
        return lat, lng
    z = math.hypot(lng, lat) + 0.00002 * math.sin(lat * X_PI)
    theta = math.atan2(lat, lng) + 0.000003 * math.cos(lng * X_PI)
    return z * math.sin(theta) + 0.006, z * math.cos(theta) + 0.0065


def bd2gcj(lat: float, lng: float) -> Tuple[float, float]:
    # gate on the BD09 coordinates, before the constant offset is removed
    if out_of_china(lat, lng):
        return lat, lng
    x = lng - 0.0065
    y = lat - 0.006
    z = math.hypot(x, y) - 0.00002 * math.sin(y * X_PI)
    theta = math.atan2(y, x) - 0.000003 * math.cos(x * X_PI)
    return z * math.sin(theta), z * math.cos(theta)


def wgs2bd(lat: float, lng: float) -> Tuple[float, float]:
    gcj_lat, gcj_lng = wgs2gcj(lat, lng)
    return gcj2bd(gcj_lat, gcj_lng)


def bd2wgs(lat: float, lng: float) -> Tuple[float, float]:
    gcj_lat, gcj_lng = bd2gcj(lat, lng)
    return gcj2wgs(gcj_lat, gcj_lng)


_DISPATCH = {
    TransformKind.WGS2GCJ: wgs2gcj,
    TransformKind.GCJ2WGS: gcj2wgs,
    TransformKind.GCJ2BD: gcj2bd,
    TransformKind.BD2GCJ: bd2gcj,
    TransformKind.WGS2BD: wgs2bd,
    TransformKind.BD2WGS: bd2wgs,
}


def apply(kind: TransformKind, lat: float, lng: float) -> Tuple[float, float]:
    """Convert one point. Never fails; no range validation is done."""
    return _DISPATCH[kind](lat, lng)
