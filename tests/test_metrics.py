"""
Unit tests for conversion displacement metrics.
"""

import pytest

from engine.coord import TransformKind
from engine.metrics import haversine_m, roundtrip_error_m, shift_m


def test_haversine_distance():
    # 0.001 degree of latitude is roughly 111.2 meters
    distance = haversine_m(39.915, 116.404, 39.916, 116.404)
    assert 110 < distance < 112


def test_haversine_same_point():
    assert haversine_m(30.0, 120.0, 30.0, 120.0) == 0.0


def test_shift_inside_china():
    # GCJ02 moves Beijing by roughly half a kilometre
    assert 400 < shift_m(TransformKind.WGS2GCJ, 39.915, 116.404) < 700


@pytest.mark.parametrize("kind", list(TransformKind))
def test_shift_outside_china_is_zero(kind):
    assert shift_m(kind, 30.0, -120.0) == 0.0


def test_roundtrip_error_is_sub_meter_in_beijing():
    err = roundtrip_error_m(TransformKind.WGS2GCJ, 39.915, 116.404)
    assert 0.0 < err < 1.0


@pytest.mark.parametrize("kind", [TransformKind.GCJ2BD, TransformKind.WGS2BD])
def test_roundtrip_error_bd(kind):
    assert roundtrip_error_m(kind, 31.2304, 121.4737) < 5.0
