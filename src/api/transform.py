"""
Transform endpoints.

    POST /api/v1/transform        single point, by mode
    POST /api/v1/transform/ewkb   hex EWKB, by SRID / CRS spec
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from engine.coord import TransformKind, apply
from engine.ewkb import EwkbError, read_header
from engine.metrics import roundtrip_error_m, shift_m
from engine.transform import eviltransform
from shared.exceptions import MissingSridError, UnknownCrsError

logger = logging.getLogger("api")

router = APIRouter(prefix="/api/v1", tags=["transform"])


class PointRequest(BaseModel):
    latitude: float = Field(..., description="latitude in degrees")
    longitude: float = Field(..., description="longitude in degrees")
    mode: str = Field(..., description="wgs2gcj | gcj2wgs | wgs2bd | bd2wgs | gcj2bd | bd2gcj")


class Coordinate(BaseModel):
    latitude: float
    longitude: float


class PointResponse(BaseModel):
    original: Coordinate
    transformed: Coordinate
    mode: str
    shift_m: float
    roundtrip_error_m: float


class EwkbRequest(BaseModel):
    ewkb: str = Field(..., description="hex-encoded EWKB")
    to: Union[int, str]
    from_: Optional[Union[int, str]] = Field(None, alias="from")


class EwkbResponse(BaseModel):
    ewkb: str
    srid: int


@router.post("/transform", response_model=PointResponse)
def transform_point(req: PointRequest):
    """Convert one point between WGS84 / GCJ02 / BD09."""
    try:
        kind = TransformKind.from_name(req.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"INVALID_MODE: {e}")

    lat, lng = apply(kind, req.latitude, req.longitude)
    return PointResponse(
        original=Coordinate(latitude=req.latitude, longitude=req.longitude),
        transformed=Coordinate(latitude=lat, longitude=lng),
        mode=kind.name.lower(),
        shift_m=shift_m(kind, req.latitude, req.longitude),
        roundtrip_error_m=roundtrip_error_m(kind, req.latitude, req.longitude),
    )


@router.post("/transform/ewkb", response_model=EwkbResponse)
def transform_ewkb(req: EwkbRequest):
    """Transform a hex EWKB geometry to another SRID."""
    try:
        raw = bytes.fromhex(req.ewkb)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"INVALID_HEX: {e}")

    try:
        out = eviltransform(raw, req.to, req.from_)
    except EwkbError as e:
        logger.error(f"EWKB Error: {e}")
        raise HTTPException(status_code=422, detail=f"INVALID_EWKB: {e}")
    except UnknownCrsError as e:
        raise HTTPException(status_code=400, detail=f"UNKNOWN_CRS: {e}")
    except MissingSridError as e:
        raise HTTPException(status_code=400, detail=f"MISSING_SRID: {e}")

    return EwkbResponse(ewkb=out.hex().upper(), srid=read_header(out).srid)
