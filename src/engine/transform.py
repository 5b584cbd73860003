"""
SRID-aware geometry transformation relying on the EWKB walker and pyproj.
Goal: move an EWKB geometry between any two SRIDs, where GCJ02 and BD09 are
handled natively and everything else is delegated to pyproj via WGS84.
"""

import logging
import struct
from functools import lru_cache
from typing import Optional, Tuple, Union

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from shared.config import settings
from shared.constants import BD09_ALIASES, EWKB_SRID, GCJ02_ALIASES
from shared.exceptions import MissingSridError, UnknownCrsError

from .coord import TransformKind
from .ewkb import Endian, read_header, rewrite_in_place, transform_coords_in_place

logger = logging.getLogger(__name__)

CrsSpec = Union[int, str]


def _custom_srids() -> Tuple[int, int]:
    return settings.GCJ02_SRID, settings.BD09_SRID


def resolve_srid(spec: CrsSpec) -> int:
    """
    Resolve an SRID or textual CRS spec ("GCJ02", "BD-09", "EPSG:3857", ...)
    to an integer SRID.
    """
    if isinstance(spec, int):
        return spec

    text = str(spec).strip().upper()
    gcj, bd = _custom_srids()
    if text in GCJ02_ALIASES or text in (str(gcj), f"EPSG:{gcj}"):
        return gcj
    if text in BD09_ALIASES or text in (str(bd), f"EPSG:{bd}"):
        return bd
    if text.isdigit():
        return int(text)

    try:
        epsg = CRS.from_user_input(spec).to_epsg()
    except CRSError as e:
        raise UnknownCrsError(f"cannot resolve CRS: {spec!r}") from e
    if epsg is None:
        raise UnknownCrsError(f"CRS has no EPSG code: {spec!r}")
    return epsg


def kind_for(src: int, dst: int) -> Optional[TransformKind]:
    """Engine mode for a pair of natively supported SRIDs, else None."""
    wgs = settings.WGS84_SRID
    gcj, bd = _custom_srids()
    return {
        (wgs, gcj): TransformKind.WGS2GCJ,
        (gcj, wgs): TransformKind.GCJ2WGS,
        (wgs, bd): TransformKind.WGS2BD,
        (bd, wgs): TransformKind.BD2WGS,
        (gcj, bd): TransformKind.GCJ2BD,
        (bd, gcj): TransformKind.BD2GCJ,
    }.get((src, dst))


# Build Transformers once per SRID pair to avoid overhead
# always_xy=True forces input/output to be (lon, lat) / (x, y) rather than (lat, lon)
@lru_cache(maxsize=64)
def _get_transformer(src: int, dst: int) -> Transformer:
    return Transformer.from_crs(f"EPSG:{src}", f"EPSG:{dst}", always_xy=True)


def reproject_in_place(buffer: bytearray, src: int, dst: int) -> None:
    """Reproject every coordinate in ``buffer`` between two EPSG SRIDs."""
    try:
        transformer = _get_transformer(src, dst)
    except CRSError as e:
        raise UnknownCrsError(f"no transformation from EPSG:{src} to EPSG:{dst}") from e

    def project(lat: float, lng: float) -> Tuple[float, float]:
        x, y = transformer.transform(xx=lng, yy=lat)
        return y, x

    transform_coords_in_place(buffer, project)


def set_srid(buffer, srid: int) -> bytearray:
    """
    Return a copy of ``buffer`` whose top-level header carries ``srid``.
    A header without an SRID field gets the flag bit and 4 bytes inserted.
    """
    header = read_header(buffer)
    u32 = struct.Struct(">I" if header.endian is Endian.BIG else "<I")
    out = bytearray(buffer)

    if header.srid_offset is not None:
        u32.pack_into(out, header.srid_offset, srid)
        return out

    (type_word,) = u32.unpack_from(out, 1)
    u32.pack_into(out, 1, type_word | EWKB_SRID)
    out[5:5] = u32.pack(srid)
    return out


def eviltransform(ewkb, to: CrsSpec, from_: Optional[CrsSpec] = None) -> bytearray:
    """
    Transform an EWKB geometry to the CRS ``to``.

    The source SRID is ``from_`` when given, else the one embedded in the
    geometry. The input is never modified; a new buffer stamped with the
    destination SRID is returned.
    """
    buf = bytearray(ewkb)
    dst = resolve_srid(to)
    if from_ is not None:
        src = resolve_srid(from_)
    else:
        src = read_header(buf).srid
        if not src:
            raise MissingSridError("geometry has no SRID and no source CRS was given")

    wgs = settings.WGS84_SRID
    custom = _custom_srids()

    if src == dst:
        logger.debug("SRID %s -> %s: identity", src, dst)
        return set_srid(buf, dst)

    if src not in custom and dst not in custom:
        logger.debug("SRID %s -> %s: pyproj", src, dst)
        reproject_in_place(buf, src, dst)
    elif src in custom and dst in custom:
        logger.debug("SRID %s -> %s: engine", src, dst)
        rewrite_in_place(buf, kind_for(src, dst))
    elif src in custom:
        logger.debug("SRID %s -> %s: engine via %s", src, dst, wgs)
        rewrite_in_place(buf, kind_for(src, wgs))
        if dst != wgs:
            reproject_in_place(buf, wgs, dst)
    else:
        logger.debug("SRID %s -> %s: %s then engine", src, dst, wgs)
        if src != wgs:
            reproject_in_place(buf, src, wgs)
        rewrite_in_place(buf, kind_for(wgs, dst))

    return set_srid(buf, dst)
