"""
In-place coordinate rewriting for EWKB geometries.

The walker parses one top-level geometry, descends into every nested
sub-geometry and rewrites the X/Y slots of each coordinate tuple. Type
words, counts, SRIDs and Z/M ordinates are never touched, so the byte
length and structure of the buffer are preserved.

Nothing is rolled back on failure: tuples rewritten before a parse error
stay rewritten, and the buffer must be treated as invalid.
"""

import struct
from enum import Enum
from typing import Callable, NamedTuple, Optional, Tuple, Union

from shared.constants import EWKB_M, EWKB_SRID, EWKB_TYPE_MASK, EWKB_Z

from .coord import TransformKind, apply

PointFunc = Callable[[float, float], Tuple[float, float]]
Buffer = Union[bytearray, memoryview]


class EwkbError(ValueError):
    """Base class for EWKB parse failures."""

    def __eq__(self, other):
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))


class UnexpectedEof(EwkbError):
    def __init__(self):
        super().__init__("unexpected end of EWKB")


class InvalidEndian(EwkbError):
    def __init__(self, marker: int):
        super().__init__(f"invalid EWKB endian marker: {marker}")
        self.marker = marker


class UnsupportedType(EwkbError):
    def __init__(self, code: int):
        super().__init__(f"unsupported EWKB geometry type: {code}")
        self.code = code


class TrailingData(EwkbError):
    def __init__(self, remaining: int):
        super().__init__(f"EWKB has {remaining} trailing bytes")
        self.remaining = remaining


class Endian(Enum):
    BIG = 0
    LITTLE = 1

    @classmethod
    def from_marker(cls, marker: int) -> "Endian":
        if marker == 0:
            return cls.BIG
        if marker == 1:
            return cls.LITTLE
        raise InvalidEndian(marker)


_U32 = {Endian.BIG: struct.Struct(">I"), Endian.LITTLE: struct.Struct("<I")}
_F64 = {Endian.BIG: struct.Struct(">d"), Endian.LITTLE: struct.Struct("<d")}


class Category(Enum):
    POINT = "point"
    POINT_ARRAY = "point_array"
    RING_LIST = "ring_list"
    COLLECTION = "collection"


# base type code -> payload shape
CATEGORY_BY_TYPE = {
    1: Category.POINT,
    2: Category.POINT_ARRAY,        # LineString
    8: Category.POINT_ARRAY,        # CircularString
    13: Category.POINT_ARRAY,
    3: Category.RING_LIST,          # Polygon
    17: Category.RING_LIST,         # Triangle
    4: Category.COLLECTION,
    5: Category.COLLECTION,
    6: Category.COLLECTION,
    7: Category.COLLECTION,
    9: Category.COLLECTION,
    10: Category.COLLECTION,
    11: Category.COLLECTION,
    12: Category.COLLECTION,
    14: Category.COLLECTION,
    15: Category.COLLECTION,
    16: Category.COLLECTION,
}


class GeometryHeader(NamedTuple):
    endian: Endian
    type_code: int
    has_z: bool
    has_m: bool
    srid: Optional[int]
    srid_offset: Optional[int]
    payload_offset: int


class Cursor:
    """Bounds-checked read/write position over a byte buffer."""

    def __init__(self, buf, offset: int = 0):
        self._buf = buf
        self._len = len(buf)
        self.offset = offset

    @property
    def remaining(self) -> int:
        return max(self._len - self.offset, 0)

    def _ensure(self, offset: int, need: int) -> None:
        if self._len - offset < need:
            raise UnexpectedEof()

    def read_u8(self) -> int:
        self._ensure(self.offset, 1)
        value = self._buf[self.offset]
        self.offset += 1
        return value

    def read_u32(self, endian: Endian) -> int:
        self._ensure(self.offset, 4)
        (value,) = _U32[endian].unpack_from(self._buf, self.offset)
        self.offset += 4
        return value

    def read_f64(self, endian: Endian) -> float:
        self._ensure(self.offset, 8)
        (value,) = _F64[endian].unpack_from(self._buf, self.offset)
        self.offset += 8
        return value

    def write_f64(self, offset: int, endian: Endian, value: float) -> None:
        self._ensure(offset, 8)
        _F64[endian].pack_into(self._buf, offset, value)

    def skip(self, n: int) -> None:
        self._ensure(self.offset, n)
        self.offset += n


def _read_header(cursor: Cursor) -> GeometryHeader:
    endian = Endian.from_marker(cursor.read_u8())
    type_word = cursor.read_u32(endian)

    srid = None
    srid_offset = None
    if type_word & EWKB_SRID:
        srid_offset = cursor.offset
        srid = cursor.read_u32(endian)

    return GeometryHeader(
        endian=endian,
        type_code=type_word & EWKB_TYPE_MASK,
        has_z=bool(type_word & EWKB_Z),
        has_m=bool(type_word & EWKB_M),
        srid=srid,
        srid_offset=srid_offset,
        payload_offset=cursor.offset,
    )


def _transform_coord_tuple(cursor: Cursor, header: GeometryHeader, func: PointFunc) -> None:
    endian = header.endian
    x_offset = cursor.offset
    x = cursor.read_f64(endian)
    y_offset = cursor.offset
    y = cursor.read_f64(endian)

    # wire order is (X=lng, Y=lat)
    lat, lng = func(y, x)
    cursor.write_f64(x_offset, endian, lng)
    cursor.write_f64(y_offset, endian, lat)

    if header.has_z:
        cursor.skip(8)
    if header.has_m:
        cursor.skip(8)


def _transform_point_array(cursor: Cursor, header: GeometryHeader, func: PointFunc) -> None:
    npoints = cursor.read_u32(header.endian)
    for _ in range(npoints):
        _transform_coord_tuple(cursor, header, func)


def _transform_ring_list(cursor: Cursor, header: GeometryHeader, func: PointFunc) -> None:
    nrings = cursor.read_u32(header.endian)
    for _ in range(nrings):
        _transform_point_array(cursor, header, func)


_HANDLERS = {
    Category.POINT: _transform_coord_tuple,
    Category.POINT_ARRAY: _transform_point_array,
    Category.RING_LIST: _transform_ring_list,
}


def _transform_geometry(cursor: Cursor, func: PointFunc) -> None:
    """Walk one geometry and all of its nested sub-geometries."""
    # each entry counts the sub-geometries still to read at that depth
    pending = [1]
    while pending:
        if not pending[-1]:
            pending.pop()
            continue
        pending[-1] -= 1

        header = _read_header(cursor)
        category = CATEGORY_BY_TYPE.get(header.type_code)
        if category is None:
            raise UnsupportedType(header.type_code)
        if category is Category.COLLECTION:
            pending.append(cursor.read_u32(header.endian))
        else:
            _HANDLERS[category](cursor, header, func)


def read_header(buffer) -> GeometryHeader:
    """Parse the header of the top-level geometry without touching the payload."""
    with memoryview(buffer) as view:
        return _read_header(Cursor(view))


def transform_coords_in_place(buffer: Buffer, func: PointFunc) -> None:
    """
    Apply ``func(lat, lng) -> (lat, lng)`` to every coordinate tuple.

    Raises:
        TypeError: if ``buffer`` is read-only.
        EwkbError: on any malformed input.
    """
    with memoryview(buffer) as view:
        if view.readonly:
            raise TypeError("EWKB buffer must be writable (use bytearray)")
        with view.cast("B") as raw:
            cursor = Cursor(raw)
            _transform_geometry(cursor, func)
            if cursor.remaining:
                raise TrailingData(cursor.remaining)


def rewrite_in_place(buffer: Buffer, kind: TransformKind) -> None:
    """Rewrite every coordinate in ``buffer`` with ``apply(kind, ...)``."""
    transform_coords_in_place(buffer, lambda lat, lng: apply(kind, lat, lng))
