"""
Exception classes raised by the host dispatch layer.

Binary parse failures live in ``engine.ewkb``; these cover CRS resolution.
"""


class EvilTransformError(Exception):
    """Base class for host-layer errors."""
    pass


class UnknownCrsError(EvilTransformError):
    """Raised when a CRS spec cannot be resolved to an SRID."""
    pass


class MissingSridError(EvilTransformError):
    """Raised when a geometry carries no SRID and no source CRS was given."""
    pass
