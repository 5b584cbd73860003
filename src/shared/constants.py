"""
eviltransform shared constants

Coordinate reference codes, the GCJ02 obfuscation region, EWKB header
flags and transform mode numbers used across the project.
"""

# ─── Coordinate Reference Systems ────────────────────────
SRID_WGS84 = 4326                  # GPS / global standard
SRID_GCJ02 = 990001                # custom SRID for GCJ-02 (national obfuscated)
SRID_BD09 = 990002                 # custom SRID for BD-09 (provider obfuscated)

GCJ02_ALIASES = ("GCJ02", "GCJ-02")
BD09_ALIASES = ("BD09", "BD-09")

# ─── Obfuscation region (outside = identity) ─────────────
CHINA_LAT_RANGE = (0.8293, 55.8271)
CHINA_LNG_RANGE = (72.004, 137.8347)

# ─── WGS84 ellipsoid ─────────────────────────────────────
EARTH_R = 6378137.0                # equatorial radius (m)
EE = 0.0066934216229659423         # eccentricity squared
MEAN_EARTH_R = 6371000             # sphere radius for haversine (m)

# ─── EWKB type word ──────────────────────────────────────
EWKB_Z = 0x80000000
EWKB_M = 0x40000000
EWKB_SRID = 0x20000000
EWKB_TYPE_MASK = 0x0000FFFF

# ─── Transform modes ─────────────────────────────────────
MODE_WGS2GCJ = 1
MODE_GCJ2WGS = 2
MODE_WGS2BD = 3
MODE_BD2WGS = 4
MODE_GCJ2BD = 5
MODE_BD2GCJ = 6

# ─── Server ──────────────────────────────────────────────
API_VERSION = "0.1.0"
DEFAULT_PORT = 8000
