"""Frame transform — ecliptic to equatorial coordinates and angle helpers."""

import math

from dayspark.models import EclipticPosition, EquatorialPosition

OBLIQUITY_DEG = 23.439  # Constant mean obliquity; adequate at almanac precision

_SIN_OBL = math.sin(math.radians(OBLIQUITY_DEG))
_COS_OBL = math.cos(math.radians(OBLIQUITY_DEG))


def norm360(x: float) -> float:
    """Normalise ``x`` into the [0, 360) range."""
    x = math.fmod(x, 360.0)
    if x < 0:
        x += 360.0
    return 0.0 if x == 360.0 else x


def delta_deg(a: float, b: float) -> float:
    """Smallest signed angular difference ``a - b`` in degrees, in [-180, 180)."""
    d = norm360(a - b)
    return d - 360.0 if d >= 180.0 else d


def to_equatorial(ecliptic: EclipticPosition) -> EquatorialPosition:
    """Rotate an ecliptic position into right ascension / declination.

    Args:
        ecliptic: Geocentric ecliptic longitude/latitude in degrees.

    Returns:
        EquatorialPosition with right ascension in [0, 360) degrees.
    """
    lon = math.radians(ecliptic.longitude)
    lat = math.radians(ecliptic.latitude)
    sin_dec = math.sin(lat) * _COS_OBL + math.cos(lat) * _SIN_OBL * math.sin(lon)
    y = math.sin(lon) * _COS_OBL - math.tan(lat) * _SIN_OBL
    x = math.cos(lon)
    return EquatorialPosition(
        right_ascension=norm360(math.degrees(math.atan2(y, x))),
        declination=math.degrees(math.asin(max(-1.0, min(1.0, sin_dec)))),
    )


def elongation(a: EclipticPosition, b: EclipticPosition) -> float:
    """Great-circle separation in degrees between two ecliptic positions."""
    lat_a = math.radians(a.latitude)
    lat_b = math.radians(b.latitude)
    d_lon = math.radians(delta_deg(a.longitude, b.longitude))
    cos_sep = math.sin(lat_a) * math.sin(lat_b) + math.cos(lat_a) * math.cos(
        lat_b
    ) * math.cos(d_lon)
    return math.degrees(math.acos(max(-1.0, min(1.0, cos_sep))))
