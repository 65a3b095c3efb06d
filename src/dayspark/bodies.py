"""Body model — truncated Sun/Moon series and Keplerian planets, all geocentric ecliptic."""

import math
from datetime import datetime
from types import MappingProxyType

from dayspark.frames import delta_deg, norm360
from dayspark.models import Body, EclipticPosition, OrbitalElements
from dayspark.timebase import to_epoch_days

# Mean elements from Schlyter's low-precision set. His day count starts at
# 1999-12-31 00:00 UT; the mean anomalies below are rebased onto J2000, 1.5 days later.
# Pluto and Chiron are osculating approximations good to a degree or so over 1900-2100.
ORBITAL_ELEMENTS: MappingProxyType[Body, OrbitalElements] = MappingProxyType(
    {
        Body.MERCURY: OrbitalElements(48.3313, 7.0047, 29.1241, 0.387098, 0.205635, 174.7947, 4.0923344368),
        Body.VENUS: OrbitalElements(76.6799, 3.3946, 54.8910, 0.723330, 0.006773, 50.4084, 1.6021302244),
        Body.MARS: OrbitalElements(49.5574, 1.8497, 286.5016, 1.523688, 0.093405, 19.3881, 0.5240207766),
        Body.JUPITER: OrbitalElements(100.4542, 1.3030, 273.8777, 5.202561, 0.048498, 20.0196, 0.0830853001),
        Body.SATURN: OrbitalElements(113.6634, 2.4886, 339.3939, 9.55475, 0.055546, 317.0172, 0.0334442282),
        Body.URANUS: OrbitalElements(74.0005, 0.7733, 96.6612, 19.18171, 0.047318, 142.6081, 0.011725806),
        Body.NEPTUNE: OrbitalElements(131.7806, 1.7700, 272.8461, 30.05826, 0.008606, 260.2561, 0.005995147),
        Body.PLUTO: OrbitalElements(110.30347, 17.14175, 113.76329, 39.48168677, 0.24880766, 14.86205, 0.00397557),
        Body.CHIRON: OrbitalElements(209.3, 6.93, 339.4, 13.648, 0.3789, 27.7, 0.019548),
    }
)

KEPLER_MAX_ITERATIONS = 5
KEPLER_TOLERANCE_RAD = 1e-9


class UnknownBodyError(ValueError):
    """Raised for a body outside the closed set this model knows."""


def solve_kepler(mean_anomaly_deg: float, eccentricity: float) -> float:
    """Solve ``M = E - e sin E`` for the eccentric anomaly.

    Newton iteration seeded with the second-order series
    ``E0 = M + e sin M (1 + e cos M)``. Converges well inside the iteration cap for
    e < 0.5; the cap only bounds the loop on malformed input.

    Args:
        mean_anomaly_deg: Mean anomaly in degrees (any range).
        eccentricity: Orbital eccentricity, 0 <= e < 1.

    Returns:
        Eccentric anomaly in radians.
    """
    m = math.radians(norm360(mean_anomaly_deg))
    e = eccentricity
    ecc = m + e * math.sin(m) * (1.0 + e * math.cos(m))
    for _ in range(KEPLER_MAX_ITERATIONS):
        step = (ecc - e * math.sin(ecc) - m) / (1.0 - e * math.cos(ecc))
        ecc -= step
        if abs(step) < KEPLER_TOLERANCE_RAD:
            break
    return ecc


def _sun_anomaly(d: float) -> float:
    return math.radians(357.529 + 0.98560028 * d)


def sun_position(d: float) -> EclipticPosition:
    """Mean longitude plus a two-term equation of center. Distance in AU."""
    g = _sun_anomaly(d)
    mean_lon = 280.466 + 0.98564736 * d
    lon = mean_lon + 1.915 * math.sin(g) + 0.020 * math.sin(2 * g)
    dist = 1.00014 - 0.01671 * math.cos(g) - 0.00014 * math.cos(2 * g)
    return EclipticPosition(longitude=norm360(lon), latitude=0.0, distance=dist)


def moon_position(d: float) -> EclipticPosition:
    """Truncated lunar theory: longitude, latitude and distance (km)."""
    rad = math.radians
    mean_lon = 218.316 + 13.176396 * d
    m = rad(134.963 + 13.064993 * d)  # Mean anomaly
    f = rad(93.272 + 13.229350 * d)  # Argument of latitude
    el = rad(297.850 + 12.190749 * d)  # Mean elongation from the Sun
    ms = _sun_anomaly(d)

    lon = (
        mean_lon
        + 6.289 * math.sin(m)  # Equation of the center
        + 1.274 * math.sin(2 * el - m)  # Evection
        + 0.658 * math.sin(2 * el)  # Variation
        - 0.185 * math.sin(ms)  # Annual equation
        - 0.114 * math.sin(2 * f)  # Reduction to the ecliptic
    )
    lat = (
        5.128 * math.sin(f)
        + 0.280 * math.sin(m + f)
        + 0.278 * math.sin(m - f)
        + 0.173 * math.sin(2 * el - f)
    )
    dist = (
        385000.56
        - 20905.355 * math.cos(m)
        - 3699.111 * math.cos(2 * el - m)
        - 2955.968 * math.cos(2 * el)
    )
    return EclipticPosition(longitude=norm360(lon), latitude=lat, distance=dist)


def node_position(d: float) -> EclipticPosition:
    """Mean ascending node of the lunar orbit (linear regression only)."""
    return EclipticPosition(longitude=norm360(125.1228 - 0.0529538083 * d), latitude=0.0)


def heliocentric_xyz(elements: OrbitalElements, d: float) -> tuple[float, float, float]:
    """Heliocentric ecliptic Cartesian coordinates (AU) from orbital elements."""
    e = elements.eccentricity
    a = elements.semi_major_axis
    ecc = solve_kepler(elements.mean_anomaly(d), e)

    xv = a * (math.cos(ecc) - e)
    yv = a * math.sqrt(1.0 - e * e) * math.sin(ecc)
    r = math.hypot(xv, yv)
    v = math.atan2(yv, xv)  # True anomaly

    node = math.radians(elements.node)
    incl = math.radians(elements.inclination)
    u = v + math.radians(elements.perihelion)  # Argument of latitude

    x = r * (math.cos(node) * math.cos(u) - math.sin(node) * math.sin(u) * math.cos(incl))
    y = r * (math.sin(node) * math.cos(u) + math.cos(node) * math.sin(u) * math.cos(incl))
    z = r * math.sin(u) * math.sin(incl)
    return x, y, z


def _sun_geocentric_xyz(d: float) -> tuple[float, float]:
    # Earth's heliocentric position is this vector inverted.
    sun = sun_position(d)
    lon = math.radians(sun.longitude)
    assert sun.distance is not None
    return sun.distance * math.cos(lon), sun.distance * math.sin(lon)


def planet_position(elements: OrbitalElements, d: float) -> EclipticPosition:
    xh, yh, zh = heliocentric_xyz(elements, d)
    xs, ys = _sun_geocentric_xyz(d)
    xg, yg, zg = xh + xs, yh + ys, zh
    return EclipticPosition(
        longitude=norm360(math.degrees(math.atan2(yg, xg))),
        latitude=math.degrees(math.atan2(zg, math.hypot(xg, yg))),
        distance=math.sqrt(xg * xg + yg * yg + zg * zg),
    )


def ecliptic_position(body: Body, d: float) -> EclipticPosition:
    """Geocentric ecliptic position of ``body`` at epoch day ``d``.

    Args:
        body: Member of the closed Body set.
        d: Days since J2000 (see dayspark.timebase).

    Returns:
        EclipticPosition with longitude in [0, 360).

    Raises:
        UnknownBodyError: If ``body`` is not a Body with a position model.
    """
    if body is Body.SUN:
        return sun_position(d)
    if body is Body.MOON:
        return moon_position(d)
    if body is Body.NODE:
        return node_position(d)
    elements = ORBITAL_ELEMENTS.get(body)
    if elements is None:
        raise UnknownBodyError(f"No position model for body: {body!r}")
    return planet_position(elements, d)


def position(body: Body, instant: datetime) -> EclipticPosition:
    return ecliptic_position(body, to_epoch_days(instant))


def longitude_rate(body: Body, d: float, half_step: float = 0.5) -> float:
    """Apparent longitude motion in degrees/day by central difference."""
    before = ecliptic_position(body, d - half_step).longitude
    after = ecliptic_position(body, d + half_step).longitude
    return delta_deg(after, before) / (2 * half_step)
