"""Ecliptic position to constellation, with off-ecliptic intruders.

IAU boundaries are irregular polygons; along the Moon's path they are approximated
by longitude slices plus latitude tests for the four constellations the ecliptic
belt only grazes. Boundaries are fixed to the equinox (no ayanamsha).
"""

import bisect
import math
from dataclasses import dataclass

from dayspark.frames import norm360
from dayspark.models import Constellation

UNKNOWN = Constellation(name="Unknown", symbol="✨")


@dataclass(frozen=True)
class IntruderRule:
    constellation: Constellation
    lon_min: float  # Inclusive
    lon_max: float  # Inclusive
    lat_limit: float
    north: bool  # True: latitude must exceed the limit; False: fall below it

    def matches(self, lon: float, lat: float) -> bool:
        if not self.lon_min <= lon <= self.lon_max:
            return False
        return lat > self.lat_limit if self.north else lat < self.lat_limit


INTRUDERS: tuple[IntruderRule, ...] = (
    IntruderRule(Constellation("Cetus", "🐋"), 5.0, 25.0, -3.5, north=False),
    IntruderRule(Constellation("Orion", "🏹"), 84.0, 91.0, -0.5, north=False),
    IntruderRule(Constellation("Auriga", "🐐"), 80.0, 95.0, 4.5, north=True),
    IntruderRule(Constellation("Sextans", "🧭"), 143.0, 155.0, -2.5, north=False),
)

# (start longitude, constellation). Each constellation runs from its start up to,
# but excluding, the next start. Pisces wraps through 0.
ZODIAC: tuple[tuple[float, Constellation], ...] = (
    (29.0, Constellation("Aries", "♈")),
    (53.5, Constellation("Taurus", "♉")),
    (90.0, Constellation("Gemini", "♊")),
    (118.0, Constellation("Cancer", "♋")),
    (138.0, Constellation("Leo", "♌")),
    (174.0, Constellation("Virgo", "♍")),
    (218.0, Constellation("Libra", "♎")),
    (241.0, Constellation("Scorpius", "♏")),
    (248.0, Constellation("Ophiuchus", "⛎")),
    (266.0, Constellation("Sagittarius", "♐")),
    (299.5, Constellation("Capricornus", "♑")),
    (327.5, Constellation("Aquarius", "♒")),
    (351.5, Constellation("Pisces", "♓")),
)
_ZODIAC_STARTS = [start for start, _ in ZODIAC]


def zodiac_constellation(longitude: float) -> Constellation:
    """Zodiac band lookup by longitude only."""
    idx = bisect.bisect_right(_ZODIAC_STARTS, norm360(longitude)) - 1
    return ZODIAC[idx][1]  # idx == -1 wraps to Pisces


def constellation(longitude: float, latitude: float) -> Constellation:
    """Constellation containing an ecliptic position.

    Args:
        longitude: Ecliptic longitude in degrees (any range).
        latitude: Ecliptic latitude in degrees.

    Returns:
        The first matching intruder, else the zodiac constellation. UNKNOWN only
        for non-finite input.
    """
    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        return UNKNOWN
    lon = norm360(longitude)
    for rule in INTRUDERS:
        if rule.matches(lon, latitude):
            return rule.constellation
    return zodiac_constellation(lon)
