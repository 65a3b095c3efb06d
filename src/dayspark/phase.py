"""Lunar phase, illumination, and almanac-style moon age."""

import math
from datetime import date, timedelta

from dayspark.bodies import moon_position, sun_position
from dayspark.frames import delta_deg, norm360
from dayspark.models import PhaseInfo
from dayspark.timebase import from_epoch_days, local_date, local_midnight, to_epoch_days

SYNODIC_RATE_DEG_PER_DAY = 12.1907  # Mean Moon-minus-Sun motion
NEW_MOON_MAX_ITERATIONS = 10
NEW_MOON_TOLERANCE_DAYS = 0.0007  # About one minute

_PHASES: tuple[tuple[str, str], ...] = (
    ("New Moon", "🌑"),
    ("Waxing Crescent", "🌒"),
    ("First Quarter", "🌓"),
    ("Waxing Gibbous", "🌔"),
    ("Full Moon", "🌕"),
    ("Waning Gibbous", "🌖"),
    ("Third Quarter", "🌗"),
    ("Waning Crescent", "🌘"),
)


def elongation_angle(d: float) -> float:
    """Moon longitude minus Sun longitude in [0, 360)."""
    return norm360(moon_position(d).longitude - sun_position(d).longitude)


def phase(d: float) -> PhaseInfo:
    """Phase angle, illuminated fraction and nearest of eight named buckets."""
    angle = elongation_angle(d)
    illumination = (1.0 - math.cos(math.radians(angle))) / 2.0
    name, emoji = _PHASES[round(angle / 45.0) % 8]
    return PhaseInfo(angle=angle, illumination=illumination, name=name, emoji=emoji)


def previous_new_moon(d: float) -> float:
    """Epoch day of the most recent new moon at or before ``d``.

    Walks back by the elongation divided by the mean synodic rate, then corrects
    the estimate until the step drops under a minute.
    """
    t = d
    for i in range(NEW_MOON_MAX_ITERATIONS):
        diff = delta_deg(moon_position(t).longitude, sun_position(t).longitude)
        if i == 0 and diff < 0:
            diff += 360.0  # Always step backwards on the first pass
        correction = diff / SYNODIC_RATE_DEG_PER_DAY
        t -= correction
        if abs(correction) < NEW_MOON_TOLERANCE_DAYS:
            break
    return t


def moon_age(day: date, utc_offset_minutes: int) -> int:
    """Whole calendar days since the last new moon, counted as almanacs do.

    The search starts at the end of the local day, so a new moon at any hour of
    ``day`` gives age 0. Only local calendar dates are compared; the hour of the
    new moon does not matter.
    """
    end_of_day = local_midnight(day + timedelta(days=1), utc_offset_minutes)
    new_moon = previous_new_moon(to_epoch_days(end_of_day) - 1e-6)
    new_moon_day = local_date(from_epoch_days(new_moon), utc_offset_minutes)
    return (day - new_moon_day).days
