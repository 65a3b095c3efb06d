"""Topocentric solver — sidereal time, altitude, and body-agnostic rise/set/transit."""

import logging
import math
from collections.abc import Callable

from dayspark.bodies import ecliptic_position
from dayspark.frames import delta_deg, norm360, to_equatorial
from dayspark.models import Body, EquatorialPosition, Observer, RiseSetResult, RiseSetStatus
from dayspark.timebase import from_epoch_days

logger = logging.getLogger(__name__)

SIDEREAL_RATE_DEG_PER_HOUR = 15.04107
SIDEREAL_DAY_HOURS = 360.0 / SIDEREAL_RATE_DEG_PER_HOUR

# Horizon dip: how far below the geometric horizon the body's centre sits at the
# moment of rise/set. Negative for the Moon, whose parallax outweighs refraction.
SUN_HORIZON_DIP = 0.833
PLANET_HORIZON_DIP = 0.5667
MOON_HORIZON_DIP = -0.125

_REFINE_ITERATIONS = 2

CoordinateFn = Callable[[float], EquatorialPosition]


def gmst_degrees(d: float) -> float:
    """Greenwich mean sidereal time in degrees at epoch day ``d``."""
    return norm360(280.46061837 + 360.98564736629 * d)


def equatorial_position(body: Body, d: float) -> EquatorialPosition:
    return to_equatorial(ecliptic_position(body, d))


def altitude_of(eq: EquatorialPosition, d: float, observer: Observer) -> float:
    """Geometric altitude in degrees of a fixed equatorial position at ``d``."""
    lat = math.radians(observer.latitude)
    dec = math.radians(eq.declination)
    hour_angle = math.radians(gmst_degrees(d) + observer.longitude - eq.right_ascension)
    sin_alt = math.sin(lat) * math.sin(dec) + math.cos(lat) * math.cos(dec) * math.cos(
        hour_angle
    )
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))


def altitude(body: Body, d: float, observer: Observer) -> float:
    """Geometric altitude of ``body`` in degrees at epoch day ``d``."""
    return altitude_of(equatorial_position(body, d), d, observer)


def _cos_hour_angle(declination: float, latitude: float, horizon_dip: float) -> float:
    h0 = math.radians(-horizon_dip)
    dec = math.radians(declination)
    lat = math.radians(latitude)
    return (math.sin(h0) - math.sin(dec) * math.sin(lat)) / (math.cos(dec) * math.cos(lat))


def _refine(
    coords: CoordinateFn,
    observer: Observer,
    window_start: float,
    hours: float,
    side: int,
    horizon_dip: float,
) -> float:
    # side: -1 rise, +1 set, 0 transit. Re-evaluates coordinates at the estimate
    # and steps the hour angle onto its target.
    for _ in range(_REFINE_ITERATIONS):
        d = window_start + hours / 24.0
        eq = coords(d)
        target = 0.0
        if side:
            cos_h = _cos_hour_angle(eq.declination, observer.latitude, horizon_dip)
            if not -1.0 <= cos_h <= 1.0:
                break
            target = side * math.degrees(math.acos(cos_h))
        local_hour_angle = gmst_degrees(d) + observer.longitude - eq.right_ascension
        hours += delta_deg(target, local_hour_angle) / SIDEREAL_RATE_DEG_PER_HOUR
    return hours


def _refine_in_window(
    coords: CoordinateFn,
    observer: Observer,
    window_start: float,
    hours: float,
    side: int,
    horizon_dip: float,
) -> float:
    # Refinement can walk an event over a window edge; the same event recurs one
    # sidereal day away, so step by that and refine again.
    hours = _refine(coords, observer, window_start, hours, side, horizon_dip)
    if hours < 0.0:
        hours += SIDEREAL_DAY_HOURS
    elif hours >= 24.0:
        hours -= SIDEREAL_DAY_HOURS
    else:
        return hours
    return _refine(coords, observer, window_start, hours, side, horizon_dip)


def rise_set_transit(
    coords: CoordinateFn,
    observer: Observer,
    window_start: float,
    horizon_dip: float,
) -> RiseSetResult:
    """Closed-form rise/set/transit for one 24-hour window.

    The body is placed with ``coords`` at the window midpoint to decide whether it
    rises at all; each event is then refined with coordinates evaluated at the
    event itself.

    Args:
        coords: Maps epoch days to the body's equatorial position.
        observer: Geographic position.
        window_start: Epoch day at which the window begins (local midnight).
        horizon_dip: Degrees below the horizon at which rise/set is counted.

    Returns:
        RiseSetResult. NEVER_RISES / NEVER_SETS leave all instants empty.
    """
    eq = coords(window_start + 0.5)
    cos_h = _cos_hour_angle(eq.declination, observer.latitude, horizon_dip)
    if cos_h > 1.0:
        return RiseSetResult(rise=None, set=None, status=RiseSetStatus.NEVER_RISES)
    if cos_h < -1.0:
        return RiseSetResult(rise=None, set=None, status=RiseSetStatus.NEVER_SETS)

    gmst0 = gmst_degrees(window_start)
    transit = norm360(eq.right_ascension - observer.longitude - gmst0)
    transit /= SIDEREAL_RATE_DEG_PER_HOUR
    half_arc = math.degrees(math.acos(cos_h)) / SIDEREAL_RATE_DEG_PER_HOUR

    rise = (transit - half_arc) % 24.0
    set_ = (transit + half_arc) % 24.0
    rise = _refine_in_window(coords, observer, window_start, rise, -1, horizon_dip)
    set_ = _refine_in_window(coords, observer, window_start, set_, 1, horizon_dip)
    transit = _refine_in_window(coords, observer, window_start, transit, 0, horizon_dip)
    if set_ < rise:
        # Arc spans local midnight: take the set that follows the rise
        set_ = _refine(coords, observer, window_start, set_ + 24.0, 1, horizon_dip)

    return RiseSetResult(
        rise=from_epoch_days(window_start + rise / 24.0),
        set=from_epoch_days(window_start + set_ / 24.0),
        transit=from_epoch_days(window_start + transit / 24.0),
    )


def body_rise_set(
    body: Body, observer: Observer, window_start: float, horizon_dip: float
) -> RiseSetResult:
    return rise_set_transit(
        lambda d: equatorial_position(body, d), observer, window_start, horizon_dip
    )


def scan_rise_set(
    body: Body,
    observer: Observer,
    window_start: float,
    horizon_dip: float = MOON_HORIZON_DIP,
    step_minutes: int = 10,
    span_hours: int = 30,
) -> RiseSetResult:
    """Rise/set by stepping altitude at a fixed cadence.

    Used for the Moon, whose fast motion defeats the closed-form window. The first
    upward and first downward crossing of ``-horizon_dip`` are reported, each
    linearly interpolated between the bracketing samples. The default span runs
    past local midnight to catch a set just after it.
    """
    step = step_minutes / 1440.0
    n_steps = span_hours * 60 // step_minutes
    threshold = -horizon_dip

    prev_d = window_start
    prev_alt = altitude(body, prev_d, observer) - threshold
    rise_d: float | None = None
    set_d: float | None = None
    always_above = prev_alt > 0

    for i in range(1, n_steps + 1):
        d = window_start + i * step
        alt = altitude(body, d, observer) - threshold
        always_above = always_above and alt > 0
        crossing = prev_d + step * prev_alt / (prev_alt - alt) if prev_alt != alt else d
        if rise_d is None and prev_alt < 0 <= alt:
            rise_d = crossing
        if set_d is None and prev_alt > 0 >= alt:
            set_d = crossing
        prev_d, prev_alt = d, alt

    if rise_d is None and set_d is None:
        status = RiseSetStatus.NEVER_SETS if always_above else RiseSetStatus.NEVER_RISES
        logger.debug(
            "%s: no horizon crossing in %dh scan (%s)", body.name, span_hours, status.value
        )
        return RiseSetResult(rise=None, set=None, status=status)

    return RiseSetResult(
        rise=from_epoch_days(rise_d) if rise_d is not None else None,
        set=from_epoch_days(set_d) if set_d is not None else None,
    )
