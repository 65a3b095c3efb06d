"""Core entry point — assembles one day's almanac from the solvers and scanners."""

import logging
from datetime import date

from dayspark import events, phase, seasons, visibility
from dayspark.bodies import ecliptic_position, moon_position
from dayspark.constellations import constellation
from dayspark.frames import elongation
from dayspark.models import (
    Body,
    DailyAlmanac,
    Event,
    FeatureFlags,
    MoonInfo,
    Observer,
    PlanetVisibility,
    RiseSetResult,
    SunTimes,
)
from dayspark.timebase import local_midnight, local_noon, to_epoch_days, utc_midnight
from dayspark.topocentric import (
    MOON_HORIZON_DIP,
    PLANET_HORIZON_DIP,
    SUN_HORIZON_DIP,
    body_rise_set,
    scan_rise_set,
)

logger = logging.getLogger(__name__)


def sun_times(observer: Observer, window_start: float) -> SunTimes:
    return SunTimes(body_rise_set(Body.SUN, observer, window_start, SUN_HORIZON_DIP))


def moon_info(
    day: date, observer: Observer, utc_offset_minutes: int, window_start: float
) -> MoonInfo:
    """Phase at local noon, constellation at 00:00 UTC, age and scanned rise/set."""
    noon = to_epoch_days(local_noon(day, utc_offset_minutes))
    placed = moon_position(to_epoch_days(utc_midnight(day)))
    return MoonInfo(
        phase=phase.phase(noon),
        constellation=constellation(placed.longitude, placed.latitude),
        age_days=phase.moon_age(day, utc_offset_minutes),
        rise_set=scan_rise_set(Body.MOON, observer, window_start, MOON_HORIZON_DIP),
    )


def planet_visibility(
    observer: Observer, window_start: float, sun: RiseSetResult, noon: float
) -> tuple[PlanetVisibility, ...]:
    """Visibility for the naked-eye planets; omitted entirely without a sunrise/sunset."""
    if sun.is_degenerate:
        return ()
    sun_at_noon = ecliptic_position(Body.SUN, noon)
    entries = []
    for body in visibility.VISIBLE_PLANETS:
        rs = body_rise_set(body, observer, window_start, PLANET_HORIZON_DIP)
        if rs.is_degenerate:
            logger.debug("%s: circumpolar today, skipped", body.display_name)
            continue
        sep = elongation(ecliptic_position(body, noon), sun_at_noon)
        entry = visibility.classify(body, rs, sun, sep)
        if entry is not None:
            entries.append(entry)
    return tuple(entries)


def compute_daily_almanac(
    day: date,
    observer: Observer,
    utc_offset_minutes: int,
    flags: FeatureFlags | None = None,
) -> DailyAlmanac:
    """Compute everything shown for one local calendar day at one place.

    Args:
        day: Local calendar date.
        observer: Geographic position (east-positive longitude).
        utc_offset_minutes: UTC offset in effect on ``day`` at the observer.
        flags: Optional computation classes; defaults to FeatureFlags().

    Returns:
        DailyAlmanac holding sun, moon, planet, event, season and lore results.
    """
    flags = flags or FeatureFlags()
    window_start = to_epoch_days(local_midnight(day, utc_offset_minutes))
    noon = to_epoch_days(local_noon(day, utc_offset_minutes))

    sun = sun_times(observer, window_start)
    moon = moon_info(day, observer, utc_offset_minutes, window_start)
    planets: tuple[PlanetVisibility, ...] = ()
    if flags.planets:
        planets = planet_visibility(observer, window_start, sun.rise_set, noon)
    day_events: tuple[Event, ...] = ()
    if flags.celestial_events:
        day_events = events.scan_day(day, window_start, flags)
    markers = seasons.season_markers(day, utc_offset_minutes, flags)
    lore = seasons.lore_for(day) if flags.lore else None

    logger.info(
        "%s at (%.4f, %.4f): %d planets, %d events",
        day.isoformat(),
        observer.latitude,
        observer.longitude,
        len(planets),
        len(day_events),
    )
    return DailyAlmanac(
        day=day,
        observer=observer,
        utc_offset_minutes=utc_offset_minutes,
        sun=sun,
        moon=moon,
        planets=planets,
        events=day_events,
        seasons=markers,
        lore=lore,
        flags=flags,
    )
