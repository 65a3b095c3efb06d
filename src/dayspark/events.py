"""Event scanner — samples lunar and planetary quantities across one local day.

Value crossings (node, equator, aspects) are linearly interpolated between the
bracketing samples. Turning points (apsides, declination extremes, stations) are
reported at the sample where the first difference changes sign. Sampling starts
one step before the window and ends one step after it so turning points at the
window edges are seen; an event is kept only when its instant falls inside
``[window_start, window_start + 1)``.
"""

import itertools
import logging
from dataclasses import dataclass
from datetime import date

import numpy as np

from dayspark import meteors
from dayspark.aspects import enabled_aspects, find_aspect_crossings
from dayspark.bodies import ecliptic_position, moon_position
from dayspark.frames import delta_deg, to_equatorial
from dayspark.models import (
    ApsisExtreme,
    AspectCrossing,
    Body,
    DeclinationExtreme,
    EquatorCrossing,
    Event,
    FeatureFlags,
    NodeCrossing,
    StationaryPoint,
)
from dayspark.timebase import from_epoch_days

logger = logging.getLogger(__name__)

LUNAR_STEP_DAYS = 1.0 / 24.0  # Hourly
MOON_ASPECT_STEP_DAYS = 1.0 / 24.0
DECLINATION_EXTREME_MIN_DEG = 18.0  # Ignore shallow turning points
STATION_MIN_RATE_DEG = 1e-4

PLANETS: tuple[Body, ...] = (
    Body.MERCURY,
    Body.VENUS,
    Body.MARS,
    Body.JUPITER,
    Body.SATURN,
    Body.URANUS,
    Body.NEPTUNE,
)
DEEP_BODIES: tuple[Body, ...] = (Body.PLUTO, Body.CHIRON)


@dataclass(frozen=True)
class LunarSamples:
    days: np.ndarray
    latitude: np.ndarray
    declination: np.ndarray
    distance: np.ndarray


def sample_moon(window_start: float, step: float = LUNAR_STEP_DAYS) -> LunarSamples:
    """Hourly lunar latitude/declination/distance from one step before to one after."""
    n = round(1.0 / step)
    days = window_start + step * np.arange(-1, n + 2)
    lat, dec, dist = [], [], []
    for d in days:
        pos = moon_position(float(d))
        lat.append(pos.latitude)
        dec.append(to_equatorial(pos).declination)
        dist.append(pos.distance)
    return LunarSamples(days, np.array(lat), np.array(dec), np.array(dist, dtype=float))


def _in_window(d: float, window_start: float) -> bool:
    return window_start <= d < window_start + 1.0


def zero_crossings(days: np.ndarray, values: np.ndarray) -> list[tuple[float, bool]]:
    """Interpolated zero crossings of a sampled value as ``(day, rising)``."""
    hits = []
    for i in range(len(values) - 1):
        before, after = values[i], values[i + 1]
        rising = before < 0 <= after
        if rising or before > 0 >= after:
            frac = before / (before - after)
            hits.append((float(days[i] + frac * (days[i + 1] - days[i])), rising))
    return hits


def turning_points(days: np.ndarray, values: np.ndarray) -> list[tuple[float, bool]]:
    """Samples where the first difference reverses sign, as ``(day, is_maximum)``."""
    trend = np.sign(np.diff(values))
    hits = []
    prev = 0.0
    for i, current in enumerate(trend):
        if current == 0:
            continue
        if prev != 0 and current != prev:
            hits.append((float(days[i]), prev > 0))
        prev = current
    return hits


def lunar_events(
    window_start: float, flags: FeatureFlags, samples: LunarSamples | None = None
) -> list[Event]:
    """Node crossings, plus equator/apsis/declination events when advanced is on."""
    s = samples if samples is not None else sample_moon(window_start)
    events: list[Event] = []

    for d, rising in zero_crossings(s.days, s.latitude):
        if _in_window(d, window_start):
            events.append(Event(from_epoch_days(d), NodeCrossing(ascending=rising)))

    if not flags.advanced_astronomy:
        return events

    for d, _ in zero_crossings(s.days, s.declination):
        if _in_window(d, window_start):
            events.append(Event(from_epoch_days(d), EquatorCrossing()))

    for d, is_max in turning_points(s.days, s.distance):
        if _in_window(d, window_start):
            events.append(Event(from_epoch_days(d), ApsisExtreme(perigee=not is_max)))

    for d, is_max in turning_points(s.days, s.declination):
        idx = int(np.searchsorted(s.days, d))
        if _in_window(d, window_start) and abs(s.declination[idx]) > DECLINATION_EXTREME_MIN_DEG:
            events.append(Event(from_epoch_days(d), DeclinationExtreme(high=is_max)))

    return events


def station_events(window_start: float, bodies: tuple[Body, ...]) -> list[Event]:
    """Direction reversals from three daily samples around the window start."""
    events: list[Event] = []
    for body in bodies:
        prev, curr, nxt = (
            ecliptic_position(body, window_start + offset).longitude
            for offset in (-1.0, 0.0, 1.0)
        )
        v1 = delta_deg(curr, prev)
        v2 = delta_deg(nxt, curr)
        if np.sign(v1) != np.sign(v2) and abs(v1) > STATION_MIN_RATE_DEG:
            events.append(
                Event(from_epoch_days(window_start), StationaryPoint(body, retrograde=v1 > 0))
            )
    return events


def aspect_bodies(flags: FeatureFlags) -> tuple[Body, ...]:
    bodies = (Body.MOON,) + PLANETS
    if flags.deep_astrology:
        bodies += DEEP_BODIES + (Body.NODE,)
    return bodies


def aspect_events(window_start: float, flags: FeatureFlags) -> list[Event]:
    """Aspect crossings between every pair of aspect bodies.

    Pairs involving the Moon are sampled hourly; slower pairs use the day ends.
    Moon-Node conjunction/opposition is left to the node-crossing detector.
    """
    aspects = enabled_aspects(flags)
    moon_grid = window_start + MOON_ASPECT_STEP_DAYS * np.arange(
        round(1.0 / MOON_ASPECT_STEP_DAYS) + 1
    )
    day_grid = np.array([window_start, window_start + 1.0])

    events: list[Event] = []
    for body_a, body_b in itertools.combinations(aspect_bodies(flags), 2):
        pair = {body_a, body_b}
        candidates = aspects
        if pair == {Body.MOON, Body.NODE}:
            candidates = tuple(a for a in aspects if a.angle not in (0.0, 180.0))
        grid = moon_grid if Body.MOON in pair else day_grid
        for d, aspect in find_aspect_crossings(body_a, body_b, grid, candidates):
            if _in_window(d, window_start):
                events.append(Event(from_epoch_days(d), AspectCrossing(aspect, body_a, body_b)))
    return events


def dedupe_and_sort(events: list[Event]) -> list[Event]:
    """Drop repeated labels (first occurrence wins) and sort by instant."""
    seen: set[str] = set()
    unique = []
    for event in events:
        if event.label in seen:
            continue
        seen.add(event.label)
        unique.append(event)
    return sorted(unique, key=lambda e: e.instant)


def scan_day(
    day: date, window_start: float, flags: FeatureFlags
) -> tuple[Event, ...]:
    """All celestial events for one local day.

    Args:
        day: Local calendar date (for the meteor-shower lookup).
        window_start: Epoch day of local midnight starting ``day``.
        flags: Optional event classes to include.

    Returns:
        Events sorted by instant, labels unique, meteor-shower peaks appended.
    """
    station_bodies = PLANETS + (DEEP_BODIES if flags.deep_astrology else ())
    events = lunar_events(window_start, flags)
    events += station_events(window_start, station_bodies)
    events += aspect_events(window_start, flags)
    ordered = dedupe_and_sort(events)
    logger.debug("%s: %d events (%d before dedupe)", day.isoformat(), len(ordered), len(events))

    peak = meteors.shower_peak(day)
    if peak is not None:
        ordered.append(Event(from_epoch_days(window_start), peak))
    return tuple(ordered)
