"""JSON renderer — plain dict payload for machine consumers."""

from datetime import datetime

from dayspark import visibility
from dayspark.bodies import longitude_rate
from dayspark.models import DailyAlmanac, Event, RiseSetResult
from dayspark.renderers.markdown import format_time
from dayspark.timebase import local_noon, to_epoch_days, to_local


def _iso(instant: datetime | None, utc_offset_minutes: int) -> str | None:
    if instant is None:
        return None
    return to_local(instant, utc_offset_minutes).isoformat(timespec="seconds")


def _rise_set(rs: RiseSetResult, utc_offset_minutes: int) -> dict:
    return {
        "status": rs.status.value,
        "rise": _iso(rs.rise, utc_offset_minutes),
        "set": _iso(rs.set, utc_offset_minutes),
        "transit": _iso(rs.transit, utc_offset_minutes),
    }


def _event(event: Event, utc_offset_minutes: int) -> dict:
    return {
        "type": type(event.kind).__name__,
        "instant": _iso(event.instant, utc_offset_minutes),
        "label": event.label,
    }


def _sun(almanac: DailyAlmanac) -> dict:
    return {
        **_rise_set(almanac.sun.rise_set, almanac.utc_offset_minutes),
        "day_length_minutes": almanac.sun.day_length_minutes,
    }


def _moon(almanac: DailyAlmanac) -> dict:
    moon = almanac.moon
    return {
        "phase": moon.phase.name,
        "emoji": moon.phase.emoji,
        "angle": round(moon.phase.angle, 2),
        "illumination": round(moon.phase.illumination, 4),
        "constellation": moon.constellation.name,
        "age_days": moon.age_days,
        **_rise_set(moon.rise_set, almanac.utc_offset_minutes),
    }


def build_payload(almanac: DailyAlmanac, use_24h: bool = False) -> dict:
    """Serialise an almanac into JSON-compatible types.

    Instants are ISO 8601 strings carrying the target-date UTC offset. A sun or
    moon section switched off in the flags is null.
    """
    offset = almanac.utc_offset_minutes
    noon = to_epoch_days(local_noon(almanac.day, offset))

    def clock(instant: datetime) -> str:
        return format_time(instant, offset, use_24h)

    return {
        "date": almanac.day.isoformat(),
        "observer": {
            "latitude": almanac.observer.latitude,
            "longitude": almanac.observer.longitude,
        },
        "utc_offset_minutes": offset,
        "sun": _sun(almanac) if almanac.flags.sun else None,
        "moon": _moon(almanac) if almanac.flags.moon else None,
        "planets": [
            {
                "name": p.body.display_name,
                "symbol": p.body.symbol,
                "status": p.status,
                "label": visibility.describe(p, clock),
                "difficult": p.difficult,
                "elongation": round(p.elongation, 2),
                "retrograde": longitude_rate(p.body, noon) < 0,
                **_rise_set(p.rise_set, offset),
            }
            for p in almanac.planets
        ],
        "events": [_event(e, offset) for e in almanac.events],
        "seasons": list(almanac.seasons),
        "lore": almanac.lore,
    }
