"""Host computation layer — date parsing, timezone resolution, and the almanac call."""

import logging
from datetime import date, datetime, time

from pytz import UnknownTimeZoneError, timezone
from timezonefinder import TimezoneFinder

from dayspark.almanac import compute_daily_almanac
from dayspark.models import (
    DailyAlmanac,
    FeatureFlags,
    Observer,
    ObserverContext,
    QueryInput,
)

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()


class TimezoneLookupError(Exception):
    """No usable timezone for the observer."""


def parse_date(when: str) -> date:
    """Parse a "YYYY-MM-DD" local calendar date.

    Raises:
        ValueError: On any other format.
    """
    return datetime.strptime(when, "%Y-%m-%d").date()


def utc_offset_minutes(tz_name: str, day: date) -> int:
    """UTC offset in minutes in effect at local noon of ``day`` in ``tz_name``.

    Noon avoids the ambiguous and skipped hours around DST transitions.

    Raises:
        TimezoneLookupError: If ``tz_name`` is not a known IANA zone.
    """
    try:
        local_tz = timezone(tz_name)
    except UnknownTimeZoneError:
        raise TimezoneLookupError(f"Unknown timezone: {tz_name}") from None
    local_dt = local_tz.localize(datetime.combine(day, time(12, 0)), is_dst=None)
    offset = local_dt.utcoffset()
    assert offset is not None
    return round(offset.total_seconds() / 60)


def resolve_context(query: QueryInput) -> ObserverContext:
    """Validate a query and resolve its timezone and target-date UTC offset.

    Args:
        query: Raw input. ``tz_name`` overrides the coordinate lookup.

    Returns:
        ObserverContext for the almanac.

    Raises:
        ValueError: On a malformed date or out-of-range coordinates.
        TimezoneLookupError: When no timezone can be found or the name is unknown.
    """
    day = parse_date(query.when)
    if not (-90.0 <= query.lat <= 90.0 and -180.0 <= query.lng <= 180.0):
        raise ValueError(f"Coordinates out of range: lat={query.lat}, lng={query.lng}")

    tz_name = query.tz_name
    if tz_name is None:
        tz_name = _tf.timezone_at(lat=query.lat, lng=query.lng)
        if tz_name is None:
            raise TimezoneLookupError(
                f"Timezone not found: lat={query.lat}, lng={query.lng}"
            )
        logger.info("Resolved timezone %s for (%.4f, %.4f)", tz_name, query.lat, query.lng)

    offset = utc_offset_minutes(tz_name, day)
    return ObserverContext(
        day=day,
        observer=Observer(latitude=query.lat, longitude=query.lng),
        tz_name=tz_name,
        utc_offset_minutes=offset,
        location_name=query.location_name,
    )


def run(query: QueryInput, flags: FeatureFlags | None = None) -> DailyAlmanac:
    """Run the full pipeline: QueryInput -> DailyAlmanac."""
    context = resolve_context(query)
    return compute_daily_almanac(
        context.day, context.observer, context.utc_offset_minutes, flags
    )
