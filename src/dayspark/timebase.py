"""Time base — UTC instants to continuous epoch days and local calendar helpers.

Every formula in the engine takes ``d``: days since 2000-01-01 12:00 UTC (J2000.0
on the UTC scale). Leap seconds are ignored, so ``d`` is a plain linear function
of POSIX time.
"""

from datetime import date, datetime, time, timedelta, timezone

J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)
J2000_JULIAN_DAY = 2451545.0
_ONE_DAY = timedelta(days=1)


def to_epoch_days(instant: datetime) -> float:
    """Convert an aware datetime to days since J2000.

    Raises:
        ValueError: If ``instant`` is naive.
    """
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValueError(f"Naive datetime is not an instant: {instant!r}")
    return (instant - J2000) / _ONE_DAY


def from_epoch_days(d: float) -> datetime:
    """Convert days since J2000 back to an aware UTC datetime."""
    return J2000 + timedelta(days=d)


def julian_day(instant: datetime) -> float:
    return to_epoch_days(instant) + J2000_JULIAN_DAY


def local_midnight(day: date, utc_offset_minutes: int) -> datetime:
    """UTC instant at which the local calendar day begins."""
    midnight = datetime.combine(day, time(0, 0), tzinfo=timezone.utc)
    return midnight - timedelta(minutes=utc_offset_minutes)


def local_noon(day: date, utc_offset_minutes: int) -> datetime:
    return local_midnight(day, utc_offset_minutes) + timedelta(hours=12)


def utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time(0, 0), tzinfo=timezone.utc)


def to_local(instant: datetime, utc_offset_minutes: int) -> datetime:
    """Shift a UTC instant into a fixed-offset local datetime."""
    tz = timezone(timedelta(minutes=utc_offset_minutes))
    return instant.astimezone(tz)


def local_date(instant: datetime, utc_offset_minutes: int) -> date:
    return to_local(instant, utc_offset_minutes).date()
