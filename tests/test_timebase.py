from datetime import date, datetime, timedelta, timezone

import pytest
from skyfield.api import load

from dayspark.frames import delta_deg
from dayspark.timebase import (
    J2000,
    from_epoch_days,
    julian_day,
    local_date,
    local_midnight,
    local_noon,
    to_epoch_days,
)
from dayspark.topocentric import gmst_degrees

UTC = timezone.utc


def test_epoch_is_zero_at_j2000():
    assert to_epoch_days(J2000) == 0.0
    assert to_epoch_days(datetime(2000, 1, 2, 12, tzinfo=UTC)) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "instant",
    [
        datetime(1900, 3, 1, 0, 0, tzinfo=UTC),
        datetime(2024, 6, 20, 9, 25, 13, tzinfo=UTC),
        datetime(2099, 12, 31, 23, 59, 59, tzinfo=UTC),
    ],
)
def test_round_trip_is_sub_second(instant):
    back = from_epoch_days(to_epoch_days(instant))
    assert abs((back - instant).total_seconds()) < 1e-3


def test_aware_non_utc_input_is_converted():
    eastern = timezone(timedelta(hours=-4))
    local = datetime(2024, 6, 20, 5, 25, tzinfo=eastern)
    assert to_epoch_days(local) == pytest.approx(
        to_epoch_days(datetime(2024, 6, 20, 9, 25, tzinfo=UTC))
    )


def test_naive_datetime_rejected():
    with pytest.raises(ValueError):
        to_epoch_days(datetime(2024, 6, 20, 12, 0))


def test_local_day_helpers():
    assert local_midnight(date(2024, 6, 20), -240) == datetime(2024, 6, 20, 4, 0, tzinfo=UTC)
    assert local_noon(date(2024, 6, 20), 120) == datetime(2024, 6, 20, 10, 0, tzinfo=UTC)
    assert local_date(datetime(2024, 6, 21, 2, 0, tzinfo=UTC), -240) == date(2024, 6, 20)
    assert local_date(datetime(2024, 6, 20, 23, 0, tzinfo=UTC), 120) == date(2024, 6, 21)


@pytest.fixture(scope="module")
def ts():
    return load.timescale(builtin=True)


@pytest.mark.parametrize(
    "instant",
    [
        datetime(2000, 1, 1, 12, tzinfo=UTC),
        datetime(2024, 1, 11, 11, 57, tzinfo=UTC),
        datetime(2016, 9, 2, 3, 0, tzinfo=UTC),
    ],
)
def test_julian_day_matches_skyfield(ts, instant):
    t = ts.from_datetime(instant)
    # UT1 - UTC stays under a second
    assert julian_day(instant) == pytest.approx(t.ut1, abs=2e-5)


@pytest.mark.parametrize(
    "instant",
    [
        datetime(2010, 3, 20, 0, 0, tzinfo=UTC),
        datetime(2024, 6, 20, 4, 0, tzinfo=UTC),
        datetime(2020, 12, 1, 18, 30, tzinfo=UTC),
    ],
)
def test_gmst_matches_skyfield(ts, instant):
    t = ts.from_datetime(instant)
    assert abs(delta_deg(gmst_degrees(to_epoch_days(instant)), t.gmst * 15.0)) < 0.02
