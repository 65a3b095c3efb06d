from datetime import date, datetime, timedelta, timezone

import pytest

from dayspark.phase import moon_age, phase, previous_new_moon
from dayspark.timebase import from_epoch_days, to_epoch_days

UTC = timezone.utc


def test_phase_values_stay_in_range():
    for step in range(120):
        info = phase(8700.0 + step * 0.25)
        assert 0.0 <= info.angle < 360.0
        assert 0.0 <= info.illumination <= 1.0


def test_known_new_moon_is_named_new_moon():
    info = phase(to_epoch_days(datetime(2024, 1, 11, 11, 57, tzinfo=UTC)))
    assert info.name == "New Moon"
    assert info.emoji == "🌑"
    assert info.illumination < 0.01


def test_known_full_moon_is_named_full_moon():
    info = phase(to_epoch_days(datetime(2024, 1, 25, 17, 54, tzinfo=UTC)))
    assert info.name == "Full Moon"
    assert info.illumination > 0.99


def test_previous_new_moon_converges_near_published_instant():
    published = datetime(2024, 1, 11, 11, 57, tzinfo=UTC)
    found = from_epoch_days(previous_new_moon(to_epoch_days(datetime(2024, 1, 20, tzinfo=UTC))))
    assert abs(found - published) < timedelta(hours=2)


def test_previous_new_moon_never_looks_forward():
    d = to_epoch_days(datetime(2024, 1, 10, 12, tzinfo=UTC))
    assert previous_new_moon(d) <= d


@pytest.mark.parametrize(
    "new_moon_day, offset",
    [
        (date(2024, 1, 11), -300),  # 06:57 EST
        (date(2024, 4, 8), -240),  # 14:21 EDT, total eclipse day
        (date(2024, 1, 11), 540),  # 20:57 JST
    ],
)
def test_age_counts_calendar_days_from_new_moon(new_moon_day, offset):
    for days in range(0, 10):
        assert moon_age(new_moon_day + timedelta(days=days), offset) == days


def test_age_stays_below_thirty():
    day = date(2024, 1, 1)
    for step in range(400):
        assert 0 <= moon_age(day + timedelta(days=step), -300) < 30
