from datetime import date, timedelta

import numpy as np
import pytest

from dayspark.events import (
    aspect_bodies,
    aspect_events,
    dedupe_and_sort,
    lunar_events,
    scan_day,
    station_events,
    turning_points,
    zero_crossings,
)
from dayspark.models import (
    ApsisExtreme,
    AspectCrossing,
    Body,
    DeclinationExtreme,
    EquatorCrossing,
    Event,
    FeatureFlags,
    MeteorShowerPeak,
    NodeCrossing,
    StationaryPoint,
)
from dayspark.timebase import from_epoch_days, local_midnight, to_epoch_days

ADVANCED = FeatureFlags(advanced_astronomy=True)


def _window(day: date, offset: int = 0) -> float:
    return to_epoch_days(local_midnight(day, offset))


def _days(start: date, count: int):
    return [start + timedelta(days=i) for i in range(count)]


def test_zero_crossings_interpolate_and_tag_direction():
    days = np.array([0.0, 1.0, 2.0, 3.0])
    values = np.array([-1.0, 1.0, 3.0, -1.0])
    hits = zero_crossings(days, values)
    assert hits[0] == (pytest.approx(0.5), True)
    assert hits[1] == (pytest.approx(2.75), False)


def test_turning_points_report_the_turning_sample():
    days = np.arange(6, dtype=float)
    values = np.array([3.0, 2.0, 1.0, 2.0, 3.0, 2.0])
    assert turning_points(days, values) == [(2.0, False), (4.0, True)]


def test_turning_points_skip_flat_steps():
    days = np.arange(5, dtype=float)
    values = np.array([1.0, 2.0, 2.0, 1.0, 0.0])
    assert turning_points(days, values) == [(2.0, True)]


def test_default_flags_only_report_node_crossings():
    kinds = set()
    for day in _days(date(2024, 1, 1), 28):
        kinds |= {type(e.kind) for e in lunar_events(_window(day), FeatureFlags())}
    assert kinds == {NodeCrossing}


def test_lunar_month_has_both_nodes_and_both_declination_extremes():
    found = []
    for day in _days(date(2024, 1, 1), 28):
        found += lunar_events(_window(day), ADVANCED)
    labels = {e.label for e in found}
    assert NodeCrossing(ascending=True).label in labels
    assert NodeCrossing(ascending=False).label in labels
    assert DeclinationExtreme(high=True).label in labels
    assert DeclinationExtreme(high=False).label in labels
    assert sum(isinstance(e.kind, EquatorCrossing) for e in found) >= 2


def test_perigee_of_january_2024():
    # Perigee 2024-01-13 10:35 UTC; apogees fall on Jan 1 and Jan 29
    found = []
    for day in _days(date(2024, 1, 11), 5):
        found += [e for e in lunar_events(_window(day), ADVANCED) if isinstance(e.kind, ApsisExtreme)]
    assert [e.kind.perigee for e in found] == [True]


def test_lunar_events_stay_inside_window():
    window = _window(date(2024, 2, 10), -300)
    for event in lunar_events(window, ADVANCED):
        assert from_epoch_days(window) <= event.instant < from_epoch_days(window + 1.0)


def test_mercury_stations_in_april_2024():
    # Retrograde station 2024-04-01, direct station 2024-04-25
    retro = []
    direct = []
    for day in _days(date(2024, 3, 27), 35):
        for event in station_events(_window(day), (Body.MERCURY,)):
            (retro if event.kind.retrograde else direct).append(day)
    assert len(retro) == 1 and date(2024, 3, 30) <= retro[0] <= date(2024, 4, 3)
    assert len(direct) == 1 and date(2024, 4, 23) <= direct[0] <= date(2024, 4, 27)


def test_station_instant_is_window_start():
    window = _window(date(2024, 4, 1))
    for event in station_events(window, (Body.MERCURY,)):
        assert event.instant == from_epoch_days(window)
        assert event.label == "☿ stat. (Mercury Stationary)"


def test_aspect_bodies_follow_flags():
    basic = aspect_bodies(FeatureFlags())
    assert basic[0] is Body.MOON and Body.NEPTUNE in basic
    assert Body.SUN not in basic and Body.PLUTO not in basic
    deep = aspect_bodies(FeatureFlags(deep_astrology=True))
    assert {Body.PLUTO, Body.CHIRON, Body.NODE} <= set(deep)


def test_moon_node_conjunction_left_to_node_crossings():
    flags = FeatureFlags(astrology_aspects=True, deep_astrology=True)
    for day in _days(date(2024, 1, 1), 28):
        for event in aspect_events(_window(day), flags):
            kind = event.kind
            if {kind.body_a, kind.body_b} == {Body.MOON, Body.NODE}:
                assert kind.angle not in (0.0, 180.0)


def test_dedupe_keeps_first_and_sorts():
    later = from_epoch_days(10.5)
    earlier = from_epoch_days(10.1)
    events = [
        Event(later, NodeCrossing(ascending=True)),
        Event(earlier, EquatorCrossing()),
        Event(from_epoch_days(10.9), NodeCrossing(ascending=True)),
    ]
    result = dedupe_and_sort(events)
    assert [e.instant for e in result] == [earlier, later]


def test_scan_day_sorted_unique_and_inside_window(nyc, all_flags):
    day = date(2024, 6, 20)
    window = _window(day, -240)
    events = scan_day(day, window, all_flags)
    assert events
    instants = [e.instant for e in events]
    assert instants == sorted(instants)
    labels = [e.label for e in events]
    assert len(labels) == len(set(labels))
    for event in events:
        assert from_epoch_days(window) <= event.instant < from_epoch_days(window + 1.0)


def test_scan_day_appends_meteor_peak_last():
    day = date(2024, 8, 12)
    window = _window(day, -240)
    events = scan_day(day, window, FeatureFlags(astrology_aspects=True))
    assert isinstance(events[-1].kind, MeteorShowerPeak)
    assert events[-1].label == "🌠 Meteor Shower: Perseids (Peak)"
    assert events[-1].instant == from_epoch_days(window)
    assert not any(isinstance(e.kind, MeteorShowerPeak) for e in events[:-1])


def test_scan_day_aspect_labels():
    flags = FeatureFlags(astrology_aspects=True)
    found = []
    for day in _days(date(2024, 5, 1), 10):
        found += [e for e in scan_day(day, _window(day), flags) if isinstance(e.kind, AspectCrossing)]
    assert found
    for event in found:
        assert event.kind.body_a.display_name in event.label
        assert event.kind.body_b.display_name in event.label
        assert event.kind.aspect.label in event.label


def test_stationary_point_kind_exposes_body():
    kind = StationaryPoint(Body.SATURN, retrograde=True)
    assert kind.label == "♄ stat. (Saturn Stationary)"
