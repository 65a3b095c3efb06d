import json
from datetime import date, datetime, timezone

import pytest

from dayspark import compute
from dayspark.almanac import compute_daily_almanac
from dayspark.compute import TimezoneLookupError, resolve_context, run, utc_offset_minutes
from dayspark.models import FeatureFlags, Observer, QueryInput, RiseSetStatus
from dayspark.renderers.json_payload import build_payload
from dayspark.renderers.markdown import (
    ALMANAC,
    CELESTIAL_EVENTS,
    DAILY_CONTEXT,
    MOON_PHASE,
    SEASONS,
    SKY_WATCH,
    format_time,
    render_markdown,
    render_sections,
)
from dayspark.seasons import LORE

NYC = Observer(latitude=40.7128, longitude=-74.0060)
TROMSO = Observer(latitude=69.65, longitude=18.96)


@pytest.fixture(scope="module")
def nyc_solstice():
    flags = FeatureFlags(advanced_astronomy=True, astrology_aspects=True)
    return compute_daily_almanac(date(2024, 6, 20), NYC, -240, flags)


@pytest.fixture(scope="module")
def tromso_winter():
    return compute_daily_almanac(date(2024, 12, 21), TROMSO, 60)


def test_nyc_almanac_contents(nyc_solstice):
    almanac = nyc_solstice
    assert almanac.sun.rise_set.status is RiseSetStatus.NORMAL
    assert 15 * 60 < almanac.sun.day_length_minutes < 15 * 60 + 12
    assert 0 <= almanac.moon.age_days < 30
    assert 0.0 <= almanac.moon.phase.illumination <= 1.0
    assert almanac.moon.constellation.name != "Unknown"
    assert 0 < len(almanac.planets) <= 5
    assert almanac.seasons == ("☀️ **Summer Solstice** (Astronomical Summer begins)",)
    assert almanac.lore == LORE[6][1]
    instants = [e.instant for e in almanac.events]
    assert instants == sorted(instants)


def test_polar_night_omits_planets(tromso_winter):
    assert tromso_winter.sun.rise_set.status is RiseSetStatus.NEVER_RISES
    assert tromso_winter.sun.day_length_minutes is None
    assert tromso_winter.planets == ()


def test_lore_flag_off():
    almanac = compute_daily_almanac(date(2024, 3, 1), NYC, -300, FeatureFlags(lore=False))
    assert almanac.lore is None


@pytest.mark.parametrize(
    "when, offset",
    [("2024-06-20", -240), ("2024-12-21", -300), ("2024-03-10", -240), ("2024-03-09", -300)],
)
def test_resolve_context_uses_target_date_offset(when, offset):
    context = resolve_context(QueryInput(when=when, lat=40.7128, lng=-74.0060))
    assert context.tz_name == "America/New_York"
    assert context.utc_offset_minutes == offset
    assert context.day == date.fromisoformat(when)


def test_explicit_timezone_overrides_lookup():
    context = resolve_context(
        QueryInput(when="2024-06-20", lat=40.7128, lng=-74.0060, tz_name="Asia/Kolkata")
    )
    assert context.utc_offset_minutes == 330


def test_resolve_context_errors(monkeypatch):
    with pytest.raises(ValueError):
        resolve_context(QueryInput(when="20/06/2024", lat=40.0, lng=-74.0))
    with pytest.raises(ValueError):
        resolve_context(QueryInput(when="2024-06-20", lat=95.0, lng=-74.0))
    with pytest.raises(TimezoneLookupError):
        utc_offset_minutes("Mars/Olympus_Mons", date(2024, 6, 20))

    class NoZone:
        def timezone_at(self, lat, lng):
            return None

    monkeypatch.setattr(compute, "_tf", NoZone())
    with pytest.raises(TimezoneLookupError):
        resolve_context(QueryInput(when="2024-06-20", lat=0.0, lng=-150.0))


def test_run_returns_almanac_for_query():
    almanac = run(QueryInput(when="2024-12-21", lat=69.65, lng=18.96, tz_name="Europe/Oslo"))
    assert almanac.utc_offset_minutes == 60
    assert almanac.sun.rise_set.status is RiseSetStatus.NEVER_RISES


@pytest.mark.parametrize(
    "hour, minute, use_24h, expected",
    [
        (10, 42, False, "6:42 AM"),
        (10, 42, True, "06:42"),
        (4, 0, False, "12:00 AM"),
        (16, 0, False, "12:00 PM"),
        (3, 5, True, "23:05"),
    ],
)
def test_format_time(hour, minute, use_24h, expected):
    instant = datetime(2024, 6, 20, hour, minute, tzinfo=timezone.utc)
    assert format_time(instant, -240, use_24h) == expected


def test_markdown_sections(nyc_solstice):
    sections = render_sections(nyc_solstice)
    assert list(sections)[:3] == [DAILY_CONTEXT, MOON_PHASE, SKY_WATCH]
    assert set(sections) <= {DAILY_CONTEXT, MOON_PHASE, SKY_WATCH, CELESTIAL_EVENTS, SEASONS, ALMANAC}
    context = sections[DAILY_CONTEXT]
    assert context[0].startswith("🌅 **Sunrise:** 5:2")
    assert context[1].startswith("🌇 **Sunset:** 8:")
    assert context[1].endswith("PM")
    assert any(line.startswith("⏳ **Day Length:** 15h") for line in context)
    assert sections[MOON_PHASE][1].startswith("**Astronomical Position:** ")
    assert sections[MOON_PHASE][2].startswith("**Moon Age:** ")
    assert all(" **" in line for line in sections[SKY_WATCH])
    assert sections[SEASONS] == list(nyc_solstice.seasons)
    assert sections[ALMANAC][0].startswith('📜 **Lore:** _"')


def test_markdown_24h_and_polar(tromso_winter):
    sections = render_sections(tromso_winter, use_24h=True)
    assert sections[DAILY_CONTEXT] == ["🌑 **Sun:** Does not rise today"]
    assert SKY_WATCH not in sections
    text = render_markdown(tromso_winter, use_24h=True)
    assert text.startswith(DAILY_CONTEXT + "\n- ")
    assert "AM" not in text and "PM" not in text


def test_json_payload_is_serialisable(nyc_solstice):
    payload = build_payload(nyc_solstice)
    decoded = json.loads(json.dumps(payload, ensure_ascii=False))
    assert decoded["date"] == "2024-06-20"
    assert decoded["utc_offset_minutes"] == -240
    assert decoded["sun"]["status"] == "normal"
    assert decoded["sun"]["rise"].startswith("2024-06-20T05:2")
    assert decoded["sun"]["rise"].endswith("-04:00")
    assert len(decoded["events"]) == len(nyc_solstice.events)
    assert {p["name"] for p in decoded["planets"]} <= {"Mercury", "Venus", "Mars", "Jupiter", "Saturn"}
    for planet in decoded["planets"]:
        assert isinstance(planet["retrograde"], bool)
        assert planet["label"]


def test_switched_off_sections_are_skipped():
    flags = FeatureFlags(sun=False, moon=False, planets=False, celestial_events=False)
    almanac = compute_daily_almanac(date(2024, 6, 20), NYC, -240, flags)
    assert almanac.planets == ()
    assert almanac.events == ()
    assert almanac.flags is flags
    sections = render_sections(almanac)
    assert list(sections) == [SEASONS, ALMANAC]
    payload = build_payload(almanac)
    assert payload["sun"] is None and payload["moon"] is None


def test_section_headers_can_be_renamed(nyc_solstice):
    renamed = {DAILY_CONTEXT: "## Sun", ALMANAC: "## Folklore"}
    sections = render_sections(nyc_solstice, headers=renamed)
    assert "## Sun" in sections and DAILY_CONTEXT not in sections
    assert list(sections)[0] == "## Sun"
    assert sections["## Folklore"] == render_sections(nyc_solstice)[ALMANAC]
    text = render_markdown(nyc_solstice, headers=renamed)
    assert text.startswith("## Sun\n- 🌅 **Sunrise:**")
