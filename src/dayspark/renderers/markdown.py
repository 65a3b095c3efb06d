"""Markdown renderer — one list of note lines per almanac section header."""

from collections.abc import Mapping
from datetime import datetime

from dayspark import labels, visibility
from dayspark.models import DailyAlmanac, RiseSetStatus
from dayspark.timebase import to_local

DAILY_CONTEXT = "## Daily Context"
MOON_PHASE = "## Moon Phase"
SKY_WATCH = "## Sky Watch"
CELESTIAL_EVENTS = "## Celestial Events"
SEASONS = "## Seasons"
ALMANAC = "## Almanac"


def format_time(instant: datetime, utc_offset_minutes: int, use_24h: bool = False) -> str:
    """Local clock time as "6:42 AM" or "06:42"."""
    local = to_local(instant, utc_offset_minutes)
    if use_24h:
        return f"{local.hour:02d}:{local.minute:02d}"
    period = "PM" if local.hour >= 12 else "AM"
    return f"{local.hour % 12 or 12}:{local.minute:02d} {period}"


def _sun_lines(almanac: DailyAlmanac, clock) -> list[str]:
    rs = almanac.sun.rise_set
    if rs.status is RiseSetStatus.NEVER_RISES:
        return [labels.t("sun_never_rises")]
    if rs.status is RiseSetStatus.NEVER_SETS:
        return [labels.t("sun_never_sets")]
    lines = [
        labels.t("sunrise", time=clock(rs.rise)),
        labels.t("sunset", time=clock(rs.set)),
    ]
    if rs.transit is not None:
        lines.append(labels.t("solar_noon", time=clock(rs.transit)))
    minutes = almanac.sun.day_length_minutes
    if minutes is not None:
        lines.append(labels.t("day_length", hours=minutes // 60, minutes=minutes % 60))
    return lines


def _moon_lines(almanac: DailyAlmanac, clock) -> list[str]:
    moon = almanac.moon
    lines = [
        labels.t(
            "moon_phase",
            emoji=moon.phase.emoji,
            name=moon.phase.name,
            illumination=round(moon.phase.illumination * 100),
        ),
        labels.t("moon_position", symbol=moon.constellation.symbol, name=moon.constellation.name),
        labels.t("moon_age", age=moon.age_days),
    ]
    if moon.rise_set.rise is not None:
        lines.append(labels.t("moonrise", time=clock(moon.rise_set.rise)))
    if moon.rise_set.set is not None:
        lines.append(labels.t("moonset", time=clock(moon.rise_set.set)))
    return lines


def render_sections(
    almanac: DailyAlmanac,
    use_24h: bool = False,
    headers: Mapping[str, str] | None = None,
) -> dict[str, list[str]]:
    """Render an almanac into note sections.

    Args:
        almanac: Fully computed day.
        use_24h: Clock style for every time shown.
        headers: Replacement text keyed by default section header.

    Returns:
        Mapping of section header to its lines, in display order. Sections with
        nothing to show, or switched off in the almanac's flags, are left out.
    """

    def clock(instant: datetime) -> str:
        return format_time(instant, almanac.utc_offset_minutes, use_24h)

    sections = {
        DAILY_CONTEXT: _sun_lines(almanac, clock) if almanac.flags.sun else [],
        MOON_PHASE: _moon_lines(almanac, clock) if almanac.flags.moon else [],
        SKY_WATCH: [
            labels.t(
                "planet_line",
                symbol=p.body.symbol,
                name=p.body.display_name,
                status=visibility.describe(p, clock),
            )
            for p in almanac.planets
        ],
        CELESTIAL_EVENTS: [event.label for event in almanac.events],
        SEASONS: list(almanac.seasons),
        ALMANAC: [labels.t("lore", text=almanac.lore)] if almanac.lore else [],
    }
    rename = headers or {}
    return {rename.get(header, header): lines for header, lines in sections.items() if lines}


def render_markdown(
    almanac: DailyAlmanac, use_24h: bool = False, headers: Mapping[str, str] | None = None
) -> str:
    """All sections joined into one markdown document."""
    blocks = []
    for header, lines in render_sections(almanac, use_24h, headers).items():
        blocks.append("\n".join([header, *(f"- {line}" for line in lines)]))
    return "\n\n".join(blocks) + "\n"
