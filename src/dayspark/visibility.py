"""Naked-eye planet visibility buckets for the night following a date."""

from datetime import datetime, timedelta

from dayspark import labels
from dayspark.models import Body, PlanetVisibility, RiseSetResult

VISIBLE_PLANETS: tuple[Body, ...] = (
    Body.MERCURY,
    Body.VENUS,
    Body.MARS,
    Body.JUPITER,
    Body.SATURN,
)

MIN_ELONGATION_DEG = 10.0
EVENING_GRACE = timedelta(minutes=60)
DIFFICULT_MARGIN = timedelta(minutes=90)

# Bucket keys double as label keys in dayspark.labels
TOO_CLOSE = "too_close"
ALL_NIGHT = "all_night"
MOST_OF_NIGHT = "most_of_night"
UNTIL = "until"
TONIGHT = "tonight"
MORNING = "morning"
DAYTIME = "daytime"


def classify(
    body: Body,
    planet: RiseSetResult,
    sun: RiseSetResult,
    elongation: float,
) -> PlanetVisibility | None:
    """Place a planet into one visibility bucket.

    The night runs from today's sunset to the next sunrise, taken as today's
    sunrise plus 24 hours. A planet that rose before today's sunset is judged by
    its next rise, one day later, so a pre-dawn riser that sets in daylight reads
    "Visible in Morning" rather than "Up during day".

    Returns:
        PlanetVisibility, or None when either rise/set pair is incomplete.
    """
    if None in (planet.rise, planet.set, sun.rise, sun.set):
        return None
    rise: datetime = planet.rise
    set_: datetime = planet.set
    sunset: datetime = sun.set
    next_sunrise: datetime = sun.rise + timedelta(days=1)

    if elongation < MIN_ELONGATION_DEG:
        return PlanetVisibility(body, planet, elongation, TOO_CLOSE)

    # A rise before today's sunset recurs roughly a day later, inside tonight
    night_rise = rise if rise > sunset else rise + timedelta(days=1)

    if set_ > next_sunrise:
        status = ALL_NIGHT if rise < sunset + EVENING_GRACE else MOST_OF_NIGHT
    elif sunset < set_ < next_sunrise:
        status = UNTIL if rise < sunset else TONIGHT
    elif sunset < night_rise < next_sunrise:
        status = MORNING
    else:
        status = DAYTIME

    difficult = (status == MORNING and abs(night_rise - next_sunrise) < DIFFICULT_MARGIN) or (
        status == UNTIL and abs(set_ - sunset) < DIFFICULT_MARGIN
    )
    return PlanetVisibility(body, planet, elongation, status, difficult)


def describe(visibility: PlanetVisibility, format_time) -> str:
    """Human label for a bucket; ``format_time`` renders an instant as clock text."""
    rs = visibility.rise_set
    fields = {}
    if visibility.status in (MOST_OF_NIGHT, MORNING):
        fields["rise"] = format_time(rs.rise)
    elif visibility.status in (UNTIL, TONIGHT):
        fields["set"] = format_time(rs.set)
    text = labels.t(visibility.status, **fields)
    if visibility.difficult:
        text += labels.t("difficult")
    return text
