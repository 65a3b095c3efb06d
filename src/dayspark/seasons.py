"""Season markers and monthly almanac lore."""

import logging
from datetime import date

from dayspark import labels
from dayspark.bodies import sun_position
from dayspark.frames import norm360
from dayspark.models import FeatureFlags
from dayspark.timebase import local_midnight, to_epoch_days

logger = logging.getLogger(__name__)

# Sun longitude at which each astronomical season begins
_ASTRONOMICAL: tuple[tuple[float, str], ...] = (
    (0.0, "spring_equinox"),
    (90.0, "summer_solstice"),
    (180.0, "autumnal_equinox"),
    (270.0, "winter_solstice"),
)

_CROSS_QUARTER: dict[tuple[int, int], str] = {
    (2, 1): "imbolc",
    (2, 2): "imbolc",
    (5, 1): "beltane",
    (8, 1): "lammas",
    (11, 1): "samhain",
}

_METEOROLOGICAL: dict[int, str] = {
    3: "meteorological_spring",
    6: "meteorological_summer",
    9: "meteorological_fall",
    12: "meteorological_winter",
}

LORE: dict[int, tuple[str, ...]] = {
    1: (
        "In January if the Sun appear, March and April pay full dear.",
        "A summerish January, a winterish spring.",
        "A warm January, a cold May.",
    ),
    2: (
        "There is always one fine week in February.",
        "Fogs in February mean frosts in May.",
        "When it rains in February, all the year suffers.",
    ),
    3: (
        "When March has April weather, April will have March weather.",
        "March damp and warm; Will do farmer much harm.",
        "In March much snow; To plants and trees much woe.",
    ),
    4: (
        "If it thunders on All Fools’ Day; It brings good crops of corn and hay.",
        "April weather; Rain and sunshine, both together.",
        "After a wet April, a dry June.",
    ),
    5: (
        "In the middle of May comes the tail of winter.",
        "The more thunder in May, the less in August and September.",
        "A leaking May and a warm June; Bring on the harvest very soon.",
    ),
    6: (
        "A cold a wet June spoils the rest of the year.",
        "When it is hottest in June, it will be the coldest in the corresponding days"
        " of the next February.",
        "A good leak in June; Sets all in tune.",
    ),
    7: (
        "As July, so the next January.",
        "Whatever July and August do not boil, September cannot fry.",
        "If it rains on July 10th, it will rain for seven weeks.",
    ),
    8: (
        "When the dew is heavy in August, the weather generally remains fair.",
        "If the first week in August is unusually warm, the winter will be white and long.",
        "A fog in August indicates a severe winter and plenty of snow.",
    ),
    9: (
        "Heavy September rains bring drought.",
        "If the storms in September clear off warm, all the storms of the following"
        " winter will be warm.",
        "Fair on September 1st, fair for the month.",
    ),
    10: (
        "There are always nineteen fine days in October.",
        "Much rain in October, much wind in December.",
        "Full Moon in October without frost, no frost till full Moon in November.",
    ),
    11: (
        "As November, so the following March.",
        "When in November the water rises, it will show itself the whole winter.",
        "A heavy November snow will last till April.",
    ),
    12: (
        "Thunder in December presages fine weather.",
        "So far as the Sun shines on Christmas Day; So far will the snow blow in May.",
    ),
}


def astronomical_season(day: date, utc_offset_minutes: int) -> str | None:
    """Label key of the equinox or solstice falling inside the local day, if any."""
    start = to_epoch_days(local_midnight(day, utc_offset_minutes))
    lon_start = sun_position(start).longitude
    # The Sun moves about one degree per day, so the unwrapped sweep is short
    sweep = norm360(sun_position(start + 1.0).longitude - lon_start)
    for boundary, key in _ASTRONOMICAL:
        if norm360(boundary - lon_start) < sweep:
            return key
    return None


def season_markers(day: date, utc_offset_minutes: int, flags: FeatureFlags) -> tuple[str, ...]:
    """Rendered season lines for the date, in astronomical, cross-quarter, meteorological order."""
    if not flags.seasons:
        return ()
    keys: list[str] = []
    astro = astronomical_season(day, utc_offset_minutes)
    if astro is not None:
        keys.append(astro)
    if flags.cross_quarter_days and (day.month, day.day) in _CROSS_QUARTER:
        keys.append(_CROSS_QUARTER[(day.month, day.day)])
    if flags.meteorological_seasons and day.day == 1 and day.month in _METEOROLOGICAL:
        keys.append(_METEOROLOGICAL[day.month])
    if keys:
        logger.debug("%s: season markers %s", day.isoformat(), keys)
    return tuple(labels.t(key) for key in keys)


def lore_for(day: date) -> str:
    """Deterministic pick from the month's lore lines."""
    lines = LORE[day.month]
    return lines[(day.day - 1) % len(lines)]
