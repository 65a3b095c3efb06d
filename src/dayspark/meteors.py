"""Annual meteor-shower peak table."""

from dataclasses import dataclass
from datetime import date

from dayspark.models import MeteorShowerPeak


@dataclass(frozen=True)
class MeteorShower:
    name: str
    month: int
    day: int  # Nominal peak day
    window_days: int  # Days either side of the peak still reported


SHOWERS: tuple[MeteorShower, ...] = (
    MeteorShower("Quadrantids", 1, 3, 2),
    MeteorShower("Lyrids", 4, 22, 1),
    MeteorShower("Eta Aquariids", 5, 6, 2),
    MeteorShower("Perseids", 8, 12, 2),
    MeteorShower("Orionids", 10, 21, 2),
    MeteorShower("Leonids", 11, 17, 1),
    MeteorShower("Geminids", 12, 14, 2),
    MeteorShower("Ursids", 12, 22, 1),
)


def active_shower(day: date) -> MeteorShower | None:
    """First shower whose peak window contains ``day``.

    Windows do not cross month boundaries.
    """
    for shower in SHOWERS:
        if day.month == shower.month and abs(day.day - shower.day) <= shower.window_days:
            return shower
    return None


def shower_peak(day: date) -> MeteorShowerPeak | None:
    shower = active_shower(day)
    return MeteorShowerPeak(shower.name) if shower is not None else None
