"""Data model definitions — explicit boundaries between input, compute, and render layers."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from dayspark import labels


class Body(Enum):
    """Closed set of bodies the engine can place on the sky."""

    SUN = ("Sun", "☉")
    MOON = ("Moon", "☾")
    MERCURY = ("Mercury", "☿")
    VENUS = ("Venus", "♀")
    MARS = ("Mars", "♂")
    JUPITER = ("Jupiter", "♃")
    SATURN = ("Saturn", "♄")
    URANUS = ("Uranus", "♅")
    NEPTUNE = ("Neptune", "♆")
    PLUTO = ("Pluto", "♇")
    CHIRON = ("Chiron", "⚷")
    NODE = ("Node", "☊")

    @property
    def display_name(self) -> str:
        return self.value[0]

    @property
    def symbol(self) -> str:
        return self.value[1]


class RiseSetStatus(Enum):
    NORMAL = "normal"
    NEVER_RISES = "never_rises"  # Circumpolar below the horizon for the whole day
    NEVER_SETS = "never_sets"  # Circumpolar above the horizon for the whole day


class AspectCategory(Enum):
    BASIC = "basic"
    ASTROLOGY = "astrology"
    DEEP = "deep"


@dataclass(frozen=True)
class QueryInput:
    """Raw host input. Not yet validated."""

    when: str  # "YYYY-MM-DD" local calendar date
    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees, east positive)
    tz_name: str | None = None  # IANA zone; looked up from lat/lng when None
    location_name: str = "Local Coordinates"


@dataclass(frozen=True)
class Observer:
    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive


@dataclass(frozen=True)
class ObserverContext:
    """Result of date parsing + timezone resolution. Input to the almanac."""

    day: date  # Local calendar date being described
    observer: Observer
    tz_name: str  # IANA zone used to derive the offset
    utc_offset_minutes: int  # Offset in effect on ``day`` (not today)
    location_name: str  # For display


@dataclass(frozen=True)
class OrbitalElements:
    """Keplerian elements at J2000 with a linear mean-anomaly rate."""

    node: float  # Longitude of ascending node (degrees)
    inclination: float  # Degrees
    perihelion: float  # Argument of perihelion (degrees)
    semi_major_axis: float  # AU
    eccentricity: float
    mean_anomaly_epoch: float  # Mean anomaly at J2000 (degrees)
    mean_motion: float  # Degrees per day

    def mean_anomaly(self, d: float) -> float:
        return self.mean_anomaly_epoch + self.mean_motion * d


@dataclass(frozen=True)
class EclipticPosition:
    """Geocentric ecliptic coordinates."""

    longitude: float  # [0, 360) degrees
    latitude: float  # Degrees
    distance: float | None = None  # km for the Moon, AU otherwise; None for Node


@dataclass(frozen=True)
class EquatorialPosition:
    right_ascension: float  # [0, 360) degrees
    declination: float  # Degrees


@dataclass(frozen=True)
class RiseSetResult:
    """Rise/set/transit instants for one body and one local day.

    ``rise`` and ``set`` are both None when ``status`` is NEVER_RISES or
    NEVER_SETS. A NORMAL result may still miss one side when an altitude scan
    finds only one horizon crossing inside its window.
    """

    rise: datetime | None
    set: datetime | None
    transit: datetime | None = None
    status: RiseSetStatus = RiseSetStatus.NORMAL

    @property
    def is_degenerate(self) -> bool:
        return self.status is not RiseSetStatus.NORMAL


@dataclass(frozen=True)
class PhaseInfo:
    angle: float  # Sun-Moon elongation, [0, 360) degrees
    illumination: float  # Illuminated fraction, [0, 1]
    name: str  # One of eight phase buckets ("New Moon", ...)
    emoji: str


@dataclass(frozen=True)
class Constellation:
    name: str
    symbol: str


@dataclass(frozen=True)
class AspectDefinition:
    angle: float  # Separation in degrees, 0..180
    symbol: str
    label: str
    category: AspectCategory


@dataclass(frozen=True)
class NodeCrossing:
    ascending: bool

    @property
    def label(self) -> str:
        return labels.t("node_ascending" if self.ascending else "node_descending")


@dataclass(frozen=True)
class EquatorCrossing:
    @property
    def label(self) -> str:
        return labels.t("equator")


@dataclass(frozen=True)
class ApsisExtreme:
    perigee: bool

    @property
    def label(self) -> str:
        return labels.t("perigee" if self.perigee else "apogee")


@dataclass(frozen=True)
class DeclinationExtreme:
    high: bool

    @property
    def label(self) -> str:
        return labels.t("runs_high" if self.high else "runs_low")


@dataclass(frozen=True)
class AspectCrossing:
    aspect: AspectDefinition
    body_a: Body
    body_b: Body

    @property
    def angle(self) -> float:
        return self.aspect.angle

    @property
    def label(self) -> str:
        return labels.t(
            "aspect",
            symbol=self.aspect.symbol,
            label=self.aspect.label,
            symbol_a=self.body_a.symbol,
            symbol_b=self.body_b.symbol,
            name_a=self.body_a.display_name,
            name_b=self.body_b.display_name,
        )


@dataclass(frozen=True)
class StationaryPoint:
    body: Body
    retrograde: bool  # True when the body turns retrograde, False when it turns direct

    @property
    def label(self) -> str:
        return labels.t("station", symbol=self.body.symbol, name=self.body.display_name)


@dataclass(frozen=True)
class MeteorShowerPeak:
    name: str

    @property
    def label(self) -> str:
        return labels.t("meteor", name=self.name)


EventKind = (
    NodeCrossing
    | EquatorCrossing
    | ApsisExtreme
    | DeclinationExtreme
    | AspectCrossing
    | StationaryPoint
    | MeteorShowerPeak
)


@dataclass(frozen=True)
class Event:
    """A single dated celestial event."""

    instant: datetime  # UTC; local midnight for date-only events (meteor peaks)
    kind: EventKind

    @property
    def label(self) -> str:
        return self.kind.label


@dataclass(frozen=True)
class FeatureFlags:
    """Optional computation classes. Filters which events and sections are produced."""

    advanced_astronomy: bool = False  # Apsis, declination extremes, equator crossings
    astrology_aspects: bool = False  # 60 / 90 / 120 degree aspects
    deep_astrology: bool = False  # Minor aspects plus Pluto, Chiron and the Node
    seasons: bool = True
    cross_quarter_days: bool = False
    meteorological_seasons: bool = False
    lore: bool = True
    sun: bool = True  # Daily Context section
    moon: bool = True  # Moon Phase section
    planets: bool = True  # Sky Watch section
    celestial_events: bool = True


@dataclass(frozen=True)
class SunTimes:
    rise_set: RiseSetResult

    @property
    def day_length_minutes(self) -> int | None:
        rs = self.rise_set
        if rs.rise is None or rs.set is None:
            return None
        return round((rs.set - rs.rise).total_seconds() / 60)


@dataclass(frozen=True)
class MoonInfo:
    phase: PhaseInfo  # At local noon
    constellation: Constellation  # At 00:00 UTC of the date, as almanacs list it
    age_days: int  # Whole calendar days since the last new moon
    rise_set: RiseSetResult


@dataclass(frozen=True)
class PlanetVisibility:
    body: Body
    rise_set: RiseSetResult
    elongation: float  # Sun-planet separation (degrees)
    status: str  # Visibility bucket key, see dayspark.visibility
    difficult: bool = False


@dataclass(frozen=True)
class DailyAlmanac:
    """The sole input to renderers. Fully computed state for one day."""

    day: date
    observer: Observer
    utc_offset_minutes: int
    sun: SunTimes
    moon: MoonInfo
    planets: tuple[PlanetVisibility, ...]
    events: tuple[Event, ...]  # Sorted; meteor peaks appended last
    seasons: tuple[str, ...] = field(default_factory=tuple)
    lore: str | None = None
    flags: FeatureFlags = field(default_factory=FeatureFlags)
