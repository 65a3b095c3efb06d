"""Environment-driven settings. Call load_dotenv() before load_settings() to pick up .env."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from dayspark.models import FeatureFlags
from dayspark.renderers.markdown import (
    ALMANAC,
    CELESTIAL_EVENTS,
    DAILY_CONTEXT,
    MOON_PHASE,
    SEASONS,
    SKY_WATCH,
)

DEFAULT_LATITUDE = 40.7128
DEFAULT_LONGITUDE = -74.0060
DEFAULT_LOCATION_NAME = "Local Coordinates"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

# Variable -> default section header it replaces
_HEADER_VARS = {
    "DAYSPARK_SUN_HEADER": DAILY_CONTEXT,
    "DAYSPARK_MOON_HEADER": MOON_PHASE,
    "DAYSPARK_PLANET_HEADER": SKY_WATCH,
    "DAYSPARK_CELESTIAL_HEADER": CELESTIAL_EVENTS,
    "DAYSPARK_SEASONS_HEADER": SEASONS,
    "DAYSPARK_ALMANAC_HEADER": ALMANAC,
}


class ConfigError(ValueError):
    """Malformed environment value."""


@dataclass(frozen=True)
class Settings:
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE
    location_name: str = DEFAULT_LOCATION_NAME
    timezone: str | None = None  # IANA name; looked up from coordinates when None
    use_24h: bool = False
    flags: FeatureFlags = FeatureFlags()
    headers: Mapping[str, str] = field(default_factory=dict)  # Section header overrides


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean, got {raw!r}")


def _coordinate(env: Mapping[str, str], key: str, default: float, limit: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None
    if not -limit <= value <= limit:
        raise ConfigError(f"{key} must be within +/-{limit}, got {value}")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Read DAYSPARK_* variables into Settings.

    Args:
        env: Variable mapping; defaults to os.environ.

    Raises:
        ConfigError: On an unparseable number, an out-of-range coordinate, or a
            boolean outside 1/0/true/false/yes/no/on/off.
    """
    env = os.environ if env is None else env
    flags = FeatureFlags(
        advanced_astronomy=_bool(env, "DAYSPARK_ADVANCED", False),
        astrology_aspects=_bool(env, "DAYSPARK_ASTROLOGY", False),
        deep_astrology=_bool(env, "DAYSPARK_DEEP", False),
        seasons=_bool(env, "DAYSPARK_SEASONS", True),
        cross_quarter_days=_bool(env, "DAYSPARK_CROSS_QUARTER", False),
        meteorological_seasons=_bool(env, "DAYSPARK_METEOROLOGICAL", False),
        lore=_bool(env, "DAYSPARK_LORE", True),
        sun=_bool(env, "DAYSPARK_SUN", True),
        moon=_bool(env, "DAYSPARK_MOON", True),
        planets=_bool(env, "DAYSPARK_PLANETS", True),
        celestial_events=_bool(env, "DAYSPARK_EVENTS", True),
    )
    return Settings(
        latitude=_coordinate(env, "DAYSPARK_LATITUDE", DEFAULT_LATITUDE, 90.0),
        longitude=_coordinate(env, "DAYSPARK_LONGITUDE", DEFAULT_LONGITUDE, 180.0),
        location_name=env.get("DAYSPARK_LOCATION_NAME") or DEFAULT_LOCATION_NAME,
        timezone=env.get("DAYSPARK_TIMEZONE") or None,
        use_24h=_bool(env, "DAYSPARK_24H", False),
        flags=flags,
        headers={
            default: env[key].strip()
            for key, default in _HEADER_VARS.items()
            if env.get(key, "").strip()
        },
    )
