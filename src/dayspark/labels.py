"""Label templates for almanac lines and event names."""

_STRINGS: dict[str, str] = {
    # Lunar events
    "node_ascending": "☽ at ☊ (Ascending Node)",
    "node_descending": "☽ at ☋ (Descending Node)",
    "equator": "☽ on Eq. (Crosses Equator)",
    "perigee": "☽ at Perig. (Closest)",
    "apogee": "☽ at Apo. (Furthest)",
    "runs_high": "☽ runs High",
    "runs_low": "☽ runs Low",
    # Planetary events
    "aspect": "{symbol} {label}: {symbol_a} {symbol_b} ({name_a} & {name_b})",
    "station": "{symbol} stat. ({name} Stationary)",
    "meteor": "🌠 Meteor Shower: {name} (Peak)",
    # Visibility
    "too_close": "Not visible (Too close to Sun)",
    "all_night": "Visible All Night",
    "most_of_night": "Visible Most of Night (Rises {rise})",
    "until": "Visible until {set}",
    "tonight": "Visible Tonight (Sets {set})",
    "morning": "Visible in Morning (Rises {rise})",
    "daytime": "Not visible (Up during day)",
    "difficult": " (Difficult)",
    # Sun and Moon lines
    "sunrise": "🌅 **Sunrise:** {time}",
    "sunset": "🌇 **Sunset:** {time}",
    "solar_noon": "🕛 **Solar Noon:** {time}",
    "day_length": "⏳ **Day Length:** {hours}h {minutes:02d}m",
    "sun_never_rises": "🌑 **Sun:** Does not rise today",
    "sun_never_sets": "☀️ **Sun:** Does not set today",
    "moon_phase": "{emoji} **Phase:** {name} ({illumination}%)",
    "moon_position": "**Astronomical Position:** {symbol} {name}",
    "moon_age": "**Moon Age:** {age} days",
    "moonrise": "🌙 **Rise:** {time}",
    "moonset": "📉 **Set:** {time}",
    "planet_line": "{symbol} **{name}:** {status}",
    "lore": '📜 **Lore:** _"{text}"_',
    # Seasons
    "spring_equinox": "✨ **Spring Equinox** (Astronomical Spring begins)",
    "summer_solstice": "☀️ **Summer Solstice** (Astronomical Summer begins)",
    "autumnal_equinox": "🍂 **Autumnal Equinox** (Astronomical Fall begins)",
    "winter_solstice": "❄️ **Winter Solstice** (Astronomical Winter begins)",
    "imbolc": "🌱 **Imbolc** (Mid-Winter / First Stirrings of Spring)",
    "beltane": "🌸 **Beltane** (Mid-Spring / First of May)",
    "lammas": "🌾 **Lammas** (Mid-Summer / First Harvest)",
    "samhain": "🎃 **Samhain** (Mid-Autumn / Final Harvest)",
    "meteorological_spring": "🌱 **Meteorological Spring begins**",
    "meteorological_summer": "☀️ **Meteorological Summer begins**",
    "meteorological_fall": "🍂 **Meteorological Fall (Autumn) begins**",
    "meteorological_winter": "❄️ **Meteorological Winter begins**",
}


def t(key: str, **fields: object) -> str:
    """Return the template for key, formatted with fields.

    Falls back to the key itself if no template is registered.
    """
    template = _STRINGS.get(key)
    if template is None:
        return key
    return template.format(**fields) if fields else template
