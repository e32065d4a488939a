PLANET_NAMES = ["Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune", "Pluto"]

SIGN_NAMES = ["Aries","Taurus","Gemini","Cancer","Leo","Virgo","Libra","Scorpio","Sagittarius","Capricorn","Aquarius","Pisces"]

MOON_PHASE_NAMES = [
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
]

MAJOR_ASPECTS = ["conjunction", "trine", "square", "opposition", "sextile"]

PLANET_EVENTS = ["enters-sign", "goes-retrograde", "goes-direct"]

SEASONAL_TYPES = ["solstice", "equinox", "cross-quarter"]

ASPECT_ALIASES = {
    "conjunct": "conjunction",
    "conjuncts": "conjunction",
    "conjoin": "conjunction",
    "conjoins": "conjunction",
    "conjoining": "conjunction",
    "trines": "trine",
    "trining": "trine",
    "squares": "square",
    "squaring": "square",
    "opposite": "opposition",
    "opposes": "opposition",
    "opposing": "opposition",
    "sextiles": "sextile",
    "sextiling": "sextile",
}

PHASE_ALIASES = {
    "third quarter": "Last Quarter",
    "last quarter moon": "Last Quarter",
    "first quarter moon": "First Quarter",
}

_PLANET_LOOKUP = {name.lower(): name for name in PLANET_NAMES}
_SIGN_LOOKUP = {name.lower(): name for name in SIGN_NAMES}
_PHASE_LOOKUP = {name.lower(): name for name in MOON_PHASE_NAMES}


def canonical_aspect(name: str) -> str:
    key = str(name or "").strip().lower()
    return ASPECT_ALIASES.get(key, key)


def canonical_planet(name: str) -> str | None:
    return _PLANET_LOOKUP.get(str(name or "").strip().lower())


def canonical_sign(name: str) -> str | None:
    return _SIGN_LOOKUP.get(str(name or "").strip().lower())


def canonical_phase(name: str) -> str | None:
    key = " ".join(str(name or "").strip().lower().split())
    if key in PHASE_ALIASES:
        return PHASE_ALIASES[key]
    return _PHASE_LOOKUP.get(key)
