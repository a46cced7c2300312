# ABOUTME: City name normalization into diacritic-free lowercase store keys.
# ABOUTME: Also holds the special-city query table and the Vietnamese display-name table.

import unicodedata

# Reserved store key for the device-location slot; never produced by normalize_city_name.
LOCATION_KEY = "__current_location__"

DEFAULT_CITIES = ("Hà Nội", "Hồ Chí Minh", "Cần Thơ", "Huế")

# Normalized name -> exact query term the upstream API indexes the city under.
# Values are sent verbatim and are not normalized again.
SPECIAL_CITY_MAPPING: dict[str, str] = {
    "nghe an": "vinh",
    "ho chi minh": "Ho Chi Minh City",
    "hai phong": "Hai Phong",
    "thanh hoa": "Thanh Hoa",
    "new york": "New York",
}

# Normalized name -> name shown to the user.
CITY_DISPLAY_NAMES: dict[str, str] = {
    "ha noi": "Hà Nội",
    "ho chi minh": "Hồ Chí Minh",
    "can tho": "Cần Thơ",
    "hue": "Huế",
    "vinh": "Nghệ An",
    "nghe an": "Nghệ An",
    "hai phong": "Hải Phòng",
    "thanh hoa": "Thanh Hóa",
    "new york": "New York",
}

# Letters with a stroke have no canonical decomposition, so NFD leaves them intact.
_STROKE_LETTERS = str.maketrans({"đ": "d", "Đ": "D"})


def normalize_city_name(text: str) -> str:
    """Strip diacritics, lowercase and trim a free-text city name.

    Uses canonical decomposition (NFD) and drops combining marks, so it works for
    any Latin script, not just Vietnamese. Blank input gives an empty string.
    """
    decomposed = unicodedata.normalize("NFD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.translate(_STROKE_LETTERS).lower().strip()


def query_for_key(key: str) -> str:
    """Upstream query term for an already-normalized city key."""
    return SPECIAL_CITY_MAPPING.get(key, key)


def resolve_query(text: str) -> str:
    """Normalize a city name and map it to the term the upstream API expects."""
    return query_for_key(normalize_city_name(text))


def display_name(key: str) -> str:
    """Human-readable name for a store key."""
    if key == LOCATION_KEY:
        return "Current location"
    return CITY_DISPLAY_NAMES.get(key) or key.title()
