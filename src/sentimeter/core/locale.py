"""Language and country code lookups used by provider clients."""

from typing import List

from .countries import COUNTRY_CODES

ABBREVIATIONS = {code: country for country, code in COUNTRY_CODES.items()}

DOUBLE_LANGUAGE_CODES = {
    "English": "en",
    "Spanish": "es",
    "Portuguese": "pt",
    "German": "de",
    "French": "fr",
    "Arabic": "ar",
    "Chinese": "zh",
    "Italian": "it",
    "Russian": "ru",
    "Dutch": "nl",
}

TRIPLE_LANGUAGE_CODES = {
    "English": "Eng",
    "Spanish": "Esp",
    "Portuguese": "Por",
}


def double_language_code(language: str, uppercase: bool = False) -> str:
    """Two-letter code for a language name; English for anything unknown."""
    code = DOUBLE_LANGUAGE_CODES.get(language, DOUBLE_LANGUAGE_CODES["English"])
    return code.upper() if uppercase else code


def triple_language_code(language: str, uppercase: bool = False) -> str:
    """Three-letter code (Bitext flavour) for a language name; English for anything unknown."""
    code = TRIPLE_LANGUAGE_CODES.get(language, TRIPLE_LANGUAGE_CODES["English"])
    return code.upper() if uppercase else code


def country_code(country: str) -> str:
    return COUNTRY_CODES.get((country or "").upper(), "")


def is_known_abbreviation(abbreviation: str) -> bool:
    return (abbreviation or "").upper() in ABBREVIATIONS


def is_known_country(country: str) -> bool:
    return (country or "").upper() in COUNTRY_CODES


def all_countries() -> List[str]:
    return list(COUNTRY_CODES)
