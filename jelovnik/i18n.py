"""
Languages served by the menu: Croatian is the source, en/de/tr are translations.
Product text lives in per-language columns; this module only holds the lookup rules
and the handful of labels the API itself emits (tabs, sizes, weekdays).
"""
from __future__ import annotations

from typing import Optional

from jelovnik.schemas.menu import MenuField, MenuItemSchema, get_field

SOURCE_LANGUAGE = "hr"
AVAILABLE_LANGUAGES = {
    "hr": "Hrvatski",
    "en": "English",
    "de": "Deutsch",
    "tr": "Türkçe",
}
TARGET_LANGUAGES = tuple(code for code in AVAILABLE_LANGUAGES if code != SOURCE_LANGUAGE)

NAME_FIELDS: dict[str, MenuField] = {
    "hr": MenuField.PRODUCT_NAME,
    "en": MenuField.PRODUCT_NAME_EN,
    "de": MenuField.PRODUCT_NAME_DE,
    "tr": MenuField.PRODUCT_NAME_TR,
}
DESCRIPTION_FIELDS: dict[str, MenuField] = {
    "hr": MenuField.DESCRIPTION_HR,
    "en": MenuField.DESCRIPTION_EN,
    "de": MenuField.DESCRIPTION_DE,
    "tr": MenuField.DESCRIPTION_TR,
}

LABELS: dict[str, dict[str, str]] = {
    "hr": {
        "STEAK": "STEAK", "CLASSIC": "CLASSIC", "CHICKEN": "CHICKEN", "MIX": "MIX",
        "NUGGETS": "NUGGETS", "VEGE": "VEGE", "PRILOZI": "PRILOZI", "DESERT": "DESERT",
        "NAPITCI": "NAPITCI",
        "Large": "Veliki", "Small": "Mali", "Regular": "Regular",
        "ponedjeljak": "Ponedjeljak", "utorak": "Utorak", "srijeda": "Srijeda",
        "cetvrtak": "Četvrtak", "petak": "Petak", "subota": "Subota", "nedjelja": "Nedjelja",
    },
    "en": {
        "STEAK": "STEAK", "CLASSIC": "CLASSIC", "CHICKEN": "CHICKEN", "MIX": "MIX",
        "NUGGETS": "NUGGETS", "VEGE": "VEGETARIAN", "PRILOZI": "SIDES", "DESERT": "DESSERT",
        "NAPITCI": "DRINKS",
        "Large": "Large", "Small": "Small", "Regular": "Regular",
        "ponedjeljak": "Monday", "utorak": "Tuesday", "srijeda": "Wednesday",
        "cetvrtak": "Thursday", "petak": "Friday", "subota": "Saturday", "nedjelja": "Sunday",
    },
    "de": {
        "STEAK": "STEAK", "CLASSIC": "KLASSISCH", "CHICKEN": "HÄHNCHEN", "MIX": "MIX",
        "NUGGETS": "NUGGETS", "VEGE": "VEGETARISCH", "PRILOZI": "BEILAGEN", "DESERT": "NACHTISCH",
        "NAPITCI": "GETRÄNKE",
        "Large": "Groß", "Small": "Klein", "Regular": "Regular",
        "ponedjeljak": "Montag", "utorak": "Dienstag", "srijeda": "Mittwoch",
        "cetvrtak": "Donnerstag", "petak": "Freitag", "subota": "Samstag", "nedjelja": "Sonntag",
    },
    "tr": {
        "STEAK": "ŞİŞ", "CLASSIC": "KLASİK", "CHICKEN": "TAVUK", "MIX": "KARIŞIK",
        "NUGGETS": "NUGGET", "VEGE": "VEGETARYEN", "PRILOZI": "YAN ÜRÜNLER", "DESERT": "TATLI",
        "NAPITCI": "İÇECEKLER",
        "Large": "Büyük", "Small": "Küçük", "Regular": "Regular",
        "ponedjeljak": "Pazartesi", "utorak": "Salı", "srijeda": "Çarşamba",
        "cetvrtak": "Perşembe", "petak": "Cuma", "subota": "Cumartesi", "nedjelja": "Pazar",
    },
}


def normalize_language(lang: Optional[str]) -> str:
    if lang and lang.lower() in AVAILABLE_LANGUAGES:
        return lang.lower()
    return SOURCE_LANGUAGE


def t(key: str, lang: str) -> str:
    """Label lookup; unknown keys come back unchanged."""
    return LABELS.get(lang, LABELS[SOURCE_LANGUAGE]).get(key, key)


def get_product_translation(item: MenuItemSchema, fields: dict[str, MenuField], lang: str) -> Optional[str]:
    """Value of the per-language column if filled, else the Croatian column."""
    value = get_field(item, fields.get(lang, fields[SOURCE_LANGUAGE]))
    if value:
        return value
    return get_field(item, fields[SOURCE_LANGUAGE])
