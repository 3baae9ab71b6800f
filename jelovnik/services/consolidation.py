"""
Item consolidation for the public menu.
Rows of one category tab are split into standard and combo ("... MENU") partitions,
grouped by type label, and size variants of one product ("Ćevapi - VELIKA",
"Ćevapi - MALA") are collapsed into a single card with an ordered list of sizes.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from jelovnik.i18n import DESCRIPTION_FIELDS, NAME_FIELDS, SOURCE_LANGUAGE, get_product_translation
from jelovnik.schemas.menu import MenuItemSchema

MENU_MARKER = " MENU"
CATEGORY_MARKERS = ("KEBAB",)
SIZE_SUFFIX_RE = re.compile(r" - (?:VELIKA|MALA|VELIKI|MALI)$")


class SizeClass(str, Enum):
    LARGE = "Large"
    SMALL = "Small"
    REGULAR = "Regular"


@dataclass
class SizeOption:
    size: SizeClass
    price: Decimal
    external_id: str


@dataclass
class ConsolidatedItem:
    """Display card: the first row seen for a base name plus one size entry per row."""

    base_item: MenuItemSchema
    name: str
    sizes: list[SizeOption] = field(default_factory=list)

    @property
    def show_size_labels(self) -> bool:
        return len(self.sizes) > 1


@dataclass
class GroupedMenu:
    standard: dict[str, list[ConsolidatedItem]] = field(default_factory=dict)
    combo: dict[str, list[ConsolidatedItem]] = field(default_factory=dict)

    def row_count(self) -> int:
        return sum(
            len(item.sizes)
            for groups in (self.standard, self.combo)
            for items in groups.values()
            for item in items
        )


def is_combo(collection: str) -> bool:
    return MENU_MARKER in collection


def type_label(collection: str) -> str:
    label = collection.replace(MENU_MARKER, "")
    for marker in CATEGORY_MARKERS:
        label = label.replace(marker, "")
    return label.strip()


def strip_size_suffix(name: str) -> str:
    return SIZE_SUFFIX_RE.sub("", name).strip()


def classify_size(name: str) -> SizeClass:
    # Checked against the full display name: the suffix is what carries the size.
    if "VELIKA" in name or "VELIKI" in name:
        return SizeClass.LARGE
    if "MALA" in name or "MALI" in name:
        return SizeClass.SMALL
    return SizeClass.REGULAR


def display_name(item: MenuItemSchema, lang: str = SOURCE_LANGUAGE) -> str:
    return get_product_translation(item, NAME_FIELDS, lang) or ""


def display_description(item: MenuItemSchema, lang: str = SOURCE_LANGUAGE) -> Optional[str]:
    return get_product_translation(item, DESCRIPTION_FIELDS, lang)


def consolidate_items(items: Iterable[MenuItemSchema], lang: str = SOURCE_LANGUAGE) -> list[ConsolidatedItem]:
    by_base: dict[str, ConsolidatedItem] = {}
    for item in items:
        name = display_name(item, lang)
        base_name = strip_size_suffix(name)
        option = SizeOption(size=classify_size(name), price=item.price, external_id=item.external_id)
        existing = by_base.get(base_name)
        if existing is None:
            by_base[base_name] = ConsolidatedItem(base_item=item, name=base_name, sizes=[option])
        else:
            existing.sizes.append(option)
    for consolidated in by_base.values():
        # list.sort is stable: only Large moves forward
        consolidated.sizes.sort(key=lambda s: 0 if s.size is SizeClass.LARGE else 1)
    return list(by_base.values())


def group_by_type(items: Iterable[MenuItemSchema]) -> tuple[dict[str, list[MenuItemSchema]], dict[str, list[MenuItemSchema]]]:
    standard: dict[str, list[MenuItemSchema]] = {}
    combo: dict[str, list[MenuItemSchema]] = {}
    for item in items:
        target = combo if is_combo(item.collection) else standard
        target.setdefault(type_label(item.collection), []).append(item)
    return standard, combo


def consolidate_tab(items: Iterable[MenuItemSchema], lang: str = SOURCE_LANGUAGE) -> GroupedMenu:
    standard, combo = group_by_type(items)
    return GroupedMenu(
        standard={label: consolidate_items(rows, lang) for label, rows in standard.items()},
        combo={label: consolidate_items(rows, lang) for label, rows in combo.items()},
    )
