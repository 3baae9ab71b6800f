"""
Unit tests: grouping a tab into standard/combo sections and merging size variants.
"""
from decimal import Decimal

from jelovnik.services.consolidation import (
    SizeClass,
    classify_size,
    consolidate_items,
    consolidate_tab,
    is_combo,
    strip_size_suffix,
    type_label,
)


def test_type_label_strips_markers():
    assert type_label("CLASSIC KEBAB") == "CLASSIC"
    assert type_label("CLASSIC KEBAB MENU") == "CLASSIC"
    assert type_label("NUGGETS MENU") == "NUGGETS"
    assert type_label("PRILOZI") == "PRILOZI"


def test_is_combo():
    assert is_combo("CHICKEN KEBAB MENU")
    assert not is_combo("CHICKEN KEBAB")


def test_size_suffix_and_classification():
    assert strip_size_suffix("Ćevapi - VELIKA") == "Ćevapi"
    assert strip_size_suffix("Ćevapi - MALI") == "Ćevapi"
    assert strip_size_suffix("Ćevapi") == "Ćevapi"
    assert classify_size("Ćevapi - VELIKA") is SizeClass.LARGE
    assert classify_size("Ćevapi - MALA") is SizeClass.SMALL
    assert classify_size("Ćevapi") is SizeClass.REGULAR


def test_size_variants_merge_large_first(make_item):
    items = [
        make_item("s", product_name="Ćevapi - MALA", price=Decimal("5.00"), collection_order=1),
        make_item("l", product_name="Ćevapi - VELIKA", price=Decimal("7.00"), collection_order=2),
    ]
    (card,) = consolidate_items(items)
    assert card.name == "Ćevapi"
    assert card.base_item.external_id == "s"
    assert [s.size for s in card.sizes] == [SizeClass.LARGE, SizeClass.SMALL]
    assert [s.price for s in card.sizes] == [Decimal("7.00"), Decimal("5.00")]
    assert card.show_size_labels


def test_single_row_hides_size_label(make_item):
    (card,) = consolidate_items([make_item("x", product_name="Pomfrit")])
    assert card.sizes[0].size is SizeClass.REGULAR
    assert not card.show_size_labels


def test_non_large_sizes_keep_input_order(make_item):
    items = [
        make_item("r", product_name="Ayran"),
        make_item("s", product_name="Ayran - MALI"),
        make_item("l", product_name="Ayran - VELIKI"),
    ]
    (card,) = consolidate_items(items)
    assert [s.external_id for s in card.sizes] == ["l", "r", "s"]


def test_translated_name_used_for_grouping(make_item):
    items = [
        make_item("l", product_name="Ćevapi - VELIKA", product_name_de="Ćevapi - VELIKA"),
        make_item("s", product_name="Ćevapi - MALA"),
    ]
    cards = consolidate_items(items, "de")
    assert [c.name for c in cards] == ["Ćevapi"]


def test_consolidate_tab_partitions_and_conserves_rows(make_item):
    items = [
        make_item("a", collection="CLASSIC KEBAB", product_name="Classic - VELIKA"),
        make_item("b", collection="CLASSIC KEBAB", product_name="Classic - MALA"),
        make_item("c", collection="CLASSIC KEBAB MENU", product_name="Classic menu"),
    ]
    grouped = consolidate_tab(items)
    assert list(grouped.standard) == ["CLASSIC"]
    assert list(grouped.combo) == ["CLASSIC"]
    assert len(grouped.standard["CLASSIC"]) == 1
    assert grouped.combo["CLASSIC"][0].name == "Classic menu"
    assert grouped.row_count() == len(items)


def test_empty_tab(make_item):
    grouped = consolidate_tab([])
    assert grouped.standard == {}
    assert grouped.combo == {}
    assert grouped.row_count() == 0
