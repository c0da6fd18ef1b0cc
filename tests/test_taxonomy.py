"""Taxonomy and catalog item model tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.catalog_item import CatalogItem, from_raw_metadata
from models.outfit import Outfit, signature_of
from models.taxonomy import (
    MAIN_CATEGORIES,
    SLOTS,
    SLOT_TO_MAIN_CATEGORIES,
    detect_slots_in_text,
    filter_by_slot,
    group_by_slot,
    is_outfit_eligible_category,
    map_category,
    matches_filter,
    slot_filter,
)


def test_every_main_category_maps_to_a_known_slot() -> None:
    for category in MAIN_CATEGORIES:
        assert map_category(category) in SLOTS


def test_slot_inverse_covers_each_category_once() -> None:
    flattened = [category for categories in SLOT_TO_MAIN_CATEGORIES.values() for category in categories]
    assert sorted(flattened) == sorted(MAIN_CATEGORIES)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Tops", "tops"),
        ("  Shoes ", "shoes"),
        ("TOPS", "tops"),
        ("skirts", "bottoms"),
        ("traditionalwear", "dresses"),
        ("Jewelry", "accessories"),
        ("Sleepwear", "other"),
        ("Spacesuits", "other"),
        ("", "other"),
        (None, "other"),
        (42, "other"),
    ],
)
def test_map_category_is_total(raw, expected) -> None:
    assert map_category(raw) == expected


def test_unknown_category_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        assert map_category("Spacesuits") == "other"
    assert "Spacesuits" in caplog.text


def test_slot_filter_descriptors() -> None:
    assert slot_filter("tops") == {"field": "main_category", "op": "eq", "value": "Tops"}
    bottoms = slot_filter("bottoms")
    assert bottoms["op"] == "in"
    assert set(bottoms["value"]) == {"Bottoms", "Skirts"}

    skirt = CatalogItem(item_id="s1", main_category="Skirts")
    trousers = {"main_category": "Bottoms"}
    tee = CatalogItem(item_id="t1", main_category="Tops")
    assert matches_filter(skirt, bottoms)
    assert matches_filter(trousers, bottoms)
    assert not matches_filter(tee, bottoms)


def test_group_by_slot_has_every_key_and_keeps_order() -> None:
    items = [
        CatalogItem(item_id="a", main_category="Tops"),
        CatalogItem(item_id="b", main_category="Bags"),
        CatalogItem(item_id="c", main_category="Tops"),
        CatalogItem(item_id="d", main_category=None),
    ]
    grouped = group_by_slot(items)
    assert set(grouped) == set(SLOTS)
    assert [item.item_id for item in grouped["tops"]] == ["a", "c"]
    assert [item.item_id for item in grouped["accessories"]] == ["b"]
    assert [item.item_id for item in grouped["other"]] == ["d"]
    assert grouped["swimwear"] == []
    assert filter_by_slot(items, "tops") == [items[0], items[2]]


def test_outfit_eligibility_excludes_other_slot() -> None:
    assert is_outfit_eligible_category("Outerwear")
    assert not is_outfit_eligible_category("Loungewear")


def test_detect_slots_in_text_uses_slot_order() -> None:
    assert detect_slots_in_text("swap the sneakers and try a different shirt") == ["tops", "shoes"]
    assert detect_slots_in_text(None) == []


def test_from_raw_metadata_accepts_loose_keys() -> None:
    item = from_raw_metadata(
        {"id": 7, "category": " Shoes ", "sub_category": "Loafers", "label": "Suede Loafers", "formality_score": "6"}
    )
    assert item.item_id == "7"
    assert item.main_category == "Shoes"
    assert item.slot == "shoes"
    assert item.label == "Suede Loafers"
    assert item.formality_score == 6.0


def test_from_raw_metadata_requires_id() -> None:
    with pytest.raises(ValueError):
        from_raw_metadata({"main_category": "Tops"})


def test_item_label_fallbacks() -> None:
    assert CatalogItem(item_id="1", color="Navy", subcategory="Polo").label == "Navy Polo"
    assert CatalogItem(item_id="2", main_category="Tops").label == "Tops"
    assert CatalogItem(item_id="3").label == "Item"


def test_outfit_is_immutable_value() -> None:
    tee = CatalogItem(item_id="b", main_category="Tops")
    jeans = CatalogItem(item_id="a", main_category="Bottoms")
    outfit = Outfit(title="Look", items=[tee, jeans])
    assert isinstance(outfit.items, tuple)
    assert outfit.signature() == signature_of([jeans, tee]) == ("a", "b")

    noted = outfit.with_missing("Footwear").with_missing("Loafers")
    assert noted.missing == "Footwear"
    assert outfit.missing is None
    assert "missing" not in outfit.to_dict()
    assert noted.to_dict()["missing"] == "Footwear"


@pytest.mark.parametrize("slot", SLOTS)
def test_every_slot_filter_intersects_its_categories(slot) -> None:
    descriptor = slot_filter(slot)
    assert descriptor["value"]
    values = descriptor["value"] if descriptor["op"] == "in" else [descriptor["value"]]
    assert set(values) & set(SLOT_TO_MAIN_CATEGORIES[slot])
