"""Slot finalization and context guardrail tests."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.enforcement import (
    FALLBACK_WHY,
    MAX_ITEMS,
    MISSING_BOTTOM,
    MISSING_BROWN_LOAFERS,
    MISSING_FOOTWEAR,
    MISSING_LOAFERS,
    MISSING_TOP,
    apply_context_guards,
    detect_intents,
    finalize_outfit_slots,
    is_footwear,
    padding_pool,
    validate_outfits,
)
from logic.structure import is_structurally_valid
from models.catalog_item import CatalogItem
from models.outfit import Outfit


def _item(item_id: str, category: str, sub: Optional[str] = None, color: Optional[str] = None, **extra) -> CatalogItem:
    return CatalogItem(item_id=item_id, main_category=category, subcategory=sub, color=color, **extra)


def _catalog() -> List[CatalogItem]:
    return [
        _item("shirt", "Tops", "Dress Shirt", "White"),
        _item("polo", "Tops", "Polo", "Navy"),
        _item("trousers", "Bottoms", "Trousers", "Charcoal"),
        _item("shorts", "Bottoms", "Shorts", "Khaki"),
        _item("sneakers", "Shoes", "Sneakers", "White"),
        _item("black_loafers", "Shoes", "Loafers", "Black"),
        _item("brown_loafers", "Shoes", "Loafers", "Brown"),
        _item("oxfords", "Shoes", "Oxfords", "Black"),
        _item("parka", "Outerwear", "Parka", "Olive"),
        _item("blazer", "Outerwear", "Blazer", "Navy"),
        _item("linen", "Outerwear", "Jacket", "Beige", name="Linen Jacket"),
        _item("hoodie", "Tops", "Hoodie", "Grey"),
    ]


def _by_id(catalog: List[CatalogItem]):
    return {item.item_id: item for item in catalog}


def _ids(outfit: Outfit) -> List[str]:
    return [item.item_id for item in outfit.items]


def test_singleton_slots_are_pruned_with_preferences() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    outfit = Outfit(
        "Busy",
        (items["polo"], items["shirt"], items["trousers"], items["shorts"], items["parka"], items["blazer"],
         items["sneakers"], items["oxfords"], items["polo"]),
    )
    repaired = finalize_outfit_slots(outfit, catalog, "dinner")
    assert sorted(_ids(repaired)) == sorted(["shirt", "trousers", "blazer", "sneakers"])
    assert repaired.missing is None
    assert outfit.items[0] is items["polo"]


def test_missing_core_pieces_are_backfilled() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    repaired = finalize_outfit_slots(Outfit("Bare", (items["sneakers"],)), catalog, "")
    assert sorted(_ids(repaired)) == ["shirt", "sneakers", "trousers"]


def test_missing_notes_when_catalog_cannot_fill() -> None:
    lonely = [_item("sneakers", "Shoes", "Sneakers")]
    repaired = finalize_outfit_slots(Outfit("Shoe", tuple(lonely)), lonely, "")
    assert repaired.missing == MISSING_TOP
    no_bottom = [_item("tee", "Tops", "T-Shirt"), _item("shorts", "Bottoms", "Shorts")]
    repaired = finalize_outfit_slots(Outfit("Top", (no_bottom[0],)), no_bottom, "")
    assert repaired.missing == MISSING_BOTTOM


def test_wanted_brown_loafers_replace_current_shoe() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    outfit = Outfit("Look", (items["shirt"], items["trousers"], items["sneakers"]))
    repaired = finalize_outfit_slots(outfit, catalog, "brown loafers please")
    assert "brown_loafers" in _ids(repaired)
    assert "sneakers" not in _ids(repaired)
    assert repaired.missing is None

    black = Outfit("Black", (items["shirt"], items["trousers"], items["black_loafers"]))
    upgraded = finalize_outfit_slots(black, catalog, "brown loafers please")
    assert "brown_loafers" in _ids(upgraded)


def test_loafer_request_without_loafers_notes_the_gap() -> None:
    catalog = [item for item in _catalog() if "loafers" not in item.item_id]
    items = _by_id(catalog)
    outfit = Outfit("Look", (items["shirt"], items["trousers"], items["sneakers"]))
    assert finalize_outfit_slots(outfit, catalog, "loafers").missing == MISSING_LOAFERS
    assert finalize_outfit_slots(outfit, catalog, "brown loafers").missing == MISSING_BROWN_LOAFERS


def test_excluded_shoe_is_swapped_for_allowed_alternative() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    outfit = Outfit("Look", (items["shirt"], items["trousers"], items["sneakers"]))
    repaired = finalize_outfit_slots(outfit, catalog, "no sneakers today")
    assert "sneakers" not in _ids(repaired)
    assert sum(1 for item in repaired.items if is_footwear(item)) == 1


def test_footwear_opt_out_is_noted() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    outfit = Outfit("Barefoot", (items["shirt"], items["trousers"]))
    repaired = finalize_outfit_slots(outfit, catalog, "no sneakers, no boots, no loafers")
    assert repaired.missing == MISSING_FOOTWEAR
    assert not any(is_footwear(item) for item in repaired.items)

    noted = Outfit("Model", (items["shirt"], items["trousers"]), missing="No suitable footwear in catalog")
    assert finalize_outfit_slots(noted, catalog, "").missing == "No suitable footwear in catalog"


def test_is_footwear_ignores_bootcut_bottoms() -> None:
    assert is_footwear(_item("s", "Shoes", "Sandals"))
    assert is_footwear(_item("o", None, "Ankle Boot"))
    assert not is_footwear(_item("b", "Bottoms", "Bootcut Jeans"))


def test_detect_intents() -> None:
    intents = detect_intents("Beach wedding reception")
    assert intents.beach and intents.wedding and intents.formal
    assert not intents.gym
    assert detect_intents("black tie gala").black_tie
    assert detect_intents(None).fallback_title() == "Smart Fallback"


def test_gym_guard_swaps_in_sneakers() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    guarded = apply_context_guards(
        [items["oxfords"], items["polo"], items["shorts"]], catalog, detect_intents("gym")
    )
    assert [item.item_id for item in guarded] == ["polo", "shorts", "sneakers"]


def test_formal_guard_removes_casual_pieces_and_adds_dress_shoes() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    guarded = apply_context_guards(
        [items["hoodie"], items["shorts"], items["sneakers"], items["shirt"]], catalog, detect_intents("wedding")
    )
    assert [item.item_id for item in guarded] == ["shirt", "black_loafers"]


def test_formal_guard_only_counts_shoes_as_dress_shoes() -> None:
    tee = _item("tee", "Tops", "T-Shirt", "White")
    oxford_shirt = _item("oxshirt", "Tops", "Oxford Shirt", "Blue")
    chinos = _item("chinos", "Bottoms", "Chinos", "Stone")
    sneakers = _item("sneakers", "Shoes", "Sneakers", "White")
    derby = _item("derby", "Shoes", "Derby", "Black")
    catalog = [tee, oxford_shirt, chinos, sneakers, derby]
    wedding = detect_intents("wedding")

    picked = apply_context_guards([tee, chinos, sneakers], catalog, wedding)
    assert [item.item_id for item in picked] == ["tee", "chinos", "derby"]
    assert is_structurally_valid(picked)

    worn = apply_context_guards([oxford_shirt, chinos, sneakers], catalog, wedding)
    assert [item.item_id for item in worn] == ["oxshirt", "chinos", "derby"]


def test_gym_guard_only_counts_shoes_as_sneakers() -> None:
    tee = _item("tee", "Tops", "T-Shirt", "Grey")
    running_shorts = _item("rshorts", "Bottoms", "Running Shorts", "Black")
    chinos = _item("chinos", "Bottoms", "Chinos", "Stone")
    loafers = _item("loafers", "Shoes", "Loafers", "Brown")
    sneakers = _item("sneakers", "Shoes", "Sneakers", "White")
    catalog = [tee, running_shorts, chinos, loafers, sneakers]
    gym = detect_intents("gym")

    swapped = apply_context_guards([tee, chinos, loafers], catalog, gym)
    assert [item.item_id for item in swapped] == ["tee", "chinos", "sneakers"]
    assert is_structurally_valid(swapped)

    shorts_look = apply_context_guards([tee, running_shorts, loafers], catalog, gym)
    assert [item.item_id for item in shorts_look] == ["tee", "rshorts", "sneakers"]


def test_padding_pool_keeps_only_the_forced_shoe_type() -> None:
    catalog = _catalog()
    gym = {item.item_id for item in padding_pool(catalog, "gym") if item.slot == "shoes"}
    assert gym == {"sneakers"}
    formal = {item.item_id for item in padding_pool(catalog, "wedding") if item.slot == "shoes"}
    assert formal == {"black_loafers", "brown_loafers", "oxfords"}
    everyday = {item.item_id for item in padding_pool(catalog, "errands") if item.slot == "shoes"}
    assert "sneakers" in everyday and "oxfords" in everyday


def test_beach_guard_drops_heavy_outerwear_only() -> None:
    catalog = _catalog()
    items = _by_id(catalog)
    heavy = apply_context_guards([items["polo"], items["parka"]], catalog, detect_intents("beach day"))
    assert [item.item_id for item in heavy] == ["polo"]
    light = apply_context_guards([items["polo"], items["linen"]], catalog, detect_intents("beach day"))
    assert [item.item_id for item in light] == ["polo", "linen"]


def test_guards_cap_item_count() -> None:
    catalog = [_item(f"acc{n}", "Accessories", "Belt") for n in range(8)]
    assert len(apply_context_guards(catalog, catalog, detect_intents(""))) == MAX_ITEMS


def test_validate_outfits_falls_back_when_nothing_survives() -> None:
    catalog = _catalog()
    result = validate_outfits("beach day", catalog, [Outfit("Empty", ())])
    assert len(result) == 1
    fallback = result[0]
    assert fallback.title == "Beach Fallback"
    assert fallback.why == FALLBACK_WHY
    assert _ids(fallback) == ["shirt", "shorts", "sneakers"]

    assert validate_outfits("wedding", catalog, [])[0].title == "Wedding Fallback"
    assert validate_outfits("", [], []) == []


def test_padding_pool_respects_context_and_exclusions() -> None:
    catalog = _catalog()
    formal = {item.item_id for item in padding_pool(catalog, "wedding, no loafers")}
    assert {"shorts", "hoodie", "sneakers", "black_loafers", "brown_loafers"}.isdisjoint(formal)
    assert {"shirt", "trousers", "oxfords"} <= formal
