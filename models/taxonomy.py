"""Canonical garment taxonomy and slot mapping.

Every main category a catalog item can carry maps to exactly one assembly
slot. The tables here are the single source for that mapping; pool building,
assembly, enforcement and validation all resolve slots through
:func:`map_category` rather than comparing category strings directly.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

SLOTS: Tuple[str, ...] = (
    "tops",
    "bottoms",
    "shoes",
    "outerwear",
    "accessories",
    "dresses",
    "activewear",
    "swimwear",
    "undergarments",
    "other",
)

MAIN_CATEGORIES: Tuple[str, ...] = (
    "Tops",
    "Bottoms",
    "Outerwear",
    "Shoes",
    "Accessories",
    "Undergarments",
    "Activewear",
    "Formalwear",
    "Loungewear",
    "Sleepwear",
    "Swimwear",
    "Maternity",
    "Unisex",
    "Costumes",
    "TraditionalWear",
    "Dresses",
    "Skirts",
    "Bags",
    "Headwear",
    "Jewelry",
    "Other",
)

DEFAULT_SLOT = "other"

MAIN_CATEGORY_TO_SLOT: Mapping[str, str] = MappingProxyType(
    {
        "Tops": "tops",
        "Bottoms": "bottoms",
        "Shoes": "shoes",
        "Outerwear": "outerwear",
        "Accessories": "accessories",
        "Dresses": "dresses",
        "Activewear": "activewear",
        "Swimwear": "swimwear",
        "Undergarments": "undergarments",
        # Folded into core slots
        "Skirts": "bottoms",
        "Bags": "accessories",
        "Headwear": "accessories",
        "Jewelry": "accessories",
        "Formalwear": "dresses",
        "TraditionalWear": "dresses",
        # Never auto-assembled
        "Loungewear": "other",
        "Sleepwear": "other",
        "Maternity": "other",
        "Unisex": "other",
        "Costumes": "other",
        "Other": "other",
    }
)


def _invert(mapping: Mapping[str, str]) -> Mapping[str, Tuple[str, ...]]:
    grouped: Dict[str, List[str]] = {slot: [] for slot in SLOTS}
    for category in MAIN_CATEGORIES:
        grouped[mapping[category]].append(category)
    return MappingProxyType({slot: tuple(categories) for slot, categories in grouped.items()})


SLOT_TO_MAIN_CATEGORIES: Mapping[str, Tuple[str, ...]] = _invert(MAIN_CATEGORY_TO_SLOT)

REFINEMENT_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "tops": (
            "shirt",
            "top",
            "tee",
            "t-shirt",
            "blouse",
            "sweater",
            "hoodie",
            "cardigan",
            "polo",
            "tank",
            "camisole",
            "tunic",
            "henley",
        ),
        "bottoms": (
            "pants",
            "jeans",
            "shorts",
            "trousers",
            "bottom",
            "chinos",
            "skirt",
            "joggers",
            "leggings",
            "culottes",
            "slacks",
        ),
        "dresses": ("dress", "gown", "romper", "jumpsuit", "midi", "maxi", "mini dress", "cocktail", "evening"),
        "shoes": (
            "shoes",
            "sneakers",
            "boots",
            "loafers",
            "sandals",
            "heels",
            "footwear",
            "oxfords",
            "flats",
            "mules",
            "pumps",
            "trainers",
        ),
        "outerwear": (
            "jacket",
            "coat",
            "blazer",
            "outerwear",
            "windbreaker",
            "puffer",
            "cardigan",
            "vest",
            "parka",
            "trench",
        ),
        "accessories": (
            "belt",
            "accessory",
            "accessories",
            "watch",
            "hat",
            "scarf",
            "bag",
            "jewelry",
            "necklace",
            "bracelet",
            "earrings",
            "sunglasses",
            "tie",
        ),
        "activewear": (
            "activewear",
            "athletic",
            "gym",
            "workout",
            "sports bra",
            "running",
            "training",
            "performance",
            "yoga",
            "leggings",
            "track",
        ),
        "swimwear": (
            "swimwear",
            "bikini",
            "swimsuit",
            "swim trunks",
            "bathing suit",
            "rash guard",
            "cover-up",
            "one-piece",
            "beach",
        ),
        "undergarments": (
            "underwear",
            "bra",
            "briefs",
            "boxers",
            "undershirt",
            "camisole",
            "shapewear",
            "socks",
            "panties",
            "lingerie",
            "thong",
        ),
        "other": ("loungewear", "pajamas", "robe", "sleepwear", "costume", "maternity", "kimono", "saree"),
    }
)


def map_category(category: Optional[Any]) -> str:
    """Resolve a main category to its slot.

    The lookup is total: blank, ``None`` and non-string values resolve to
    ``"other"`` quietly, while unknown strings resolve to ``"other"`` with a
    warning. Case variants are retried in title case (``"TOPS"`` -> ``Tops``).
    """

    if not category or not isinstance(category, str):
        return DEFAULT_SLOT
    trimmed = category.strip()
    if not trimmed:
        return DEFAULT_SLOT

    slot = MAIN_CATEGORY_TO_SLOT.get(trimmed)
    if slot:
        return slot

    slot = MAIN_CATEGORY_TO_SLOT.get(trimmed[0].upper() + trimmed[1:].lower())
    if slot:
        return slot

    # Mixed-case compound names such as "traditionalwear"
    for name, candidate in MAIN_CATEGORY_TO_SLOT.items():
        if name.lower() == trimmed.lower():
            return candidate

    logger.warning("Unknown category '%s', defaulting to '%s'", category, DEFAULT_SLOT)
    return DEFAULT_SLOT


def slot_filter(slot: str) -> Dict[str, Any]:
    """Return the attribute-filter descriptor for ``slot``.

    Single-category slots use ``eq``; multi-category slots use ``in`` with the
    full category list. The same descriptor is evaluated in memory by
    :func:`matches_filter` and can be translated for an external store.
    """

    categories = SLOT_TO_MAIN_CATEGORIES.get(slot) or SLOT_TO_MAIN_CATEGORIES[DEFAULT_SLOT]
    if len(categories) == 1:
        return {"field": "main_category", "op": "eq", "value": categories[0]}
    return {"field": "main_category", "op": "in", "value": list(categories)}


def matches_filter(item: Any, descriptor: Mapping[str, Any]) -> bool:
    """Evaluate a slot filter descriptor against an item or mapping."""

    field_name = descriptor["field"]
    if isinstance(item, Mapping):
        value = item.get(field_name)
    else:
        value = getattr(item, field_name, None)
    if descriptor["op"] == "eq":
        return value == descriptor["value"]
    if descriptor["op"] == "in":
        return value in descriptor["value"]
    raise ValueError(f"Unsupported filter op '{descriptor['op']}'")


def detect_slots_in_text(text: Optional[str]) -> List[str]:
    """Return the slots whose keywords appear in free text, in slot order."""

    lowered = (text or "").lower()
    detected: List[str] = []
    for slot, keywords in REFINEMENT_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            detected.append(slot)
    return detected


def _category_of(item: Any) -> Optional[str]:
    if isinstance(item, Mapping):
        return item.get("main_category")
    return getattr(item, "main_category", None)


def get_slot(item: Any) -> str:
    return map_category(_category_of(item))


def is_slot(item: Any, slot: str) -> bool:
    return get_slot(item) == slot


def filter_by_slot(items: Iterable[Any], slot: str) -> List[Any]:
    return [item for item in items if is_slot(item, slot)]


def group_by_slot(items: Iterable[Any]) -> Dict[str, List[Any]]:
    """Bucket items by slot; every slot key is present even when empty."""

    grouped: Dict[str, List[Any]] = {slot: [] for slot in SLOTS}
    for item in items:
        grouped[get_slot(item)].append(item)
    return grouped


def is_outfit_eligible_slot(slot: str) -> bool:
    return slot != DEFAULT_SLOT


def is_outfit_eligible_category(category: Optional[str]) -> bool:
    return is_outfit_eligible_slot(map_category(category))


def get_main_categories_for_slot(slot: str) -> Tuple[str, ...]:
    return SLOT_TO_MAIN_CATEGORIES.get(slot, ())


def is_valid_main_category(category: str) -> bool:
    return category in MAIN_CATEGORY_TO_SLOT


def all_slots() -> List[str]:
    return list(SLOTS)


def all_main_categories() -> List[str]:
    return list(MAIN_CATEGORIES)


__all__ = [
    "DEFAULT_SLOT",
    "MAIN_CATEGORIES",
    "MAIN_CATEGORY_TO_SLOT",
    "REFINEMENT_KEYWORDS",
    "SLOTS",
    "SLOT_TO_MAIN_CATEGORIES",
    "all_main_categories",
    "all_slots",
    "detect_slots_in_text",
    "filter_by_slot",
    "get_main_categories_for_slot",
    "get_slot",
    "group_by_slot",
    "is_outfit_eligible_category",
    "is_outfit_eligible_slot",
    "is_slot",
    "is_valid_main_category",
    "map_category",
    "matches_filter",
    "slot_filter",
]
