"""Garment families and agent pairing rules."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from models.catalog_item import CatalogItem
from models.profiles import AgentProfile


class GarmentFamily(str, Enum):
    SNEAKERS = "sneakers"
    LOAFERS = "loafers"
    DERBIES = "derbies"
    DRESS_SHOES = "dress shoes"
    SPORT_COAT = "sport_coat"
    SHELL = "shell"


# Checked in order; the first keyword found in the subcategory wins.
FAMILY_KEYWORDS: Tuple[Tuple[str, GarmentFamily], ...] = (
    ("sneaker", GarmentFamily.SNEAKERS),
    ("trainer", GarmentFamily.SNEAKERS),
    ("loafer", GarmentFamily.LOAFERS),
    ("derby", GarmentFamily.DERBIES),
    ("derbies", GarmentFamily.DERBIES),
    ("dress shoe", GarmentFamily.DRESS_SHOES),
    ("oxford", GarmentFamily.DRESS_SHOES),
    ("monk", GarmentFamily.DRESS_SHOES),
    ("sport coat", GarmentFamily.SPORT_COAT),
    ("sportcoat", GarmentFamily.SPORT_COAT),
    ("blazer", GarmentFamily.SPORT_COAT),
    ("windbreaker", GarmentFamily.SHELL),
    ("shell", GarmentFamily.SHELL),
)


def family_of(subcategory: Optional[str]) -> str:
    """Canonical family tag for a subcategory; unknowns fall back to the lowered text."""

    lowered = (subcategory or "").strip().lower()
    for keyword, family in FAMILY_KEYWORDS:
        if keyword in lowered:
            return family.value
    return lowered


def families_of(items: Iterable[CatalogItem]) -> List[str]:
    return [family_of(item.subcategory) for item in items]


def violates_pairs(items: Iterable[CatalogItem], agent: Optional[AgentProfile]) -> bool:
    """True when the items break an ``avoid_pair`` or ``must_pair`` rule."""

    if agent is None:
        return False
    present = set(families_of(items))
    for left, forbidden in agent.avoid_pair.items():
        if left in present and any(family in present for family in forbidden):
            return True
    for left, required in agent.must_pair.items():
        if left in present and not any(family in present for family in required):
            return True
    return False


__all__ = ["FAMILY_KEYWORDS", "GarmentFamily", "families_of", "family_of", "violates_pairs"]
