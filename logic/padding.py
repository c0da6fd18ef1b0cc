"""Deterministic top-up of an outfit list to a target count."""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Iterable, List, Optional, Sequence, Set

from models.catalog_item import CatalogItem
from models.outfit import Outfit, Signature, signature_of
from models.taxonomy import group_by_slot

logger = logging.getLogger(__name__)

PADDED_WHY = "Rounded out from the remaining items in your wardrobe."

MakeOutfit = Callable[[Sequence[CatalogItem], int], Outfit]


def default_make_outfit(items: Sequence[CatalogItem], position: int) -> Outfit:
    return Outfit(title=f"Look {position}", items=tuple(items), why=PADDED_WHY)


def _unused_first(items: Sequence[CatalogItem], used_ids: Set[str]) -> List[CatalogItem]:
    # sorted() is stable, so pool order breaks ties.
    return sorted(items, key=lambda item: item.item_id in used_ids)


def _first_fresh(
    slot_lists: Sequence[Sequence[CatalogItem]], seen: Set[Signature]
) -> Optional[List[CatalogItem]]:
    for combo in itertools.product(*slot_lists):
        signature = signature_of(combo)
        if len(set(signature)) != len(signature) or signature in seen:
            continue
        return list(combo)
    return None


def pad_to_n(
    outfits: Iterable[Outfit],
    pool: Sequence[CatalogItem],
    make_outfit: Optional[MakeOutfit] = None,
    target: int = 3,
) -> List[Outfit]:
    """Append separates or dress + shoes combos until ``target`` outfits exist.

    Items no existing outfit uses are tried first. A combo is only added when
    its item set differs from every outfit already in the list. When the pool
    has no fresh combo left the shorter list is returned as is.
    """

    padded = list(outfits)
    if len(padded) >= target:
        return padded

    make_outfit = make_outfit or default_make_outfit
    grouped = group_by_slot(pool)
    seen: Set[Signature] = {outfit.signature() for outfit in padded}
    used_ids: Set[str] = {item.item_id for outfit in padded for item in outfit.items}

    while len(padded) < target:
        separates = [_unused_first(grouped[slot], used_ids) for slot in ("tops", "bottoms", "shoes")]
        combo = _first_fresh(separates, seen)
        if combo is None:
            one_piece = [_unused_first(grouped[slot], used_ids) for slot in ("dresses", "shoes")]
            combo = _first_fresh(one_piece, seen)
        if combo is None:
            logger.info("Padding stopped at %s of %s outfits; pool exhausted", len(padded), target)
            break
        outfit = make_outfit(combo, len(padded) + 1)
        padded.append(outfit)
        seen.add(outfit.signature())
        used_ids.update(item.item_id for item in combo)
    return padded


def pad_to_three_outfits(
    outfits: Iterable[Outfit], pool: Sequence[CatalogItem], make_outfit: Optional[MakeOutfit] = None
) -> List[Outfit]:
    return pad_to_n(outfits, pool, make_outfit, target=3)


__all__ = ["PADDED_WHY", "default_make_outfit", "pad_to_n", "pad_to_three_outfits"]
