"""Structural validity gate for assembled outfits."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from models.catalog_item import CatalogItem
from models.outfit import Outfit

logger = logging.getLogger(__name__)

SWIMWEAR = "swimwear"
ACTIVEWEAR = "activewear"
ONE_PIECE = "one_piece"
SEPARATES = "separates"

SHAPES = (SWIMWEAR, ACTIVEWEAR, ONE_PIECE, SEPARATES)


def classify_shape(items: Iterable[CatalogItem]) -> Optional[str]:
    """Return the first accepted shape the items satisfy, else ``None``.

    Shapes are checked in priority order: swimwear (shoes optional),
    activewear with shoes, a dresses-slot piece with shoes, then
    top + bottom + shoes. Accessories, outerwear and undergarments never
    complete a shape on their own.
    """

    slots = {item.slot for item in items}
    if not slots:
        return None
    has_shoes = "shoes" in slots
    if SWIMWEAR in slots:
        return SWIMWEAR
    if ACTIVEWEAR in slots:
        return ACTIVEWEAR if has_shoes else None
    if "dresses" in slots:
        return ONE_PIECE if has_shoes else None
    if {"tops", "bottoms"} <= slots and has_shoes:
        return SEPARATES
    return None


def is_one_piece_shape(items: Iterable[CatalogItem]) -> bool:
    """True when the items carry a swimwear, activewear or dresses-slot piece."""

    slots = {item.slot for item in items}
    return bool(slots & {SWIMWEAR, ACTIVEWEAR, "dresses"})


def is_structurally_valid(items: Sequence[CatalogItem]) -> bool:
    return classify_shape(items) is not None


def validate_outfit_core(outfits: Iterable[Outfit]) -> List[Outfit]:
    """Keep only structurally valid outfits, preserving order."""

    accepted: List[Outfit] = []
    for outfit in outfits:
        if is_structurally_valid(outfit.items):
            accepted.append(outfit)
        else:
            logger.info("Dropping structurally invalid outfit '%s' (%s items)", outfit.title, len(outfit.items))
    return accepted


__all__ = [
    "ACTIVEWEAR",
    "ONE_PIECE",
    "SEPARATES",
    "SHAPES",
    "SWIMWEAR",
    "classify_shape",
    "is_one_piece_shape",
    "is_structurally_valid",
    "validate_outfit_core",
]
