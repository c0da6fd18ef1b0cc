"""Gender-presentation resolution and presentation-aware item filtering."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from models.catalog_item import CatalogItem

logger = logging.getLogger(__name__)

MASCULINE = "masculine"
FEMININE = "feminine"
MIXED = "mixed"

_SEPARATORS = re.compile(r"[\s_-]+")

HARD_BLOCKED_CATEGORIES = frozenset({"dresses", "skirts"})
# Matched against the subcategory only.
SUBCATEGORY_MARKERS: Tuple[str, ...] = (
    "skirt",
    "blouse",
    "gown",
    "stiletto",
    "pump",
    "slingback",
    "mary jane",
    "ballet flat",
    "clutch",
)
# Matched against the subcategory or the name.
SUBCATEGORY_OR_NAME_MARKERS: Tuple[str, ...] = ("earring", "bracelet", "anklet", "purse", "handbag")

_DIRECTIVE_RULE = "════════════════════════"


def resolve_presentation(raw: Optional[str]) -> str:
    """Bucket a free-form gender presentation value.

    Feminine markers are tested first because "male" is a substring of
    "female". Anything unmatched, including blanks, is ``mixed``.
    """

    normalized = _SEPARATORS.sub("", (raw or "").lower())
    if "female" in normalized or "feminin" in normalized or normalized == "woman":
        return FEMININE
    if "male" in normalized or "masculin" in normalized or normalized == "man":
        return MASCULINE
    return MIXED


def is_presentation_incompatible(
    main_category: Optional[str],
    subcategory: Optional[str],
    name: Optional[str] = None,
) -> bool:
    """Return True for feminine-coded garments hidden from masculine users."""

    if (main_category or "").strip().lower() in HARD_BLOCKED_CATEGORIES:
        return True

    sub = (subcategory or "").lower()
    label = (name or "").lower()

    if sub.endswith("dress"):
        return True
    if "heel" in sub and "heel tab" not in label:
        return True
    if any(marker in sub for marker in SUBCATEGORY_MARKERS):
        return True
    if "ballet" in label and "flat" in label:
        return True
    return any(marker in sub or marker in label for marker in SUBCATEGORY_OR_NAME_MARKERS)


def is_item_incompatible(item: CatalogItem) -> bool:
    return is_presentation_incompatible(item.main_category, item.subcategory, item.name)


def filter_for_presentation(items: Iterable[CatalogItem], presentation: str) -> List[CatalogItem]:
    """Drop incompatible items for masculine users; other buckets pass through."""

    items = list(items)
    if presentation != MASCULINE:
        return items
    kept = [item for item in items if not is_item_incompatible(item)]
    if len(kept) != len(items):
        logger.info("Presentation filter removed %s of %s items", len(items) - len(kept), len(items))
    return kept


def build_gender_directive(presentation: str) -> str:
    """Prompt block describing the presentation context, empty for mixed."""

    if presentation == MASCULINE:
        body = (
            "This user presents masculine. NEVER include dresses, skirts, gowns, blouses, heels, "
            "ballet flats, purses, or any feminine-coded garments. Only use items from the wardrobe list provided."
        )
    elif presentation == FEMININE:
        body = (
            "This user presents feminine. Dresses, skirts, and all feminine garments are allowed "
            "and encouraged when appropriate."
        )
    else:
        return ""
    return f"\n{_DIRECTIVE_RULE}\nGENDER CONTEXT\n{_DIRECTIVE_RULE}\n{body}\n"


__all__ = [
    "FEMININE",
    "MASCULINE",
    "MIXED",
    "build_gender_directive",
    "filter_for_presentation",
    "is_item_incompatible",
    "is_presentation_incompatible",
    "resolve_presentation",
]
