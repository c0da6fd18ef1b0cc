"""Post-generation repair of outfits.

``finalize_outfit_slots`` repairs a single outfit: one item per singleton
slot, missing core pieces backfilled from the catalog and footwear brought in
line with the request. ``validate_outfits`` then applies situational
guardrails across the whole list and synthesises a fallback outfit when
nothing usable is left. Every step returns a new :class:`Outfit`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from logic.constraints import ParsedConstraints, parse_constraints
from logic.structure import is_one_piece_shape
from models.catalog_item import CatalogItem
from models.outfit import Outfit

logger = logging.getLogger(__name__)

MISSING_TOP = "A shirt"
MISSING_BOTTOM = "Dress trousers"
MISSING_FOOTWEAR = "Footwear"
MISSING_LOAFERS = "Loafers"
MISSING_BROWN_LOAFERS = "Brown loafers"

MAX_ITEMS = 6
UNKNOWN_INDEX = 999
PREFERRED_OUTERWEAR = ("blazer", "sport coat")
FOOTWEAR_KEYWORDS: Tuple[str, ...] = (
    "loafer",
    "sneaker",
    "boot",
    "heel",
    "pump",
    "oxford",
    "derby",
    "dress shoe",
    "sandal",
)

MODEL_NO_FOOTWEAR = re.compile(
    r"\b(no suitable .*footwear|no appropriate .*footwear|footwear.*unavailable|no .*shoe)", re.IGNORECASE
)
GYM_INTENT = re.compile(r"\b(gym|work\s?out|workout|training|exercise|hiit|running)\b")
BEACH_INTENT = re.compile(r"\b(beach|pool|swim|resort|vacation|cruise)\b")
WEDDING_INTENT = re.compile(r"\b(wedding|ceremony|reception)\b")
BLACK_TIE_INTENT = re.compile(r"\b(black\s*tie|white\s*tie|tux(edo)?)\b")

SNEAKER_PATTERN = re.compile(r"\b(sneakers?|trainers?|running|athletic)\b")
DRESS_SHOE_PATTERN = re.compile(r"\b(oxfords?|derbys?|monks?|dress\s*shoes?|loafers?)\b")
SHORTS_PATTERN = re.compile(r"\bshorts?\b")
HOODIE_PATTERN = re.compile(r"\bhoodie\b")
BOTTOM_PATTERN = re.compile(r"\b(shorts|trouser|pants|jeans|chinos|joggers?|sweatpants?|track)\b")
LIGHT_OUTERWEAR_PATTERN = re.compile(r"\b(linen|lightweight|unstructured)\b", re.IGNORECASE)
GYM_BOTTOM_PATTERN = re.compile(r"\b(shorts|joggers?|track|sweatpants?)\b")
FORMAL_BOTTOM_PATTERN = re.compile(r"\b(trousers?|dress|suit)\b")

FALLBACK_WHY = "Auto-constructed from top-ranked catalog to satisfy context and slot coverage."


def _sub(item: CatalogItem) -> str:
    return (item.subcategory or "").lower()


def _style(item: CatalogItem) -> str:
    return (item.shoe_style or "").lower()


def is_loafer(item: CatalogItem) -> bool:
    return "loafer" in _sub(item) or "loafer" in _style(item)


def is_sneaker(item: CatalogItem) -> bool:
    return "sneaker" in _sub(item) or "sneaker" in _style(item)


def is_boot(item: CatalogItem) -> bool:
    return "boot" in _sub(item) or "boot" in _style(item)


def is_footwear(item: CatalogItem) -> bool:
    """Shoes-slot items, plus uncategorised items whose subcategory names a shoe."""

    if item.slot == "shoes":
        return True
    return item.slot == "other" and any(keyword in _sub(item) for keyword in FOOTWEAR_KEYWORDS)


def is_brownish(item: CatalogItem) -> bool:
    color = (item.color or "").lower()
    family = (item.color_family or "").lower()
    return "brown" in color or family == "brown" or "tan" in color or "cognac" in color


def _is_top(item: CatalogItem) -> bool:
    return item.slot == "tops"


def _is_bottom(item: CatalogItem) -> bool:
    return item.slot == "bottoms"


def _is_outerwear(item: CatalogItem) -> bool:
    return item.slot == "outerwear"


class _Preferences:
    """Sort keys for singleton slots; lower sorts first."""

    def __init__(self, constraints: ParsedConstraints, catalog: Sequence[CatalogItem]) -> None:
        self.c = constraints
        self._index: Dict[str, int] = {}
        for position, item in enumerate(catalog):
            self._index.setdefault(item.item_id, position)

    def index(self, item: CatalogItem) -> int:
        return self._index.get(item.item_id, UNKNOWN_INDEX)

    def is_excluded_shoe(self, item: CatalogItem) -> bool:
        c = self.c
        return (
            (c.exclude_loafers and is_loafer(item))
            or (c.exclude_sneakers and is_sneaker(item))
            or (c.exclude_boots and is_boot(item))
            or (c.exclude_brown and is_brownish(item))
        )

    @property
    def wants_loafers(self) -> bool:
        return self.c.wants_loafers and not self.c.exclude_loafers

    @property
    def wants_brown(self) -> bool:
        return self.c.wants_brown and not self.c.exclude_brown

    def outerwear(self, item: CatalogItem) -> Tuple[int, int]:
        preferred = _sub(item) in PREFERRED_OUTERWEAR
        return (0 if preferred else 1, self.index(item))

    def top(self, item: CatalogItem) -> Tuple[int]:
        return (self.index(item),)

    def bottom(self, item: CatalogItem) -> Tuple[bool, int]:
        demote = self.c.dress_wanted == "BusinessCasual" and _sub(item) == "jeans"
        return (demote, self.index(item))

    def shoe(self, item: CatalogItem) -> Tuple[bool, bool, bool, int]:
        return (
            self.is_excluded_shoe(item),
            self.wants_loafers and not is_loafer(item),
            self.wants_brown and not is_brownish(item),
            self.index(item),
        )


def _prune_to_one(
    items: List[CatalogItem],
    predicate: Callable[[CatalogItem], bool],
    key: Callable[[CatalogItem], tuple],
) -> List[CatalogItem]:
    matches = [item for item in items if predicate(item)]
    if len(matches) <= 1:
        return items
    keep = min(matches, key=key)
    return [item for item in items if not predicate(item) or item is keep]


def _pick_best(
    catalog: Sequence[CatalogItem],
    predicate: Callable[[CatalogItem], bool],
    key: Optional[Callable[[CatalogItem], tuple]] = None,
) -> Optional[CatalogItem]:
    candidates = [item for item in catalog if predicate(item)]
    if not candidates:
        return None
    if key is None:
        return candidates[0]
    return min(candidates, key=key)


def _replace_first(
    items: List[CatalogItem], predicate: Callable[[CatalogItem], bool], replacement: CatalogItem
) -> List[CatalogItem]:
    for position, item in enumerate(items):
        if predicate(item):
            return items[:position] + [replacement] + items[position + 1 :]
    return items + [replacement]


def finalize_outfit_slots(outfit: Outfit, catalog: Sequence[CatalogItem], request_text: Optional[str]) -> Outfit:
    """Repair one outfit against the catalog and the request text."""

    c = parse_constraints(request_text)
    prefs = _Preferences(c, catalog)
    model_says_no_footwear = bool(MODEL_NO_FOOTWEAR.search(outfit.missing or ""))
    notes: List[str] = []

    items = _dedupe(outfit.items)
    items = _prune_to_one(items, _is_outerwear, prefs.outerwear)
    items = _prune_to_one(items, _is_top, prefs.top)
    items = _prune_to_one(items, _is_bottom, prefs.bottom)
    items = _prune_to_one(items, is_footwear, prefs.shoe)

    has_footwear = any(is_footwear(item) for item in items)

    if not is_one_piece_shape(items):
        if not any(_is_top(item) for item in items):
            top = _pick_best(catalog, _is_top)
            if top is not None:
                items.append(top)
            else:
                notes.append(MISSING_TOP)
        if not any(_is_bottom(item) for item in items):
            bottom = _pick_best(
                catalog, lambda item: _is_bottom(item) and _sub(item) != "shorts", prefs.bottom
            )
            if bottom is not None:
                items.append(bottom)
            else:
                notes.append(MISSING_BOTTOM)

    def allowed_shoe(item: CatalogItem) -> bool:
        return is_footwear(item) and not prefs.is_excluded_shoe(item)

    if c.excludes_all_footwear or model_says_no_footwear:
        if not has_footwear:
            notes.append(MISSING_FOOTWEAR)
    elif prefs.wants_loafers:
        current_loafer = next((item for item in items if is_loafer(item)), None)
        if current_loafer is None:
            loafer = None
            if prefs.wants_brown:
                loafer = _pick_best(catalog, lambda item: is_loafer(item) and is_brownish(item))
            loafer = loafer or _pick_best(catalog, is_loafer)
            if loafer is not None:
                items = _replace_first(items, is_footwear, loafer)
                if prefs.wants_brown and not is_brownish(loafer):
                    notes.append(MISSING_BROWN_LOAFERS)
            else:
                alternative = _pick_best(catalog, allowed_shoe, prefs.shoe)
                if alternative is not None:
                    items = _replace_first(items, is_footwear, alternative)
                notes.append(MISSING_BROWN_LOAFERS if prefs.wants_brown else MISSING_LOAFERS)
        elif prefs.wants_brown and not is_brownish(current_loafer):
            brown_loafer = _pick_best(catalog, lambda item: is_loafer(item) and is_brownish(item))
            if brown_loafer is not None:
                items = _replace_first(items, lambda item: item is current_loafer, brown_loafer)
            else:
                notes.append(MISSING_BROWN_LOAFERS)
    else:
        current_shoe = next((item for item in items if is_footwear(item)), None)
        if current_shoe is None or prefs.is_excluded_shoe(current_shoe):
            shoe = _pick_best(catalog, allowed_shoe, prefs.shoe)
            if shoe is not None:
                items = _replace_first(items, is_footwear, shoe)
            elif current_shoe is None:
                notes.append(MISSING_FOOTWEAR)

    repaired = outfit.with_items(_dedupe(items))
    for note in notes:
        repaired = repaired.with_missing(note)
    return repaired


def _dedupe(items: Sequence[CatalogItem]) -> List[CatalogItem]:
    seen = set()
    unique: List[CatalogItem] = []
    for item in items:
        if item.item_id in seen:
            continue
        seen.add(item.item_id)
        unique.append(item)
    return unique


@dataclass(frozen=True)
class RequestIntents:
    gym: bool = False
    beach: bool = False
    wedding: bool = False
    black_tie: bool = False

    @property
    def formal(self) -> bool:
        return self.wedding or self.black_tie

    def fallback_title(self) -> str:
        if self.beach:
            return "Beach Fallback"
        if self.wedding:
            return "Wedding Fallback"
        if self.black_tie:
            return "Black Tie Fallback"
        if self.gym:
            return "Gym Fallback"
        return "Smart Fallback"


def detect_intents(request_text: Optional[str]) -> RequestIntents:
    text = (request_text or "").lower()
    return RequestIntents(
        gym=bool(GYM_INTENT.search(text)),
        beach=bool(BEACH_INTENT.search(text)),
        wedding=bool(WEDDING_INTENT.search(text)),
        black_tie=bool(BLACK_TIE_INTENT.search(text)),
    )


def _is_shoes(item: CatalogItem) -> bool:
    return item.slot == "shoes"


# Shoes slot only: "Running Shorts" and "Oxford Shirt" are not footwear.
def _is_context_sneaker(item: CatalogItem) -> bool:
    return _is_shoes(item) and bool(SNEAKER_PATTERN.search(_sub(item)))


def _is_dress_shoe(item: CatalogItem) -> bool:
    return _is_shoes(item) and bool(DRESS_SHOE_PATTERN.search(_sub(item)))


def _is_context_bottom(item: CatalogItem) -> bool:
    return item.slot == "bottoms" or bool(BOTTOM_PATTERN.search(_sub(item)))


def _order_rank(item: CatalogItem) -> int:
    if item.slot == "tops":
        return 1
    if _is_context_bottom(item):
        return 2
    if item.slot == "shoes":
        return 3
    if item.slot == "outerwear":
        return 4
    return 5


def apply_context_guards(
    items: Sequence[CatalogItem], catalog: Sequence[CatalogItem], intents: RequestIntents
) -> List[CatalogItem]:
    """Apply gym, formal and beach guardrails, then order and cap the items.

    A guardrail shoe replaces the outfit's current shoe so the outfit keeps a
    single pair.
    """

    guarded = list(items)

    if intents.gym and not any(_is_context_sneaker(item) for item in guarded):
        sneaker = _pick_best(catalog, _is_context_sneaker)
        if sneaker is not None:
            guarded = _replace_first(guarded, _is_shoes, sneaker)

    if intents.formal:
        guarded = [
            item
            for item in guarded
            if not (SHORTS_PATTERN.search(_sub(item)) or HOODIE_PATTERN.search(_sub(item)) or _is_context_sneaker(item))
        ]
        if not any(_is_dress_shoe(item) for item in guarded):
            dress_shoe = _pick_best(catalog, _is_dress_shoe)
            if dress_shoe is not None:
                guarded = _replace_first(guarded, _is_shoes, dress_shoe)

    if intents.beach:
        heavy = next(
            (
                item
                for item in guarded
                if item.slot == "outerwear" and not LIGHT_OUTERWEAR_PATTERN.search(item.label)
            ),
            None,
        )
        if heavy is not None:
            guarded = [item for item in guarded if item is not heavy]

    guarded = sorted(_dedupe(guarded), key=_order_rank)
    return guarded[:MAX_ITEMS]


def build_fallback_outfit(catalog: Sequence[CatalogItem], intents: RequestIntents) -> Optional[Outfit]:
    """Deterministic top + bottom + shoe pick honouring the request context."""

    tops = [item for item in catalog if item.slot == "tops"]
    bottoms = [item for item in catalog if _is_context_bottom(item)]
    shoes = [item for item in catalog if _is_shoes(item)]

    def first(candidates: Sequence[CatalogItem], pattern: re.Pattern) -> Optional[CatalogItem]:
        return next((item for item in candidates if pattern.search(_sub(item))), None)

    bottom = None
    if intents.gym:
        bottom = first(bottoms, GYM_BOTTOM_PATTERN)
    if bottom is None and intents.beach:
        bottom = first(bottoms, SHORTS_PATTERN)
    if bottom is None and intents.formal:
        bottom = first(bottoms, FORMAL_BOTTOM_PATTERN)
    if bottom is None and bottoms:
        bottom = bottoms[0]

    shoe = None
    if intents.gym:
        shoe = next((item for item in shoes if _is_context_sneaker(item)), None)
    if shoe is None and intents.formal:
        shoe = next((item for item in shoes if _is_dress_shoe(item)), None)
    if shoe is None and shoes:
        shoe = shoes[0]

    items = [item for item in (tops[0] if tops else None, bottom, shoe) if item is not None]
    if not items:
        return None
    return Outfit(title=intents.fallback_title(), items=tuple(items), why=FALLBACK_WHY)


def padding_pool(pool: Sequence[CatalogItem], request_text: Optional[str]) -> List[CatalogItem]:
    """Pool for synthesised outfits, stripped of items the request rules out.

    Padding runs after the guardrails, so anything a guardrail would remove
    (formal-context shorts, hoodies and sneakers) and footwear the user
    excluded is kept out of it up front. When the guardrail forces a shoe
    type and the pool holds one, other shoes are dropped too.
    """

    intents = detect_intents(request_text)
    prefs = _Preferences(parse_constraints(request_text), pool)
    kept: List[CatalogItem] = []
    for item in pool:
        if intents.formal and (
            SHORTS_PATTERN.search(_sub(item)) or HOODIE_PATTERN.search(_sub(item)) or _is_context_sneaker(item)
        ):
            continue
        if is_footwear(item) and prefs.is_excluded_shoe(item):
            continue
        kept.append(item)

    # Formal wins over gym, matching the order the guardrails run in.
    forced_shoe: Optional[Callable[[CatalogItem], bool]] = None
    if intents.formal:
        forced_shoe = _is_dress_shoe
    elif intents.gym:
        forced_shoe = _is_context_sneaker
    if forced_shoe is not None and any(forced_shoe(item) for item in kept):
        kept = [item for item in kept if not _is_shoes(item) or forced_shoe(item)]
    return kept


def validate_outfits(
    request_text: Optional[str], catalog: Sequence[CatalogItem], outfits: Sequence[Outfit]
) -> List[Outfit]:
    """Apply context guardrails to every outfit, falling back when none survive."""

    intents = detect_intents(request_text)
    guarded = [outfit.with_items(apply_context_guards(outfit.items, catalog, intents)) for outfit in outfits]

    if not guarded or all(not outfit.items for outfit in guarded):
        fallback = build_fallback_outfit(catalog, intents)
        if fallback is not None:
            logger.info("Generated fallback outfit '%s'", fallback.title)
            return [fallback]
    return guarded


__all__ = [
    "DRESS_SHOE_PATTERN",
    "FALLBACK_WHY",
    "MISSING_BOTTOM",
    "MISSING_BROWN_LOAFERS",
    "MISSING_FOOTWEAR",
    "MISSING_LOAFERS",
    "MISSING_TOP",
    "RequestIntents",
    "SNEAKER_PATTERN",
    "apply_context_guards",
    "build_fallback_outfit",
    "detect_intents",
    "finalize_outfit_slots",
    "is_brownish",
    "is_footwear",
    "is_loafer",
    "padding_pool",
    "validate_outfits",
]
