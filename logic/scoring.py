"""Item scoring and deterministic reranking."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from logic.constraints import ParsedConstraints
from models.catalog_item import CatalogItem
from models.profiles import AgentProfile, UserPrefs, is_neutral

CONSTRAINTS_WEIGHT = 2.0
FEEDBACK_NUDGE = 0.2
FEEDBACK_SOFT_WEIGHT = 0.75
BASE_BIAS_STEP = 0.01
UPSCALE_DRESS_CODES = ("BusinessCasual", "Business")


def _text(value: object) -> str:
    return "" if value is None else str(value).strip()


def _is_family(sub: str, shoe: str, plural: str, singular: str) -> bool:
    return sub == plural or shoe == singular


def score_item_for_constraints(item: CatalogItem, constraints: ParsedConstraints, base_bias: float = 0.0) -> float:
    """Score one item against parsed request constraints.

    Exclusions carry large penalties, wanted footwear and blazers carry large
    bonuses, and color or dress-code matches add smaller nudges. For business
    casual requests, formality around 7 earns up to 10 points.
    """

    score = base_bias
    cat = _text(item.main_category).lower()
    sub = _text(item.subcategory).lower()
    shoe = _text(item.shoe_style).lower()
    dress = _text(item.dress_code)
    color = (_text(item.color) or _text(item.color_family)).lower()
    c = constraints

    is_loafer = _is_family(sub, shoe, "loafers", "loafer")
    is_sneaker = _is_family(sub, shoe, "sneakers", "sneaker")
    is_boot = _is_family(sub, shoe, "boots", "boot")

    if c.exclude_loafers and is_loafer:
        score -= 50
    if c.exclude_sneakers and is_sneaker:
        score -= 40
    if c.exclude_boots and is_boot:
        score -= 40
    if c.exclude_brown and "brown" in color:
        score -= 12

    if c.wants_loafers:
        if is_loafer:
            score += 50
        if c.wants_brown and "brown" in color:
            score += 10
        if cat == "shoes" and not is_loafer:
            score -= 15
    if c.wants_sneakers and is_sneaker:
        score += 35
    if c.wants_boots and is_boot:
        score += 35

    if c.wants_blazer:
        if sub in ("blazer", "sport coat"):
            score += 40
            if c.color_wanted == "Blue" and "blue" in color:
                score += 12
        elif cat == "outerwear":
            score -= 12

    if c.color_wanted and c.color_wanted.lower() in color:
        score += 10

    if c.dress_wanted:
        if dress == c.dress_wanted:
            score += 10
        if c.dress_wanted == "BusinessCasual" and sub == "sneakers":
            score -= 8
        if c.dress_wanted == "BusinessCasual" and sub == "jeans":
            score -= 6
    if c.dress_wanted == "BusinessCasual" and item.formality_score is not None:
        score += max(0.0, 10 - 3 * abs(item.formality_score - 7))

    if c.dress_wanted in UPSCALE_DRESS_CODES:
        if sub == "hoodie":
            score -= 20
        if sub == "windbreaker":
            score -= 15
        if "shorts" in (cat, sub):
            score -= 20
        if c.dress_wanted == "Business" and sub == "sneakers":
            score -= 12

    return score


def soft_score(item: CatalogItem, agent: AgentProfile, user_prefs: Optional[UserPrefs] = None) -> float:
    """Agent-facing style fit; feedback stays below unit weight."""

    score = 0.0
    color = (item.color or "").lower()
    if color and agent.palette is not None:
        if color in agent.palette.base:
            score += 3
        elif color in agent.palette.accents:
            score += 1.5
        elif is_neutral(color):
            score += 1
        else:
            score -= 1

    if agent.pattern_max_count and item.pattern and item.pattern.upper() != "SOLID":
        score += 0.5

    if user_prefs is not None:
        score += user_prefs.feedback_for(item.item_id) * FEEDBACK_SOFT_WEIGHT
    return score


def _feedback_nudge(item: CatalogItem, user_prefs: Optional[UserPrefs]) -> float:
    if user_prefs is None:
        return 0.0
    normalized = max(-1.0, min(1.0, user_prefs.feedback_for(item.item_id) / 5))
    return normalized * FEEDBACK_NUDGE


def score_items(
    catalog: Sequence[CatalogItem],
    constraints: ParsedConstraints,
    agent: Optional[AgentProfile] = None,
    user_prefs: Optional[UserPrefs] = None,
) -> List[Tuple[float, int, CatalogItem]]:
    """Return ``(total, original_index, item)`` triples in catalog order."""

    size = len(catalog)
    scored = []
    for index, item in enumerate(catalog):
        base_bias = (size - index) * BASE_BIAS_STEP
        total = CONSTRAINTS_WEIGHT * score_item_for_constraints(item, constraints, base_bias)
        if agent is not None:
            total += soft_score(item, agent, user_prefs)
        else:
            total += _feedback_nudge(item, user_prefs)
        scored.append((total, index, item))
    return scored


def rerank(
    catalog: Sequence[CatalogItem],
    constraints: ParsedConstraints,
    agent: Optional[AgentProfile] = None,
    user_prefs: Optional[UserPrefs] = None,
) -> List[CatalogItem]:
    """Sort by descending score; equal scores keep catalog order."""

    scored = score_items(catalog, constraints, agent, user_prefs)
    scored.sort(key=lambda entry: (-entry[0], entry[1]))
    return [item for _, _, item in scored]


__all__ = [
    "CONSTRAINTS_WEIGHT",
    "rerank",
    "score_item_for_constraints",
    "score_items",
    "soft_score",
]
