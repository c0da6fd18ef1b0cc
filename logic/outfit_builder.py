"""Outfit assembly from the eligible pool or from generator output."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from logic.pairing import violates_pairs
from logic.scoring import soft_score
from logic.validation import GeneratorResponse
from models.catalog_item import CatalogItem
from models.outfit import Outfit
from models.profiles import AgentProfile, UserPrefs
from models.taxonomy import group_by_slot

logger = logging.getLogger(__name__)

CONTRAST_PENALTY = -1.5
DEFAULT_PER_SLOT_LIMIT = 8
LOCAL_WHY = "Built from agent palette & user prefs with pairing rules enforced."
LOCAL_WHY_NO_AGENT = "Built from the top-ranked items in your wardrobe."


@dataclass(frozen=True)
class AssemblyResult:
    outfits: List[Outfit]
    diagnostics: Dict[str, object]


def score_candidate(
    items: Sequence[CatalogItem],
    agent: Optional[AgentProfile],
    user_prefs: Optional[UserPrefs] = None,
) -> float:
    """Sum of item soft scores, minus a fixed penalty for clashing contrast."""

    if agent is None:
        return 0.0
    score = sum(soft_score(item, agent, user_prefs) for item in items)
    if agent.contrast_target == "low" and any((item.contrast or "").lower() == "high" for item in items):
        score += CONTRAST_PENALTY
    return score


def rank_candidates(
    outfits: Sequence[Outfit],
    agent: Optional[AgentProfile] = None,
    user_prefs: Optional[UserPrefs] = None,
    count: Optional[int] = None,
) -> List[Outfit]:
    """Score, dedupe by signature and order best first; ties keep input order."""

    scored = [outfit.with_score(score_candidate(outfit.items, agent, user_prefs)) for outfit in outfits]
    ordered = sorted(enumerate(scored), key=lambda entry: (-entry[1].score, entry[0]))
    picked: List[Outfit] = []
    seen = set()
    for _, outfit in ordered:
        signature = outfit.signature()
        if signature in seen:
            continue
        seen.add(signature)
        picked.append(outfit)
        if count is not None and len(picked) >= count:
            break
    return picked


def _first_compatible(
    core: List[CatalogItem], options: Sequence[CatalogItem], agent: Optional[AgentProfile]
) -> Optional[CatalogItem]:
    for option in options:
        if not violates_pairs(core + [option], agent):
            return option
    return None


def assemble_outfits_result(
    pool: Sequence[CatalogItem],
    agent: Optional[AgentProfile] = None,
    user_prefs: Optional[UserPrefs] = None,
    count: int = 3,
    per_slot_limit: int = DEFAULT_PER_SLOT_LIMIT,
) -> AssemblyResult:
    """Enumerate bottoms x shoes x tops from the pool.

    The pool is expected in ranked order, so each slot is capped to its first
    ``per_slot_limit`` entries. A core triple that breaks a pairing rule is
    skipped; optional outerwear and accessory layers are only added when the
    outfit still satisfies every rule with them.
    """

    grouped = group_by_slot(pool)
    tops = grouped["tops"][:per_slot_limit]
    bottoms = grouped["bottoms"][:per_slot_limit]
    shoes = grouped["shoes"][:per_slot_limit]
    outers = grouped["outerwear"]
    accessories = grouped["accessories"]

    candidates: List[Outfit] = []
    rejected = 0
    for bottom in bottoms:
        for shoe in shoes:
            for top in tops:
                core = [top, bottom, shoe]
                if violates_pairs(core, agent):
                    rejected += 1
                    continue
                outfit_items = list(core)
                outer = _first_compatible(outfit_items, outers, agent)
                if outer is not None:
                    outfit_items.append(outer)
                accessory = _first_compatible(outfit_items, accessories, agent)
                if accessory is not None:
                    outfit_items.append(accessory)
                candidates.append(
                    Outfit(title="", items=tuple(outfit_items), why=LOCAL_WHY if agent else LOCAL_WHY_NO_AGENT)
                )

    ranked = rank_candidates(candidates, agent, user_prefs, count)
    prefix = f"{agent.name}: look" if agent else "Look"
    outfits = [
        Outfit(title=f"{prefix} {index}", items=outfit.items, why=outfit.why, score=outfit.score)
        for index, outfit in enumerate(ranked, start=1)
    ]
    diagnostics: Dict[str, object] = {
        "slot_counts": {"tops": len(tops), "bottoms": len(bottoms), "shoes": len(shoes)},
        "candidates": len(candidates),
        "pair_rejections": rejected,
        "returned": len(outfits),
    }
    logger.info("Assembled %s local outfits from %s candidates", len(outfits), len(candidates))
    return AssemblyResult(outfits=outfits, diagnostics=diagnostics)


def assemble_outfits(
    pool: Sequence[CatalogItem],
    agent: Optional[AgentProfile] = None,
    user_prefs: Optional[UserPrefs] = None,
    count: int = 3,
    per_slot_limit: int = DEFAULT_PER_SLOT_LIMIT,
) -> List[Outfit]:
    return assemble_outfits_result(pool, agent, user_prefs, count, per_slot_limit).outfits


def resolve_generated_outfits(response: GeneratorResponse, indexed_pool: Sequence[CatalogItem]) -> List[Outfit]:
    """Map 1-based generator indices back onto the pool they were listed from.

    Out-of-range and repeated indices are dropped. Outfits left without any
    item are still returned so callers can decide on a fallback.
    """

    outfits: List[Outfit] = []
    for generated in response.outfits:
        items: List[CatalogItem] = []
        seen = set()
        for index in generated.items:
            if index < 1 or index > len(indexed_pool) or index in seen:
                logger.debug("Dropping generator index %s", index)
                continue
            seen.add(index)
            items.append(indexed_pool[index - 1])
        outfits.append(
            Outfit(
                title=generated.title or "Outfit",
                items=tuple(items),
                why=generated.why,
                missing=generated.missing,
            )
        )
    return outfits


__all__ = [
    "AssemblyResult",
    "assemble_outfits",
    "assemble_outfits_result",
    "rank_candidates",
    "resolve_generated_outfits",
    "score_candidate",
]
