"""Eligible-item pool construction with ordered degradation.

Hard bans (user guardrails and the agent capsule) are applied at every stage
and never relaxed. Only the soft scope widens, always in the same order:
agent palette, then neutral colors, then the adjacent dress tier. The full
unfiltered catalog is never reopened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from models.catalog_item import CatalogItem
from models.profiles import AgentProfile, UserPrefs, is_neutral

logger = logging.getLogger(__name__)

MIN_POOL = 14
HARD_BAN_FEEDBACK = -2.0

DRESS_HARDBANS: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {
        "Business": frozenset({"Hoodie", "Sneakers", "Shorts", "Hawaiian Shirt", "Windbreaker"}),
        "BusinessCasual": frozenset({"Hawaiian Shirt", "Athletic Shorts"}),
        "SmartCasual": frozenset({"Athletic Shorts"}),
        "UltraCasual": frozenset(),
    }
)

# Next less-formal tier; UltraCasual has none below it and borrows from Casual.
ADJACENT_TIER: Mapping[str, str] = MappingProxyType(
    {
        "Business": "BusinessCasual",
        "BusinessCasual": "SmartCasual",
        "SmartCasual": "Casual",
        "UltraCasual": "Casual",
    }
)


@dataclass(frozen=True)
class PoolResult:
    items: List[CatalogItem]
    stage: int
    diagnostics: Dict[str, object]


def passes_global_guardrails(item: CatalogItem, user_prefs: UserPrefs) -> bool:
    if item.item_id in user_prefs.ban_item_ids:
        return False
    if item.color and item.color.lower() in user_prefs.ban_colors:
        return False
    if item.subcategory and item.subcategory in user_prefs.ban_subcategories:
        return False
    return user_prefs.feedback_for(item.item_id) > HARD_BAN_FEEDBACK


def passes_agent_hard(item: CatalogItem, agent: AgentProfile) -> bool:
    if item.subcategory and item.subcategory in agent.avoid_subcategories:
        return False
    if item.color and any(item.color.lower() == color.lower() for color in agent.avoid_colors):
        return False
    return not (item.subcategory and item.subcategory in DRESS_HARDBANS[agent.dress_bias])


def palette_ok(item: CatalogItem, agent: AgentProfile, allow_neutrals: bool = False) -> bool:
    """Soft palette scope; colorless items and palette-less agents always pass."""

    if not item.color or agent.palette is None:
        return True
    if item.color in agent.palette:
        return True
    return allow_neutrals and is_neutral(item.color)


def tier_ok(item: CatalogItem, tiers: Iterable[str]) -> bool:
    if not item.dress_code:
        return True
    return item.dress_code in tuple(tiers)


def _stage_plan(agent: AgentProfile) -> Tuple[Tuple[bool, Tuple[str, ...]], ...]:
    own = (agent.dress_bias,)
    widened = own + (ADJACENT_TIER[agent.dress_bias],)
    return (
        (False, own),
        (True, own),
        (True, widened),
    )


def build_pool_result(
    catalog: Iterable[CatalogItem],
    user_prefs: Optional[UserPrefs] = None,
    agent: Optional[AgentProfile] = None,
    min_pool: int = MIN_POOL,
) -> PoolResult:
    """Build the eligible pool and report which degradation stage produced it."""

    user_prefs = user_prefs or UserPrefs()
    catalog = list(catalog)
    hard = [item for item in catalog if passes_global_guardrails(item, user_prefs)]
    diagnostics: Dict[str, object] = {
        "catalog_count": len(catalog),
        "after_guardrails": len(hard),
        "min_pool": min_pool,
        "stages": [],
    }
    if agent is None:
        logger.info("Built pool of %s items without agent scope", len(hard))
        return PoolResult(items=hard, stage=0, diagnostics=diagnostics)

    hard = [item for item in hard if passes_agent_hard(item, agent)]
    diagnostics["after_agent_bans"] = len(hard)

    stage_zero: List[CatalogItem] = []
    pool: List[CatalogItem] = []
    stage = 0
    for stage, (allow_neutrals, tiers) in enumerate(_stage_plan(agent)):
        pool = [item for item in hard if palette_ok(item, agent, allow_neutrals) and tier_ok(item, tiers)]
        diagnostics["stages"].append({"stage": stage, "count": len(pool), "tiers": list(tiers)})
        if stage == 0:
            stage_zero = pool
        if len(pool) >= min_pool:
            break
    else:
        if not pool:
            pool, stage = stage_zero, 0

    logger.info("Built pool for agent=%s stage=%s size=%s", agent.name, stage, len(pool))
    return PoolResult(items=pool, stage=stage, diagnostics=diagnostics)


def build_pool(
    catalog: Iterable[CatalogItem],
    user_prefs: Optional[UserPrefs] = None,
    agent: Optional[AgentProfile] = None,
    min_pool: int = MIN_POOL,
) -> List[CatalogItem]:
    return build_pool_result(catalog, user_prefs, agent, min_pool).items


__all__ = [
    "ADJACENT_TIER",
    "DRESS_HARDBANS",
    "MIN_POOL",
    "PoolResult",
    "build_pool",
    "build_pool_result",
    "palette_ok",
    "passes_agent_hard",
    "passes_global_guardrails",
    "tier_ok",
]
