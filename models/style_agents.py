"""Preset style-agent personas."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from models.profiles import AgentProfile, Palette

logger = logging.getLogger(__name__)

STYLE_AGENTS: Mapping[str, AgentProfile] = MappingProxyType(
    {
        "agent1": AgentProfile(
            name="Pro Stylist – Clean Minimal",
            dress_bias="BusinessCasual",
            preferred_colors=("Black", "White", "Gray"),
            avoid_colors=("Brights", "Patterns"),
            avoid_subcategories=("Baggy", "Graphic Tee", "Cargo"),
            palette=Palette(base=("black", "white", "gray", "navy"), accents=("charcoal", "blue")),
            contrast_target="low",
            pattern_max_count=1,
            avoid_pair={"sport_coat": ("sneakers",)},
            favorite_brands=("Theory", "Eton", "Jil Sander"),
            style_keywords=("Minimal", "Tailored", "Polished", "Understated"),
            lifestyle=("Work", "Networking", "Formal Events"),
            fashion_goals=("Always look sharp and professional",),
        ),
        "agent2": AgentProfile(
            name="Rebel Streetwear",
            dress_bias="UltraCasual",
            preferred_colors=("Black", "Red", "Neon"),
            avoid_colors=("Beige", "Pastel"),
            avoid_subcategories=("Dress Shirt", "Loafers", "Suit"),
            palette=Palette(base=("black", "red"), accents=("neon", "white", "olive")),
            contrast_target="high",
            favorite_brands=("Amiri", "Off-White", "Nike", "Supreme"),
            style_keywords=("Bold", "Youthful", "Oversized", "Statement"),
            lifestyle=("City Nights", "Concerts", "Skate Parks"),
            fashion_goals=("Stand out, break rules",),
        ),
        "agent3": AgentProfile(
            name="Classic Heritage Gentleman",
            dress_bias="SmartCasual",
            preferred_colors=("Brown", "Olive", "Navy", "Beige"),
            avoid_colors=("Neon", "Black"),
            avoid_subcategories=("Sneakers", "Hoodies", "Cargo"),
            palette=Palette(base=("brown", "olive", "navy", "beige"), accents=("tan", "burgundy", "cream")),
            contrast_target="low",
            must_pair={"sport_coat": ("loafers", "derbies")},
            avoid_pair={"sport_coat": ("dress shoes",)},
            favorite_brands=("Burberry", "Ralph Lauren", "Brooks Brothers"),
            style_keywords=("Traditional", "Timeless", "Elegant", "Country Club"),
            lifestyle=("Travel", "Golf", "Fine Dining", "Family Events"),
            fashion_goals=("Invest in timeless pieces",),
        ),
    }
)


def get_style_agent(key: Optional[str]) -> Optional[AgentProfile]:
    """Return a preset agent by key, or ``None`` when unknown or blank."""

    if not key:
        return None
    agent = STYLE_AGENTS.get(key.strip().lower())
    if agent is None:
        logger.warning("Unknown style agent '%s'; continuing without persona", key)
    return agent


__all__ = ["STYLE_AGENTS", "get_style_agent"]
