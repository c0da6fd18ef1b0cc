"""Generator prompt construction for outfit selection."""

from __future__ import annotations

import json
import re
from typing import List, Optional, Sequence

from logic.constraints import ParsedConstraints
from logic.presentation import build_gender_directive
from models.catalog_item import CatalogItem
from models.profiles import AgentProfile, StyleProfile
from models.taxonomy import detect_slots_in_text

GYM_HINT = re.compile(r"\b(gym|work ?out|workout|training|exercise)\b")
UPSCALE_HINT = re.compile(r"\b(upscale|smart\s*casual|business|formal|dressy|rooftop)\b")

SELECTION_RULES: List[str] = [
    "Build 2–3 complete outfits using ONLY catalog indices.",
    "Each outfit MUST include exactly ONE BOTTOM, exactly ONE pair of SHOES and at least ONE TOP. "
    "Outerwear and accessories are optional.",
    "Honor explicit loafer, color and dress-code cues from PARSED_CONSTRAINTS.",
    'If a required slot is unavailable in the catalog, still output the outfit with the available items '
    'and add a short "missing" note.',
    'NEVER return an empty "outfits" array. If only 1 outfit is possible, output exactly 1.',
    "Prefer earlier indices (they are higher-ranked by the app).",
    'Do NOT invent items. The "items" array MUST contain numeric indices only.',
    "Do not repeat the same index within a single outfit.",
]

INTENT_GUARDRAILS: List[str] = [
    "If gymIntent: sneakers + athletic bottoms, avoid dress shoes/blazers unless explicitly requested.",
    "If upscaleIntent: avoid hoodies/windbreakers/shorts unless clearly upscale.",
]

OUTPUT_FORMAT = """{
  "outfits": [
    {
      "title": "string",
      "items": [1,2,3],
      "why": "one concise sentence",
      "missing": "optional short note"
    }
  ]
}"""


def _join(values: Sequence[str]) -> str:
    return ", ".join(values) if values else "n/a"


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def effective_request(request_text: Optional[str], refinement: Optional[str] = None) -> str:
    """Fold a refinement into the base request so constraints see both."""

    base = (request_text or "").strip()
    note = (refinement or "").strip()
    if not note:
        return base
    return f"{base}. User refinement: {note}" if base else f"User refinement: {note}"


def format_catalog_lines(pool: Sequence[CatalogItem]) -> str:
    """Numbered catalog listing; indices are 1-based and follow pool order."""

    return "\n".join(
        f"{index}. {item.label} ({item.main_category or 'Other'})" for index, item in enumerate(pool, start=1)
    )


def context_hints(request_text: Optional[str]) -> dict:
    text = (request_text or "").lower()
    return {"gymIntent": bool(GYM_HINT.search(text)), "upscaleIntent": bool(UPSCALE_HINT.search(text))}


def style_context_block(agent: Optional[AgentProfile] = None, style_profile: Optional[StyleProfile] = None) -> str:
    """Agent persona block, else the user's own profile block, else empty."""

    if agent is not None:
        return "\n".join(
            [
                f'STYLE AGENT ACTIVE: "{agent.name}"',
                "TASTES & BIASES:",
                f"- Preferred colors: {_join(agent.preferred_colors)}",
                f"- Favorite brands: {_join(agent.favorite_brands)}",
                f"- Dress bias: {agent.dress_bias}",
                f"- Style keywords: {_join(agent.style_keywords)}",
                f"- Lifestyle: {_join(agent.lifestyle)}",
                f"- Fashion goals: {_join(agent.fashion_goals)}",
                "(Always reflect this stylist's taste; it overrides the user profile.)",
            ]
        )
    if style_profile is not None and not style_profile.is_empty():
        return "\n".join(
            [
                "USER STYLE PROFILE (use as primary guidance):",
                f"- Preferred colors: {_join(style_profile.preferred_colors)}",
                f"- Favorite brands: {_join(style_profile.favorite_brands)}",
                f"- Style keywords: {_join(style_profile.style_keywords)}",
                f"- Dress bias: {style_profile.dress_bias or 'n/a'}",
            ]
        )
    return ""


def build_outfit_prompt(
    pool: Sequence[CatalogItem],
    request_text: Optional[str],
    constraints: ParsedConstraints,
    agent: Optional[AgentProfile] = None,
    style_profile: Optional[StyleProfile] = None,
    presentation: str = "mixed",
    refinement: Optional[str] = None,
) -> str:
    """Compose the generator prompt over an already-ranked pool."""

    sections = [
        "You are a world-class personal stylist.",
        "",
        "CATALOG (use ONLY these items by numeric index):",
        format_catalog_lines(pool),
        "",
        f'USER REQUEST: "{request_text or "no explicit request"}"',
        f"PARSED_CONSTRAINTS: {json.dumps(constraints.to_dict())}",
    ]
    style_block = style_context_block(agent, style_profile)
    if style_block:
        sections.append(style_block)
    sections.append(f"CONTEXT_HINTS: {json.dumps(context_hints(request_text))}")

    if refinement and refinement.strip():
        focus = detect_slots_in_text(refinement)
        sections.append(f"User refinement: {refinement.strip()}")
        if focus:
            sections.append(f"REFINEMENT FOCUS SLOTS: {', '.join(focus)}")

    rules = list(SELECTION_RULES)
    if agent is not None:
        rules.append(
            "Outfits must strongly reflect STYLE_AGENT preferences (colors, brands, dressBias, styleKeywords, "
            "lifestyle, fashionGoals)."
        )
    sections.extend(["", "SELECTION RULES (strict):", _bullets(rules), "", "INTENT GUARDRAILS:", _bullets(INTENT_GUARDRAILS)])

    directive = build_gender_directive(presentation)
    if directive:
        sections.append(directive.rstrip("\n"))

    sections.extend(["", "OUTPUT FORMAT (STRICT JSON ONLY):", OUTPUT_FORMAT])
    return "\n".join(sections).strip()


__all__ = [
    "INTENT_GUARDRAILS",
    "SELECTION_RULES",
    "build_outfit_prompt",
    "context_hints",
    "effective_request",
    "format_catalog_lines",
    "style_context_block",
]
