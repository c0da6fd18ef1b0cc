"""Best-effort constraint extraction from a free-text styling request.

This is keyword and negation detection, not a grammar. Each footwear family
is evaluated independently against a small declarative table, so a phrase
such as "no brown loafers" bans brown and loafers separately.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Pattern, Tuple

NEGATION = r"\b(?:no|without|exclude|avoid)\s+"


@dataclass(frozen=True)
class FootwearFamilyRule:
    family: str
    inclusion: str
    negation: Pattern[str]


def _negated(word: str) -> Pattern[str]:
    # One modifier may sit between the negation and the family: "no brown loafers".
    return re.compile(NEGATION + r"(?:[a-z]+\s+)?" + word + r"s?\b")


FOOTWEAR_FAMILIES: Tuple[FootwearFamilyRule, ...] = (
    FootwearFamilyRule("loafers", "loafer", _negated("loafer")),
    FootwearFamilyRule("sneakers", "sneaker", _negated("sneaker")),
    FootwearFamilyRule("boots", "boot", _negated("boot")),
)

BROWN_NEGATION = re.compile(NEGATION + r"brown\b")
BLAZER_KEYWORDS: Tuple[str, ...] = ("blazer", "sport coat", "sportcoat")

# First match wins.
COLOR_PRIORITY: Tuple[Tuple[str, str], ...] = (
    ("brown", "Brown"),
    ("navy", "Navy"),
    ("blue", "Blue"),
    ("black", "Black"),
)
DRESS_CODE_PRIORITY: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"business\s*casual"), "BusinessCasual"),
    (re.compile(r"smart\s*casual"), "SmartCasual"),
    (re.compile(r"\bcasual\b"), "Casual"),
)


@dataclass(frozen=True)
class ParsedConstraints:
    wants_loafers: bool = False
    wants_sneakers: bool = False
    wants_boots: bool = False
    wants_blazer: bool = False
    exclude_loafers: bool = False
    exclude_sneakers: bool = False
    exclude_boots: bool = False
    exclude_brown: bool = False
    color_wanted: Optional[str] = None
    dress_wanted: Optional[str] = None
    wants_brown: bool = False

    @property
    def excludes_all_footwear(self) -> bool:
        """True when every footwear family the parser knows is excluded."""

        return all(getattr(self, f"exclude_{rule.family}") for rule in FOOTWEAR_FAMILIES)

    def excludes_family(self, family: str) -> bool:
        return bool(getattr(self, f"exclude_{family}", False))

    def wants_family(self, family: str) -> bool:
        return bool(getattr(self, f"wants_{family}", False))

    def to_dict(self) -> Dict[str, Any]:
        """Camel-cased payload embedded in generator prompts."""

        raw = asdict(self)
        payload: Dict[str, Any] = {}
        for key, value in raw.items():
            head, *rest = key.split("_")
            payload[head + "".join(part.title() for part in rest)] = value
        return payload


def parse_constraints(text: Optional[str]) -> ParsedConstraints:
    """Parse want/exclude flags, wanted color and wanted dress code."""

    lowered = (text or "").lower()

    flags: Dict[str, bool] = {}
    for rule in FOOTWEAR_FAMILIES:
        excluded = bool(rule.negation.search(lowered))
        flags[f"exclude_{rule.family}"] = excluded
        flags[f"wants_{rule.family}"] = rule.inclusion in lowered and not excluded

    exclude_brown = bool(BROWN_NEGATION.search(lowered))
    color_wanted = None
    for keyword, color in COLOR_PRIORITY:
        if keyword not in lowered:
            continue
        if color == "Brown" and exclude_brown:
            continue
        color_wanted = color
        break

    dress_wanted = next((code for pattern, code in DRESS_CODE_PRIORITY if pattern.search(lowered)), None)

    return ParsedConstraints(
        wants_blazer=any(keyword in lowered for keyword in BLAZER_KEYWORDS),
        exclude_brown=exclude_brown,
        color_wanted=color_wanted,
        dress_wanted=dress_wanted,
        wants_brown=color_wanted == "Brown",
        **flags,
    )


__all__ = [
    "FOOTWEAR_FAMILIES",
    "FootwearFamilyRule",
    "ParsedConstraints",
    "parse_constraints",
]
